from __future__ import annotations

from typing import Optional, Sequence

from ..attendance.model import AttendanceEvent
from ..core.exceptions import NotFoundError, ValidationError
from ..core.enums import TeamType
from ..members.model import Member
from ..scoring.model import ScoreWindow
from ..scoring.service import ScoringService
from ..snapshots.model import Snapshot
from ..teams.model import Team
from .builder import ReportDataBuilder
from .exporters.csv_exporter import render_csv
from .exporters.pdf_exporter import render_pdf
from .model import Report

EXPORTERS = {
    "pdf": (render_pdf, "application/pdf"),
    "csv": (render_csv, "text/csv"),
}


class ReportService:
    """Use case: turn scores and sheets into downloadable files."""

    def __init__(self, scoring: ScoringService, *, builder: Optional[ReportDataBuilder] = None):
        self._scoring = scoring
        self._builder = builder or ReportDataBuilder()

    def member_report(self, snapshot: Snapshot, member_id: str, window: ScoreWindow) -> Report:
        member = snapshot.member(member_id)
        if member is None:
            raise NotFoundError("Member does not exist")
        score = self._scoring.compute_member_score(snapshot, member_id, window)
        return self._builder.member_report(member_name=member.name, score=score, events=snapshot.events)

    def cohort_report(self, snapshot: Snapshot, window: ScoreWindow) -> Report:
        return self._builder.cohort_dashboard(self._scoring.compute_cohort_stats(snapshot, window))

    def event_sheet(self, event: AttendanceEvent) -> Report:
        return self._builder.event_sheet(event)

    def team_roster(
        self,
        team_type: TeamType,
        *,
        teams: Sequence[Team],
        members: Sequence[Member],
        unassigned: Sequence[Member] = (),
    ) -> Report:
        return self._builder.team_roster(
            team_type=team_type,
            teams=teams,
            members={m.member_id: m for m in members},
            unassigned=unassigned,
        )

    @staticmethod
    def export(report: Report, fmt: str) -> tuple[bytes, str, str]:
        """Return ``(payload, mimetype, filename)`` for ``fmt`` ('pdf' or 'csv')."""
        fmt = (fmt or "").lower()
        if fmt not in EXPORTERS:
            raise ValidationError(f"Unsupported export format: {fmt!r}")
        render, mimetype = EXPORTERS[fmt]
        return render(report), mimetype, report.filename(fmt)
