from __future__ import annotations

import re
from typing import Iterable, Mapping, Optional, Sequence

from ..attendance.model import AttendanceEvent
from ..common.datetime_utils import format_day
from ..core.constants import NOT_MARKED, PLACEHOLDER
from ..core.enums import AttendanceMark, Category, TeamType
from ..members.model import Member
from ..scoring.model import CohortResult, MemberStanding, ScoreResult, ScoreWindow
from ..teams.model import Team
from ..teams.service import roster_order
from .model import Report, ReportKind, ReportTable

SUMMARY = "Summary"
BREAKDOWN = "Gathering Type Breakdown"
EVENT_LOG = "Detailed Event Log"
TOP_PERFORMERS = "Top Performers"
NEEDS_ATTENTION = "Needs Attention"
ACTIVITY = "Activity Counts"

_LOG_COLUMNS = ("Date", "Type", "Event Name", "Status", "Reason")


def _pct(value: float) -> str:
    return f"{value:.1f}%"


def _points(earned: float, possible: float) -> str:
    return f"{earned:.1f} / {possible:.1f}"


def _slug(text: str, sep: str = "_") -> str:
    return re.sub(r"\s+", sep, (text or "").strip())


class ReportDataBuilder:
    """Projects scores, cohort stats and raw sheets into export tables.

    No scoring happens here; everything is taken from the results passed in.
    """

    def event_log(self, *, member_id: str, window: ScoreWindow, events: Sequence[AttendanceEvent]) -> ReportTable:
        """Every event in the window, oldest first, with this member's mark."""
        rows = []
        for event in sorted((e for e in events if window.contains(e.event_date)), key=lambda e: e.event_date):
            record = event.record_for(member_id)
            status = record.status if record and record.status else NOT_MARKED
            reason = PLACEHOLDER
            if record and AttendanceMark.coerce(status) in (AttendanceMark.EXCUSED, AttendanceMark.EXCUSED_BUT_PRESENT):
                reason = (record.reason or "").strip() or PLACEHOLDER
            rows.append(
                (
                    format_day(event.event_date),
                    str(event.category),
                    (event.event_name or "").strip() or PLACEHOLDER,
                    str(status),
                    reason,
                )
            )
        return ReportTable(title=EVENT_LOG, columns=_LOG_COLUMNS, rows=tuple(rows))

    def _breakdown(self, score: ScoreResult, *, with_count: bool) -> ReportTable:
        rows = []
        for category in Category:
            data = score.per_category.get(category)
            if not data:
                continue
            row = [category.value]
            if with_count:
                row.append(str(data.count))
            row += [_points(data.points_earned, data.points_possible), _pct(data.percentage)]
            rows.append(tuple(row))
        columns = ("Gathering Type", "Count", "Points", "Percentage") if with_count else ("Gathering Type", "Points", "Percentage")
        return ReportTable(title=BREAKDOWN, columns=columns, rows=tuple(rows))

    def _member_summary(self, score: ScoreResult, *, period: str) -> ReportTable:
        return ReportTable(
            title=SUMMARY,
            columns=(f"{period} Summary", "Value"),
            rows=(
                ("Attendance %", _pct(score.percentage)),
                ("Total Points Earned", _points(score.points_earned, score.points_possible)),
                ("Excused Absences", str(score.excused_count)),
                ("Excuse Balance", f"{score.excuse_balance} / {score.excuse_allowance}"),
                ("Excused but Present", str(score.excused_but_present_count)),
            ),
        )

    def yearly_member_report(self, *, member_name: str, score: ScoreResult, events: Sequence[AttendanceEvent]) -> Report:
        window = score.window
        return Report(
            kind=ReportKind.YEARLY_MEMBER,
            title=f"Attendance Report - {window.year}",
            subtitle=member_name,
            basename=f"Yearly_Report_{window.year}_{_slug(member_name)}",
            tables=(
                self._member_summary(score, period=window.label),
                self._breakdown(score, with_count=False),
                self.event_log(member_id=score.member_id, window=window, events=events),
            ),
        )

    def monthly_member_report(self, *, member_name: str, score: ScoreResult, events: Sequence[AttendanceEvent]) -> Report:
        window = score.window
        if not window.is_monthly:
            raise ValueError("monthly report needs a (year, month) window")
        return Report(
            kind=ReportKind.MONTHLY_MEMBER,
            title="Monthly Attendance Report",
            subtitle=f"{member_name} - Report for: {window.label}",
            basename=f"Monthly_Report_{_slug(member_name)}_{window.year}_{window.month + 1}",
            tables=(
                self._member_summary(score, period="Monthly"),
                self._breakdown(score, with_count=True),
                self.event_log(member_id=score.member_id, window=window, events=events),
            ),
        )

    def member_report(self, *, member_name: str, score: ScoreResult, events: Sequence[AttendanceEvent]) -> Report:
        if score.window.is_monthly:
            return self.monthly_member_report(member_name=member_name, score=score, events=events)
        return self.yearly_member_report(member_name=member_name, score=score, events=events)

    @staticmethod
    def _standing_rows(standings: Iterable[MemberStanding]) -> tuple[tuple[str, ...], ...]:
        return tuple((s.name, _pct(s.percentage)) for s in standings)

    def cohort_dashboard(self, cohort: CohortResult) -> Report:
        window = cohort.window
        suffix = f"{window.year}_{window.month + 1:02d}" if window.is_monthly else f"{window.year}"
        summary = ReportTable(
            title=SUMMARY,
            columns=(f"{window.label} Summary", "Value"),
            rows=(
                ("Total Members", str(cohort.total_members)),
                ("Total Events", str(cohort.total_events)),
                ("Average Attendance", _pct(cohort.average_percentage)),
                ("Men Attendance", _pct(cohort.men_average_percentage)),
                ("Women Attendance", _pct(cohort.women_average_percentage)),
            ),
        )
        activity = ReportTable(
            title=ACTIVITY,
            columns=("Gathering Type", "Events"),
            rows=tuple((c.value, str(n)) for c, n in cohort.activity_counts.items()),
        )
        return Report(
            kind=ReportKind.COHORT_DASHBOARD,
            title=f"Choir Attendance Dashboard - {window.label}",
            subtitle=f"{cohort.total_members} members",
            basename=f"Dashboard_{suffix}",
            tables=(
                summary,
                ReportTable(title=TOP_PERFORMERS, columns=("Name", "Attendance %"), rows=self._standing_rows(cohort.top_performers)),
                ReportTable(title=NEEDS_ATTENTION, columns=("Name", "Attendance %"), rows=self._standing_rows(cohort.needs_attention)),
                activity,
            ),
        )

    def event_sheet(self, event: AttendanceEvent) -> Report:
        """One attendance sheet, members sorted by name (for printing)."""
        on = format_day(event.event_date)
        name = (event.event_name or "").strip()
        rows = tuple(
            (r.member_name, str(r.status or NOT_MARKED), (r.reason or "").strip() or PLACEHOLDER)
            for r in sorted(event.records, key=lambda r: (r.member_name or "").casefold())
        )
        return Report(
            kind=ReportKind.EVENT_SHEET,
            title=f"Attendance Report: {event.category}",
            subtitle=f"{name} on {on}" if name else f"on {on}",
            basename=f"attendance_{event.event_date.isoformat()}_{_slug(str(event.category), '-')}",
            tables=(ReportTable(title="Attendance", columns=("Member Name", "Status", "Reason"), rows=rows),),
        )

    def team_roster(
        self,
        *,
        team_type: TeamType,
        teams: Sequence[Team],
        members: Mapping[str, Member],
        unassigned: Sequence[Member] = (),
    ) -> Report:
        """Teams of one rotation, organists first, then women, then by name."""
        title = f"{'Sunday' if team_type == TeamType.SUNDAY else 'Marriage'} Teams"
        rows = []
        for team in sorted((t for t in teams if t.team_type == team_type), key=lambda t: t.name.casefold()):
            roster = roster_order(members[i] for i in team.member_ids if i in members)
            heading = f"{team.name} ({len(roster)} Members)"
            if not roster:
                rows.append((heading, "- No members in this team -"))
            for m in roster:
                rows.append((heading, f"{m.name} (Organist)" if m.is_organist else m.name))
        if unassigned:
            heading = f"Unassigned ({len(unassigned)} Members)"
            rows.extend((heading, m.name) for m in sorted(unassigned, key=lambda m: m.name.casefold()))
        return Report(
            kind=ReportKind.TEAM_ROSTER,
            title=title,
            subtitle="",
            basename=f"{_slug(title)}_Report",
            tables=(ReportTable(title=f"{title} List", columns=("Team", "Member"), rows=tuple(rows)),),
        )


def build_report_rows(
    result,
    kind: ReportKind,
    *,
    member_name: Optional[str] = None,
    events: Sequence[AttendanceEvent] = (),
    builder: Optional[ReportDataBuilder] = None,
) -> Report:
    """Single entry point used by exporters: shape ``result`` as ``kind``."""
    builder = builder or ReportDataBuilder()
    kind = ReportKind(kind)

    if kind == ReportKind.COHORT_DASHBOARD:
        return builder.cohort_dashboard(result)
    if kind == ReportKind.EVENT_SHEET:
        return builder.event_sheet(result)

    name = member_name or result.member_id
    if kind == ReportKind.YEARLY_MEMBER:
        return builder.yearly_member_report(member_name=name, score=result, events=events)
    if kind == ReportKind.MONTHLY_MEMBER:
        return builder.monthly_member_report(member_name=name, score=result, events=events)
    if kind == ReportKind.EVENT_LOG:
        table = builder.event_log(member_id=result.member_id, window=result.window, events=events)
        return Report(
            kind=kind,
            title=f"{EVENT_LOG} - {result.window.label}",
            subtitle=name,
            basename=f"Event_Log_{_slug(name)}_{result.window.year}",
            tables=(table,),
        )
    raise ValueError(f"Unsupported report kind for build_report_rows: {kind.value}")
