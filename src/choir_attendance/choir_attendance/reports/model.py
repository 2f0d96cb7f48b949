from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class ReportKind(str, Enum):
    YEARLY_MEMBER = "yearly_member"
    MONTHLY_MEMBER = "monthly_member"
    EVENT_LOG = "event_log"
    COHORT_DASHBOARD = "cohort_dashboard"
    EVENT_SHEET = "event_sheet"
    TEAM_ROSTER = "team_roster"


@dataclass(frozen=True)
class ReportTable:
    """Plain rows + headers, ready for any tabular sink (PDF, CSV, JSON)."""

    title: str
    columns: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...] = ()

    def as_dicts(self) -> list[dict]:
        return [dict(zip(self.columns, r)) for r in self.rows]


@dataclass(frozen=True)
class Report:
    kind: ReportKind
    title: str
    subtitle: str
    basename: str
    tables: tuple[ReportTable, ...] = ()

    def table(self, title: str) -> Optional[ReportTable]:
        for t in self.tables:
            if t.title == title:
                return t
        return None

    def filename(self, extension: str) -> str:
        return f"{self.basename}.{extension.lstrip('.')}"
