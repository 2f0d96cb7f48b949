from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping, Optional

from ..common.datetime_utils import MONTH_NAMES
from ..core.enums import AnomalyKind, AttendanceMark, Category, Gender


@dataclass(frozen=True)
class ScoreWindow:
    """Time scope of an aggregate: a calendar year, or one month of it.

    ``month`` is zero-based (0 = January) to match the dashboards' selectors.
    """

    year: int
    month: Optional[int] = None

    def __post_init__(self):
        if self.month is not None and not 0 <= self.month <= 11:
            raise ValueError(f"month must be in 0..11, got {self.month!r}")

    @classmethod
    def parse(cls, year, month=None, *, default_year: Optional[int] = None) -> "ScoreWindow":
        """Build a window from query-string style values ('all' = whole year)."""
        y = str(year).strip() if year is not None else ""
        if not y:
            if default_year is None:
                raise ValueError("year is required")
            y = str(default_year)
        m = str(month).strip().lower() if month is not None else ""
        return cls(year=int(y), month=None if m in {"", "all"} else int(m))

    @property
    def is_monthly(self) -> bool:
        return self.month is not None

    @property
    def label(self) -> str:
        if self.month is None:
            return f"Year {self.year}"
        return f"{MONTH_NAMES[self.month]} {self.year}"

    def contains(self, day: date) -> bool:
        if day.year != self.year:
            return False
        return self.month is None or day.month == self.month + 1


@dataclass(frozen=True)
class RecordAnomaly:
    """A soft data problem noticed while scoring; never blocks aggregation."""

    kind: AnomalyKind
    event_id: Optional[int]
    member_id: Optional[str]
    detail: str = ""


@dataclass(frozen=True)
class ScoredEvent:
    """How one event contributed to a member's score."""

    event_id: int
    event_date: date
    category: Category
    status: str
    effective_status: Optional[AttendanceMark]
    multiplier: float
    points_earned: float
    points_possible: float


@dataclass(frozen=True)
class CategoryScore:
    category: Category
    points_earned: float = 0.0
    points_possible: float = 0.0
    count: int = 0

    @property
    def percentage(self) -> float:
        if self.points_possible <= 0:
            return 0.0
        return self.points_earned / self.points_possible * 100


@dataclass(frozen=True)
class ScoreResult:
    member_id: str
    window: ScoreWindow
    points_earned: float = 0.0
    points_possible: float = 0.0
    percentage: float = 0.0
    per_category: Mapping[Category, CategoryScore] = field(default_factory=lambda: MappingProxyType({}))
    excused_count: int = 0
    excused_but_present_count: int = 0
    excuse_allowance: int = 0
    events: tuple[ScoredEvent, ...] = ()
    anomalies: tuple[RecordAnomaly, ...] = field(default=(), compare=False)

    @property
    def excuse_balance(self) -> int:
        return max(0, self.excuse_allowance - self.excused_count)


@dataclass(frozen=True)
class MemberStanding:
    """One row of the cohort ranking."""

    member_id: str
    name: str
    gender: Gender
    points_earned: float
    points_possible: float
    percentage: float


@dataclass(frozen=True)
class CohortResult:
    window: ScoreWindow
    total_members: int = 0
    total_events: int = 0
    average_percentage: float = 0.0
    men_average_percentage: float = 0.0
    women_average_percentage: float = 0.0
    top_performers: tuple[MemberStanding, ...] = ()
    needs_attention: tuple[MemberStanding, ...] = ()
    standings: tuple[MemberStanding, ...] = ()
    activity_counts: Mapping[Category, int] = field(default_factory=lambda: MappingProxyType({}))
