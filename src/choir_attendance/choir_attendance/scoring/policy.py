from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping, Optional

from ..core import constants
from ..core.enums import AttendanceMark, Category

DEFAULT_POINT_VALUES: Mapping[Category, float] = {
    Category.SPECIAL_MASS_PRACTICE: 40,
    Category.SPECIAL_MASS: 50,
    Category.SUNDAY_MORNING_MASS: 30,
    Category.SUNDAY_EVENING_MASS: 30,
    Category.SATURDAY_PRACTICE: 25,
    Category.MARRIAGE_MASS: 40,
    Category.CHOIR_MEETING: 15,
    Category.CLEANING: 10,
    Category.OTHERS: 10,
    # Daily mass carries no credit.
}

DEFAULT_MULTIPLIERS: Mapping[AttendanceMark, float] = {
    AttendanceMark.PRESENT: 1.0,
    AttendanceMark.ABSENT: 0.0,
    AttendanceMark.EXCUSED_BUT_PRESENT: 0.4,
    AttendanceMark.EXCUSED: 0.2,
}

# settings.SCORING key -> policy field
_OVERRIDABLE = {
    "MONTHLY_EXCUSE_CAP": ("monthly_excuse_cap", int),
    "YEARLY_EXCUSE_ALLOWANCE": ("yearly_excuse_allowance", int),
    "TOP_PERFORMER_THRESHOLD": ("top_performer_threshold", float),
    "NEEDS_ATTENTION_THRESHOLD": ("needs_attention_threshold", float),
    "RANKING_LIMIT": ("ranking_limit", int),
    "REMINDER_HOUR": ("reminder_hour", int),
}


@dataclass(frozen=True)
class ScoringPolicy:
    """Point table, status multipliers and the business constants around them.

    Both lookups are total: anything outside the known categories/statuses
    (None, a typo in an old row, a category added later) is worth zero.
    """

    point_values: Mapping[Category, float] = field(default_factory=lambda: dict(DEFAULT_POINT_VALUES))
    multipliers: Mapping[AttendanceMark, float] = field(default_factory=lambda: dict(DEFAULT_MULTIPLIERS))
    monthly_excuse_cap: int = constants.MONTHLY_EXCUSE_CAP
    yearly_excuse_allowance: int = constants.YEARLY_EXCUSE_ALLOWANCE
    top_performer_threshold: float = constants.TOP_PERFORMER_THRESHOLD
    needs_attention_threshold: float = constants.NEEDS_ATTENTION_THRESHOLD
    ranking_limit: int = constants.RANKING_LIMIT
    reminder_hour: int = constants.REMINDER_HOUR

    @classmethod
    def from_settings(cls, overrides: Optional[Mapping[str, object]] = None) -> "ScoringPolicy":
        kwargs = {}
        for key, value in (overrides or {}).items():
            if value is None or value == "":
                continue
            target = _OVERRIDABLE.get(str(key).upper())
            if not target:
                raise ValueError(f"Unknown scoring setting: {key}")
            name, cast = target
            kwargs[name] = cast(value)
        return cls(**kwargs)

    def point_value(self, category) -> float:
        c = Category.coerce(category)
        if c is None:
            return 0.0
        return float(self.point_values.get(c, 0))

    def multiplier(self, status) -> float:
        mark = AttendanceMark.coerce(status)
        if mark is None:
            return 0.0
        return float(self.multipliers.get(mark, 0.0))

    def is_scored(self, category) -> bool:
        return self.point_value(category) > 0

    def excuse_allowance(self, *, monthly: bool) -> int:
        return self.monthly_excuse_cap if monthly else self.yearly_excuse_allowance
