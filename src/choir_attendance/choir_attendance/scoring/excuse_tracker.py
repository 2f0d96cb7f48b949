from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from ..common.datetime_utils import month_key
from ..core.constants import MONTHLY_EXCUSE_CAP
from ..core.enums import AttendanceMark


class ExcuseAllowanceTracker:
    """Monthly cap on plain "Excused" marks for ONE member.

    Feed marks in ascending date order: the first ``monthly_cap`` Excused marks
    of a calendar month keep their status, later ones in the same month are
    scored as Absent. "Excused but Present" is neither counted nor capped.
    The counter is per YYYY-MM bucket, not a rolling window.
    """

    def __init__(self, monthly_cap: int = MONTHLY_EXCUSE_CAP):
        self._cap = int(monthly_cap)
        self._used: dict[str, int] = {}
        self._last_day: Optional[date] = None

    def effective_status(self, day: date, status) -> Optional[AttendanceMark]:
        if self._last_day is not None and day < self._last_day:
            raise ValueError(f"Marks must be fed in date order ({day} after {self._last_day})")
        self._last_day = day

        mark = AttendanceMark.coerce(status)
        if mark != AttendanceMark.EXCUSED:
            return mark

        key = month_key(day)
        self._used[key] = self._used.get(key, 0) + 1
        if self._used[key] > self._cap:
            return AttendanceMark.ABSENT
        return mark

    def used_in_month(self, day: date) -> int:
        return self._used.get(month_key(day), 0)


def effective_statuses(
    entries: Iterable[tuple[date, object]],
    *,
    monthly_cap: int = MONTHLY_EXCUSE_CAP,
) -> list[Optional[AttendanceMark]]:
    """Map chronologically ordered (date, status) pairs to effective statuses."""
    tracker = ExcuseAllowanceTracker(monthly_cap)
    return [tracker.effective_status(day, status) for day, status in entries]
