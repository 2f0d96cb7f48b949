from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..core.enums import AttendanceMark, Category


@dataclass(frozen=True)
class AttendanceRecord:
    """One member's mark inside an attendance event.

    ``member_name`` is the name at the time the sheet was saved; it is not
    updated when the member is renamed. ``status`` keeps the raw stored value
    so malformed historical rows can still be shown.
    """

    member_id: str
    member_name: str
    status: str
    reason: str = ""

    @property
    def mark(self) -> Optional[AttendanceMark]:
        return AttendanceMark.coerce(self.status)


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one recorded gathering with its (sparse) records."""

    event_id: int
    event_date: date
    category: str
    event_name: str = ""
    records: tuple[AttendanceRecord, ...] = ()

    @property
    def kind(self) -> Optional[Category]:
        return Category.coerce(self.category)

    def record_for(self, member_id: str) -> Optional[AttendanceRecord]:
        for r in self.records:
            if r.member_id == member_id:
                return r
        return None


@dataclass(frozen=True)
class MarkInput:
    """Write-side input for one member on an attendance sheet."""

    member_id: str
    status: Optional[str]
    reason: str = ""
