from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent, AttendanceRecord


class AttendanceRepository(Protocol):
    """Repository interface for attendance events and their records."""

    def list_all(self) -> Sequence[AttendanceEvent]:
        raise NotImplementedError

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def create(
        self,
        *,
        event_date: date,
        category: str,
        event_name: str,
        records: Sequence[AttendanceRecord],
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        event_id: int,
        *,
        event_date: date,
        category: str,
        event_name: str,
        records: Sequence[AttendanceRecord],
    ) -> bool:
        raise NotImplementedError

    def delete(self, event_id: int) -> bool:
        raise NotImplementedError
