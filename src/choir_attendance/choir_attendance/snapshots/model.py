from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.model import AttendanceEvent
from ..members.model import Member


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of the store that every aggregate is computed from.

    ``version`` changes only when the content changes, so it can key caches.
    """

    version: int
    members: tuple[Member, ...] = ()
    events: tuple[AttendanceEvent, ...] = ()

    @property
    def member_ids(self) -> frozenset[str]:
        return frozenset(m.member_id for m in self.members)

    def member(self, member_id: str) -> Optional[Member]:
        for m in self.members:
            if m.member_id == member_id:
                return m
        return None


EMPTY_SNAPSHOT = Snapshot(version=0)
