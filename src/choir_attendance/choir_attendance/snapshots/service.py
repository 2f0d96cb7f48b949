from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterator, Optional

from ..attendance.repository import AttendanceRepository
from ..members.repository import MemberRepository
from .model import EMPTY_SNAPSHOT, Snapshot

LOGGER = logging.getLogger(__name__)


class SnapshotService:
    """Loads immutable ``(version, members, events)`` snapshots.

    The version is bumped only when the loaded content differs from the
    previous load, so caches keyed on it stay valid across no-op reloads.
    """

    def __init__(self, members: MemberRepository, attendance: AttendanceRepository):
        self._members = members
        self._attendance = attendance
        self._current: Snapshot = EMPTY_SNAPSHOT
        self._lock = threading.Lock()

    @property
    def current(self) -> Snapshot:
        return self._current

    def load(self) -> Snapshot:
        # Read, compare and bump under one lock: a version maps to exactly one content.
        with self._lock:
            members = tuple(self._members.list_all())
            events = tuple(self._attendance.list_all())

            prev = self._current
            if prev.version and prev.members == members and prev.events == events:
                return prev

            snap = Snapshot(version=prev.version + 1, members=members, events=events)
            self._current = snap
        LOGGER.debug("snapshot v%d loaded (%d members, %d events)", snap.version, len(members), len(events))
        return snap

    def watch(
        self,
        poll_seconds: float = 5.0,
        *,
        max_updates: Optional[int] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> Iterator[Snapshot]:
        """Yield a full snapshot every time the store content changes."""
        seen: Optional[int] = None
        updates = 0
        while max_updates is None or updates < max_updates:
            snap = self.load()
            if snap.version != seen:
                seen = snap.version
                updates += 1
                yield snap
                continue
            sleep(poll_seconds)
