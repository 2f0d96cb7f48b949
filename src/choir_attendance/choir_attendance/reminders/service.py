from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..attendance.model import AttendanceEvent
from ..common.datetime_utils import now_local
from ..core.constants import REMINDER_HOUR
from ..core.enums import Role
from ..snapshots.model import Snapshot

# datetime.weekday(): Monday=0 ... Saturday=5, Sunday=6
_REMINDER_DAYS = {
    5: ("Saturday", "Saturday Practice"),
    6: ("Sunday", "Sunday Mass"),
}


@dataclass(frozen=True)
class ReminderResult:
    show: bool
    label: Optional[str] = None
    day_name: Optional[str] = None

    @property
    def message(self) -> str:
        if not self.show:
            return ""
        return (
            f"It's {self.day_name} evening and no attendance has been recorded for today yet. "
            f"Please remember to mark attendance for {self.label}."
        )


NO_REMINDER = ReminderResult(show=False)


def should_show_reminder(
    now: datetime,
    role,
    events: Sequence[AttendanceEvent],
    *,
    reminder_hour: int = REMINDER_HOUR,
) -> ReminderResult:
    """Admin banner: weekend evening and nothing recorded for today.

    ``now`` is local time; any event dated today (whatever its category)
    silences the reminder.
    """
    if role != Role.ADMIN:
        return NO_REMINDER

    day = _REMINDER_DAYS.get(now.weekday())
    if not day or now.hour < reminder_hour:
        return NO_REMINDER

    today = now.date()
    if any(e.event_date == today for e in events or ()):
        return NO_REMINDER

    day_name, label = day
    return ReminderResult(show=True, label=label, day_name=day_name)


class ReminderService:
    def __init__(self, *, reminder_hour: int = REMINDER_HOUR):
        self._reminder_hour = int(reminder_hour)

    def evaluate(self, *, role, snapshot: Snapshot, now: Optional[datetime] = None) -> ReminderResult:
        return should_show_reminder(now or now_local(), role, snapshot.events, reminder_hour=self._reminder_hour)
