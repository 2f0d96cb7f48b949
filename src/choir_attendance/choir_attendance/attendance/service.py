from __future__ import annotations

import logging
from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from ..common.datetime_utils import format_day, parse_optional_date
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_LOG_LIMIT, NAME_REQUIRED_CATEGORIES
from ..core.enums import AttendanceMark, Category, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..members.repository import MemberRepository
from .model import AttendanceEvent, AttendanceRecord, MarkInput
from .repository import AttendanceRepository

LOGGER = logging.getLogger(__name__)

BULK_STATUSES = (AttendanceMark.PRESENT, AttendanceMark.ABSENT)


def marks_from_payload(payload) -> list[MarkInput]:
    """Accept ``[{member_id, status, reason}]`` or ``{member_id: {status, reason}}``."""
    if not payload:
        return []
    if isinstance(payload, Mapping):
        items = [dict(v or {}, member_id=k) for k, v in payload.items()]
    else:
        items = list(payload)

    out = []
    for item in items:
        if not isinstance(item, Mapping) or not item.get("member_id"):
            raise ValidationError("Each attendance mark needs a member_id")
        out.append(
            MarkInput(
                member_id=str(item["member_id"]),
                status=item.get("status") or None,
                reason=str(item.get("reason") or ""),
            )
        )
    return out


class AttendanceService:
    """Use case: record attendance sheets and browse the attendance log.

    Every write is validated here; the scoring side never re-checks these rules.
    """

    def __init__(self, attendance: AttendanceRepository, members: MemberRepository, *, log_limit: int = DEFAULT_LOG_LIMIT):
        self._attendance = attendance
        self._members = members
        self._log_limit = int(log_limit)

    @staticmethod
    def _require_admin(current_role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can record attendance")

    def _build_records(
        self,
        marks: Iterable[MarkInput],
        *,
        bulk_status=None,
        previous: Optional[AttendanceEvent] = None,
    ) -> list[AttendanceRecord]:
        members = {m.member_id: m.name for m in self._members.list_all()}
        known_names = dict((r.member_id, r.member_name) for r in previous.records) if previous else {}

        chosen: dict[str, MarkInput] = {}
        for mark in marks:
            if mark.status:
                chosen[mark.member_id] = mark

        if bulk_status:
            fill = AttendanceMark.coerce(bulk_status)
            if fill not in BULK_STATUSES:
                raise ValidationError("Bulk marking only supports Present or Absent")
            for member_id in members:
                chosen.setdefault(member_id, MarkInput(member_id=member_id, status=fill.value))

        if not chosen:
            raise ValidationError("Please mark attendance for at least one member")

        records = []
        for member_id, mark in chosen.items():
            status = AttendanceMark.coerce(mark.status)
            if status is None:
                raise ValidationError(f"Unknown attendance status: {mark.status!r}")

            name = members.get(member_id) or known_names.get(member_id)
            if name is None:
                raise NotFoundError(f"Member does not exist: {member_id}")

            reason = (mark.reason or "").strip()
            if status.needs_reason:
                if not reason:
                    raise ValidationError(f"Please provide a reason for {name} ({status.value})")
            else:
                reason = ""

            records.append(AttendanceRecord(member_id=member_id, member_name=name, status=status.value, reason=reason))

        records.sort(key=lambda r: r.member_name.casefold())
        return records

    @staticmethod
    def _validate_header(event_date, category, event_name) -> tuple[date, Category, str]:
        try:
            day = parse_optional_date(event_date)
        except ValueError:
            raise ValidationError("Date must use the YYYY-MM-DD format")
        if day is None:
            raise ValidationError("Please select a date")

        kind = Category.coerce(category)
        if kind is None:
            raise ValidationError("Please select a valid category")

        if kind in NAME_REQUIRED_CATEGORIES:
            name = require_non_empty(event_name or "", f"Event name for '{kind.value}'")
        else:
            name = ""
        return day, kind, name

    def record_event(
        self,
        *,
        current_role,
        event_date,
        category,
        event_name: str = "",
        marks: Sequence[MarkInput] = (),
        bulk_status=None,
    ) -> int:
        self._require_admin(current_role)
        day, kind, name = self._validate_header(event_date, category, event_name)
        records = self._build_records(marks, bulk_status=bulk_status)

        event_id = self._attendance.create(event_date=day, category=kind.value, event_name=name, records=records)
        LOGGER.info("attendance recorded: event=%s %s %s (%d marks)", event_id, day, kind.value, len(records))
        return event_id

    def update_event(
        self,
        *,
        current_role,
        event_id: int,
        event_date,
        category,
        event_name: str = "",
        marks: Sequence[MarkInput] = (),
        bulk_status=None,
    ) -> None:
        self._require_admin(current_role)
        previous = self.get_event(event_id)
        day, kind, name = self._validate_header(event_date, category, event_name)
        records = self._build_records(marks, bulk_status=bulk_status, previous=previous)

        if not self._attendance.update(event_id, event_date=day, category=kind.value, event_name=name, records=records):
            raise ValidationError("Updating the attendance record failed")
        LOGGER.info("attendance updated: event=%s (%d marks)", event_id, len(records))

    def delete_event(self, *, current_role, event_id: int) -> None:
        self._require_admin(current_role)
        self.get_event(event_id)
        if not self._attendance.delete(event_id):
            raise ValidationError("Deleting the attendance record failed")
        LOGGER.info("attendance deleted: event=%s", event_id)

    def get_event(self, event_id: int) -> AttendanceEvent:
        event = self._attendance.get_by_id(int(event_id))
        if not event:
            raise NotFoundError("Attendance record does not exist")
        return event

    def list_log(
        self,
        *,
        search: str = "",
        category: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[AttendanceEvent]:
        """Newest first; ``search`` matches event name, category or dd/mm/yyyy."""
        needle = (search or "").strip().casefold()
        wanted = (category or "").strip()

        def matches(e: AttendanceEvent) -> bool:
            if wanted and wanted.lower() != "all" and e.category != wanted:
                return False
            if not needle:
                return True
            haystack = (e.event_name or "", str(e.category), format_day(e.event_date))
            return any(needle in h.casefold() for h in haystack)

        events = [e for e in self._attendance.list_all() if matches(e)]
        events.sort(key=lambda e: (e.event_date, e.event_id), reverse=True)
        if limit is not None and limit < 1:
            raise ValidationError("limit must be at least 1")
        return events[: limit or self._log_limit]
