from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import parse_optional_date
from ..common.validators import optional_email, require_enum, require_non_empty
from ..core.constants import UPCOMING_DAYS
from ..core.enums import Gender, MaritalStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import Celebration, Member
from .repository import MemberRepository

LOGGER = logging.getLogger(__name__)


def _next_occurrence(anchor: date, today: date) -> date:
    """Next anniversary of ``anchor`` on or after ``today`` (Feb 29 -> Feb 28)."""
    for year in (today.year, today.year + 1):
        try:
            candidate = anchor.replace(year=year)
        except ValueError:
            candidate = date(year, 2, 28)
        if candidate >= today:
            return candidate
    raise AssertionError("unreachable")


def _upcoming(pairs, today: date, days: int) -> list[Celebration]:
    horizon = today + timedelta(days=days)
    out = []
    for member, anchor in pairs:
        if anchor is None:
            continue
        on = _next_occurrence(anchor, today)
        if on <= horizon:
            out.append(Celebration(member_id=member.member_id, name=member.name, on=on, years=on.year - anchor.year))
    out.sort(key=lambda c: (c.on, c.name.casefold()))
    return out


def upcoming_birthdays(members: Sequence[Member], today: date, days: int = UPCOMING_DAYS) -> list[Celebration]:
    return _upcoming(((m, m.dob) for m in members), today, days)


def upcoming_anniversaries(members: Sequence[Member], today: date, days: int = UPCOMING_DAYS) -> list[Celebration]:
    return _upcoming(((m, m.wedding_date) for m in members if m.is_married), today, days)


class MemberService:
    """Use case: maintain the choir member list (admin writes, everyone reads)."""

    def __init__(self, members: MemberRepository):
        self._members = members

    @staticmethod
    def _require_admin(current_role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can change members")

    def list_members(self) -> list[Member]:
        return sorted(self._members.list_all(), key=lambda m: m.name.casefold())

    def get_member(self, member_id: str) -> Member:
        member = self._members.get_by_id(member_id)
        if not member:
            raise NotFoundError("Member does not exist")
        return member

    def _build(self, member_id: str, data: Mapping) -> Member:
        name = require_non_empty(data.get("name", ""), "Name")
        gender = require_enum(Gender, data.get("gender"), "Gender")

        marital_raw = data.get("marital_status") or None
        marital = require_enum(MaritalStatus, marital_raw, "Marital status") if marital_raw else None

        try:
            dob = parse_optional_date(data.get("dob"))
            wedding_date = parse_optional_date(data.get("wedding_date"))
        except ValueError:
            raise ValidationError("Dates must use the YYYY-MM-DD format")

        if marital != MaritalStatus.MARRIED:
            wedding_date = None

        def _text(key: str) -> Optional[str]:
            v = str(data.get(key) or "").strip()
            return v or None

        return Member(
            member_id=member_id,
            name=name,
            gender=gender,
            dob=dob,
            marital_status=marital,
            wedding_date=wedding_date,
            is_organist=bool(data.get("is_organist", False)),
            is_sound_engineer=bool(data.get("is_sound_engineer", False)),
            is_presentation_specialist=bool(data.get("is_presentation_specialist", False)),
            phone=_text("phone"),
            email=optional_email(data.get("email")),
            address=_text("address"),
            anbiyam=_text("anbiyam"),
        )

    def create_member(self, *, current_role, data: Mapping) -> str:
        self._require_admin(current_role)
        member = self._build("", data)
        member_id = self._members.create(member)
        LOGGER.info("member created: %s", member_id)
        return member_id

    def update_member(self, *, current_role, member_id: str, data: Mapping) -> Member:
        self._require_admin(current_role)
        self.get_member(member_id)
        member = self._build(member_id, data)
        if not self._members.update(member):
            raise ValidationError("Updating the member failed")
        return member

    def delete_member(self, *, current_role, member_id: str) -> None:
        """Remove the member; their past attendance records stay untouched."""
        self._require_admin(current_role)
        self.get_member(member_id)
        if not self._members.delete(member_id):
            raise ValidationError("Deleting the member failed")
        LOGGER.info("member deleted: %s", member_id)

    def upcoming_celebrations(self, *, today: date, days: int = UPCOMING_DAYS) -> dict[str, list[Celebration]]:
        members = self._members.list_all()
        return {
            "birthdays": upcoming_birthdays(members, today, days),
            "anniversaries": upcoming_anniversaries(members, today, days),
        }
