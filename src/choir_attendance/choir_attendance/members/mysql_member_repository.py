from __future__ import annotations

import uuid
from dataclasses import replace
from typing import Optional, Sequence

from ..core.enums import Gender, MaritalStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import Member
from .repository import MemberRepository

_COLUMNS = (
    "member_id, name, gender, dob, marital_status, wedding_date, is_organist, is_sound_engineer, "
    "is_presentation_specialist, phone, email, address, anbiyam"
)


def _row_to_member(row: dict) -> Member:
    marital = row.get("marital_status")
    return Member(
        member_id=str(row["member_id"]),
        name=row["name"],
        gender=Gender.coerce(row.get("gender")),
        dob=normalize_mysql_date(row.get("dob")),
        marital_status=MaritalStatus(marital) if marital else None,
        wedding_date=normalize_mysql_date(row.get("wedding_date")),
        is_organist=bool(row.get("is_organist")),
        is_sound_engineer=bool(row.get("is_sound_engineer")),
        is_presentation_specialist=bool(row.get("is_presentation_specialist")),
        phone=row.get("phone"),
        email=row.get("email"),
        address=row.get("address"),
        anbiyam=row.get("anbiyam"),
    )


def _params(m: Member) -> tuple:
    return (
        m.name,
        m.gender.value,
        m.dob,
        m.marital_status.value if m.marital_status else None,
        m.wedding_date,
        int(m.is_organist),
        int(m.is_sound_engineer),
        int(m.is_presentation_specialist),
        m.phone,
        m.email,
        m.address,
        m.anbiyam,
    )


class MySQLMemberRepository(MemberRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members ORDER BY name, member_id")
            return [_row_to_member(r) for r in fetchall(cur)]

    def get_by_id(self, member_id: str) -> Optional[Member]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM members WHERE member_id=%s", (member_id,))
            row = fetchone(cur)
            return _row_to_member(row) if row else None

    def create(self, member: Member) -> str:
        member_id = member.member_id or uuid.uuid4().hex
        member = replace(member, member_id=member_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO members ({_COLUMNS}) VALUES (%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)",
                (member_id, *_params(member)),
            )
        return member_id

    def update(self, member: Member) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE members
                SET name=%s, gender=%s, dob=%s, marital_status=%s, wedding_date=%s, is_organist=%s,
                    is_sound_engineer=%s, is_presentation_specialist=%s, phone=%s, email=%s, address=%s, anbiyam=%s
                WHERE member_id=%s
                """,
                (*_params(member), member.member_id),
            )
            return cur.rowcount > 0

    def delete(self, member_id: str) -> bool:
        # Attendance rows are kept on purpose; they still carry the member name.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM team_members WHERE member_id=%s", (member_id,))
            cur.execute("DELETE FROM members WHERE member_id=%s", (member_id,))
            return cur.rowcount > 0
