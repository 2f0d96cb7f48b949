from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_date
from .model import AttendanceEvent, AttendanceRecord
from .repository import AttendanceRepository


def _row_to_record(row: dict) -> AttendanceRecord:
    return AttendanceRecord(
        member_id=str(row["member_id"]),
        member_name=row.get("member_name") or "",
        status=row.get("status") or "",
        reason=row.get("reason") or "",
    )


def _row_to_event(row: dict, records) -> AttendanceEvent:
    return AttendanceEvent(
        event_id=int(row["event_id"]),
        event_date=normalize_mysql_date(row["event_date"]),
        category=row["category"],
        event_name=row.get("event_name") or "",
        records=tuple(records),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT event_id, event_date, category, event_name FROM attendance_events ORDER BY event_date, event_id"
            )
            events = fetchall(cur)
            cur.execute(
                "SELECT event_id, member_id, member_name, status, reason FROM attendance_records ORDER BY event_id, member_name"
            )
            by_event = defaultdict(list)
            for r in fetchall(cur):
                by_event[int(r["event_id"])].append(_row_to_record(r))

        return [_row_to_event(e, by_event.get(int(e["event_id"]), ())) for e in events]

    def get_by_id(self, event_id: int) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT event_id, event_date, category, event_name FROM attendance_events WHERE event_id=%s",
                (event_id,),
            )
            row = fetchone(cur)
            if not row:
                return None
            cur.execute(
                "SELECT event_id, member_id, member_name, status, reason FROM attendance_records WHERE event_id=%s",
                (event_id,),
            )
            return _row_to_event(row, (_row_to_record(r) for r in fetchall(cur)))

    @staticmethod
    def _insert_records(cur, event_id: int, records: Sequence[AttendanceRecord]) -> None:
        if not records:
            return
        cur.executemany(
            """
            INSERT INTO attendance_records(event_id, member_id, member_name, status, reason)
            VALUES(%s,%s,%s,%s,%s)
            """,
            [(event_id, r.member_id, r.member_name, r.status, r.reason or "") for r in records],
        )

    def create(
        self,
        *,
        event_date: date,
        category: str,
        event_name: str,
        records: Sequence[AttendanceRecord],
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO attendance_events(event_date, category, event_name) VALUES(%s,%s,%s)",
                (event_date, category, event_name or ""),
            )
            event_id = int(cur.lastrowid)
            self._insert_records(cur, event_id, records)
            return event_id

    def update(
        self,
        event_id: int,
        *,
        event_date: date,
        category: str,
        event_name: str,
        records: Sequence[AttendanceRecord],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT event_id FROM attendance_events WHERE event_id=%s", (event_id,))
            if not fetchone(cur):
                return False
            cur.execute(
                "UPDATE attendance_events SET event_date=%s, category=%s, event_name=%s WHERE event_id=%s",
                (event_date, category, event_name or "", event_id),
            )
            cur.execute("DELETE FROM attendance_records WHERE event_id=%s", (event_id,))
            self._insert_records(cur, event_id, records)
            return True

    def delete(self, event_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance_records WHERE event_id=%s", (event_id,))
            cur.execute("DELETE FROM attendance_events WHERE event_id=%s", (event_id,))
            return cur.rowcount > 0
