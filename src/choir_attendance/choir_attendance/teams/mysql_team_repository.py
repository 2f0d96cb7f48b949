from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional, Sequence

from ..core.enums import TeamType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Team
from .repository import TeamRepository


class MySQLTeamRepository(TeamRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _members_by_team(self, cur, team_ids: Sequence[int]) -> dict[int, set[str]]:
        out: dict[int, set[str]] = defaultdict(set)
        if not team_ids:
            return out
        placeholders = ",".join(["%s"] * len(team_ids))
        cur.execute(f"SELECT team_id, member_id FROM team_members WHERE team_id IN ({placeholders})", tuple(team_ids))
        for r in fetchall(cur):
            out[int(r["team_id"])].add(str(r["member_id"]))
        return out

    def list_all(self) -> Sequence[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT team_id, name, team_type FROM teams ORDER BY name, team_id")
            rows = fetchall(cur)
            members = self._members_by_team(cur, [int(r["team_id"]) for r in rows])
        return [
            Team(
                team_id=int(r["team_id"]),
                name=r["name"],
                team_type=TeamType(r["team_type"]),
                member_ids=frozenset(members.get(int(r["team_id"]), ())),
            )
            for r in rows
        ]

    def get_by_id(self, team_id: int) -> Optional[Team]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT team_id, name, team_type FROM teams WHERE team_id=%s", (team_id,))
            row = fetchone(cur)
            if not row:
                return None
            members = self._members_by_team(cur, [int(row["team_id"])])
        return Team(
            team_id=int(row["team_id"]),
            name=row["name"],
            team_type=TeamType(row["team_type"]),
            member_ids=frozenset(members.get(int(row["team_id"]), ())),
        )

    @staticmethod
    def _replace_members(cur, team_id: int, member_ids: Iterable[str]) -> None:
        cur.execute("DELETE FROM team_members WHERE team_id=%s", (team_id,))
        rows = [(team_id, m) for m in sorted(set(member_ids))]
        if rows:
            cur.executemany("INSERT INTO team_members(team_id, member_id) VALUES(%s,%s)", rows)

    def create(self, *, name: str, team_type: TeamType, member_ids: Iterable[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO teams(name, team_type) VALUES(%s,%s)", (name, team_type.value))
            team_id = int(cur.lastrowid)
            self._replace_members(cur, team_id, member_ids)
            return team_id

    def update(self, team_id: int, *, name: str, member_ids: Iterable[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT team_id FROM teams WHERE team_id=%s", (team_id,))
            if not fetchone(cur):
                return False
            cur.execute("UPDATE teams SET name=%s WHERE team_id=%s", (name, team_id))
            self._replace_members(cur, team_id, member_ids)
            return True

    def delete(self, team_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM team_members WHERE team_id=%s", (team_id,))
            cur.execute("DELETE FROM teams WHERE team_id=%s", (team_id,))
            return cur.rowcount > 0
