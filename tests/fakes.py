from __future__ import annotations

from dataclasses import replace
from typing import Optional

from src.choir_attendance.choir_attendance.attendance.model import AttendanceEvent, AttendanceRecord
from src.choir_attendance.choir_attendance.core.enums import TeamType
from src.choir_attendance.choir_attendance.members.model import Member
from src.choir_attendance.choir_attendance.teams.model import Team
from src.choir_attendance.choir_attendance.users.model import User


def rec(member_id: str, status: str, reason: str = "", name: Optional[str] = None) -> AttendanceRecord:
    return AttendanceRecord(member_id=member_id, member_name=name or member_id, status=status, reason=reason)


def ev(event_id: int, day, category: str, *records: AttendanceRecord, name: str = "") -> AttendanceEvent:
    return AttendanceEvent(event_id=event_id, event_date=day, category=category, event_name=name, records=tuple(records))


class InMemoryMembers:
    def __init__(self, members=()):
        self._by_id: dict[str, Member] = {m.member_id: m for m in members}
        self._next = 1

    def list_all(self):
        return list(self._by_id.values())

    def get_by_id(self, member_id):
        return self._by_id.get(member_id)

    def create(self, member):
        member_id = member.member_id or f"new-{self._next}"
        self._next += 1
        self._by_id[member_id] = replace(member, member_id=member_id)
        return member_id

    def update(self, member):
        if member.member_id not in self._by_id:
            return False
        self._by_id[member.member_id] = member
        return True

    def delete(self, member_id):
        return self._by_id.pop(member_id, None) is not None


class InMemoryAttendance:
    def __init__(self, events=()):
        self._by_id: dict[int, AttendanceEvent] = {e.event_id: e for e in events}
        self._next = max(self._by_id, default=0) + 1

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda e: (e.event_date, e.event_id))

    def get_by_id(self, event_id):
        return self._by_id.get(int(event_id))

    def create(self, *, event_date, category, event_name, records):
        event_id = self._next
        self._next += 1
        self._by_id[event_id] = AttendanceEvent(event_id, event_date, category, event_name, tuple(records))
        return event_id

    def update(self, event_id, *, event_date, category, event_name, records):
        if event_id not in self._by_id:
            return False
        self._by_id[event_id] = AttendanceEvent(event_id, event_date, category, event_name, tuple(records))
        return True

    def delete(self, event_id):
        return self._by_id.pop(int(event_id), None) is not None


class InMemoryTeams:
    def __init__(self, teams=()):
        self._by_id: dict[int, Team] = {t.team_id: t for t in teams}
        self._next = max(self._by_id, default=0) + 1

    def list_all(self):
        return list(self._by_id.values())

    def get_by_id(self, team_id):
        return self._by_id.get(int(team_id))

    def create(self, *, name, team_type: TeamType, member_ids):
        team_id = self._next
        self._next += 1
        self._by_id[team_id] = Team(team_id, name, team_type, frozenset(member_ids))
        return team_id

    def update(self, team_id, *, name, member_ids):
        team = self._by_id.get(team_id)
        if not team:
            return False
        self._by_id[team_id] = Team(team_id, name, team.team_type, frozenset(member_ids))
        return True

    def delete(self, team_id):
        return self._by_id.pop(int(team_id), None) is not None


class InMemoryUsers:
    def __init__(self, users=()):
        self._by_id: dict[int, User] = {u.user_id: u for u in users}

    def get_by_id(self, user_id):
        return self._by_id.get(user_id)

    def get_by_email(self, email):
        for u in self._by_id.values():
            if u.email == email:
                return u
        return None

    def create_user(self, *, email, password_hash, role, member_id):
        user_id = max(self._by_id, default=0) + 1
        self._by_id[user_id] = User(user_id, email, password_hash, role, member_id)
        return user_id
