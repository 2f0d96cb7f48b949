from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .database.connection import DBConfig, DatabaseConnection
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.service import MemberService
from .reminders.service import ReminderService
from .reports.service import ReportService
from .scoring.policy import ScoringPolicy
from .scoring.service import ScoringService
from .snapshots.service import SnapshotService
from .teams.mysql_team_repository import MySQLTeamRepository
from .teams.repository import TeamRepository
from .teams.service import TeamService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    members_repo: MemberRepository
    attendance_repo: AttendanceRepository
    teams_repo: TeamRepository
    users_repo: UserRepository

    policy: ScoringPolicy
    snapshot_service: SnapshotService
    scoring_service: ScoringService
    reminder_service: ReminderService
    report_service: ReportService
    member_service: MemberService
    attendance_service: AttendanceService
    team_service: TeamService
    auth_service: AuthService
    user_service: UserService


def build_services(
    *,
    members_repo: MemberRepository,
    attendance_repo: AttendanceRepository,
    teams_repo: TeamRepository,
    users_repo: UserRepository,
    scoring: Optional[Mapping[str, Any]] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services over any repository implementation (MySQL or in-memory)."""
    policy = ScoringPolicy.from_settings(scoring)
    scoring_service = ScoringService(policy)

    return Container(
        conn=conn,
        members_repo=members_repo,
        attendance_repo=attendance_repo,
        teams_repo=teams_repo,
        users_repo=users_repo,
        policy=policy,
        snapshot_service=SnapshotService(members_repo, attendance_repo),
        scoring_service=scoring_service,
        reminder_service=ReminderService(reminder_hour=policy.reminder_hour),
        report_service=ReportService(scoring_service),
        member_service=MemberService(members_repo),
        attendance_service=AttendanceService(attendance_repo, members_repo),
        team_service=TeamService(teams_repo, members_repo),
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo),
    )


def build_container(*, db_config: dict, scoring: Optional[Mapping[str, Any]] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        members_repo=MySQLMemberRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        teams_repo=MySQLTeamRepository(conn),
        users_repo=MySQLUserRepository(conn),
        scoring=scoring,
        conn=conn,
    )
