import pytest

from src.choir_attendance.choir_attendance.core.enums import Role, TeamType
from src.choir_attendance.choir_attendance.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.choir_attendance.choir_attendance.teams.service import TeamService
from tests.fakes import InMemoryMembers, InMemoryTeams


@pytest.fixture
def service(members):
    return TeamService(InMemoryTeams(), InMemoryMembers(members))


def test_create_and_list_by_type(service):
    service.create_team(current_role=Role.ADMIN, name="B Team", team_type="sunday", member_ids=["alice"])
    service.create_team(current_role=Role.ADMIN, name="a team", team_type="sunday")
    service.create_team(current_role=Role.ADMIN, name="Wedding", team_type=TeamType.MARRIAGE, member_ids=["alice"])

    assert [t.name for t in service.list_teams("sunday")] == ["a team", "B Team"]
    assert [m.member_id for m in service.unassigned_members("sunday")] == ["bob", "carol"]
    assert [m.member_id for m in service.unassigned_members(TeamType.MARRIAGE)] == ["bob", "carol"]


def test_member_can_only_be_in_one_team_per_type(service):
    team_id = service.create_team(current_role=Role.ADMIN, name="A", team_type="sunday", member_ids=["alice", "bob"])
    with pytest.raises(ValidationError):
        service.create_team(current_role=Role.ADMIN, name="B", team_type="sunday", member_ids=["bob"])

    updated = service.update_team(current_role=Role.ADMIN, team_id=team_id, member_ids=["bob", "carol"])
    assert updated.member_ids == frozenset({"bob", "carol"})
    assert updated.name == "A"


def test_roster_order(service):
    team_id = service.create_team(current_role=Role.ADMIN, name="A", team_type="sunday", member_ids=["bob", "alice", "carol"])
    roster = service.roster(service.get_team(team_id))
    assert [m.name for m in roster] == ["Carol", "Alice", "Bob"]


def test_validation_and_permissions(service):
    with pytest.raises(AuthorizationError):
        service.create_team(current_role=Role.MEMBER, name="A", team_type="sunday")
    with pytest.raises(ValidationError):
        service.create_team(current_role=Role.ADMIN, name="A", team_type="funeral")
    with pytest.raises(NotFoundError):
        service.create_team(current_role=Role.ADMIN, name="A", team_type="sunday", member_ids=["ghost"])
    with pytest.raises(NotFoundError):
        service.delete_team(current_role=Role.ADMIN, team_id=99)
