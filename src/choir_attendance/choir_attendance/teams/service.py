from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..common.validators import require_enum, require_non_empty
from ..core.enums import Gender, Role, TeamType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..members.model import Member
from ..members.repository import MemberRepository
from .model import Team
from .repository import TeamRepository

LOGGER = logging.getLogger(__name__)


def roster_order(members: Iterable[Member]) -> list[Member]:
    """Organists first, then women, then alphabetical."""
    return sorted(members, key=lambda m: (not m.is_organist, m.gender != Gender.FEMALE, m.name.casefold()))


class TeamService:
    """Use case: sunday / marriage rotation teams.

    A member belongs to at most one team of each type.
    """

    def __init__(self, teams: TeamRepository, members: MemberRepository):
        self._teams = teams
        self._members = members

    @staticmethod
    def _require_admin(current_role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Only administrators can manage teams")

    def list_teams(self, team_type=None) -> list[Team]:
        teams = list(self._teams.list_all())
        if team_type:
            wanted = require_enum(TeamType, team_type, "Team type")
            teams = [t for t in teams if t.team_type == wanted]
        return sorted(teams, key=lambda t: t.name.casefold())

    def get_team(self, team_id: int) -> Team:
        team = self._teams.get_by_id(int(team_id))
        if not team:
            raise NotFoundError("Team does not exist")
        return team

    def _check_members(self, team_type: TeamType, member_ids: Iterable[str], *, exclude_team_id: Optional[int] = None) -> frozenset[str]:
        ids = frozenset(str(m) for m in member_ids or ())
        known = {m.member_id for m in self._members.list_all()}
        missing = sorted(ids - known)
        if missing:
            raise NotFoundError(f"Member does not exist: {', '.join(missing)}")

        for other in self._teams.list_all():
            if other.team_type != team_type or other.team_id == exclude_team_id:
                continue
            clash = ids & other.member_ids
            if clash:
                raise ValidationError(f"{len(clash)} member(s) already belong to team '{other.name}'")
        return ids

    def create_team(self, *, current_role, name: str, team_type, member_ids: Iterable[str] = ()) -> int:
        self._require_admin(current_role)
        name = require_non_empty(name, "Team name")
        kind = require_enum(TeamType, team_type, "Team type")
        ids = self._check_members(kind, member_ids)
        team_id = self._teams.create(name=name, team_type=kind, member_ids=ids)
        LOGGER.info("team created: %s (%s, %d members)", team_id, kind.value, len(ids))
        return team_id

    def update_team(self, *, current_role, team_id: int, name: Optional[str] = None, member_ids: Optional[Iterable[str]] = None) -> Team:
        self._require_admin(current_role)
        team = self.get_team(team_id)
        new_name = require_non_empty(name, "Team name") if name is not None else team.name
        ids = self._check_members(team.team_type, member_ids, exclude_team_id=team.team_id) if member_ids is not None else team.member_ids
        if not self._teams.update(team.team_id, name=new_name, member_ids=ids):
            raise ValidationError("Updating the team failed")
        return Team(team_id=team.team_id, name=new_name, team_type=team.team_type, member_ids=frozenset(ids))

    def delete_team(self, *, current_role, team_id: int) -> None:
        self._require_admin(current_role)
        self.get_team(team_id)
        if not self._teams.delete(int(team_id)):
            raise ValidationError("Deleting the team failed")

    def unassigned_members(self, team_type, members: Optional[Sequence[Member]] = None) -> list[Member]:
        kind = require_enum(TeamType, team_type, "Team type")
        members = list(members) if members is not None else list(self._members.list_all())
        taken = set()
        for t in self._teams.list_all():
            if t.team_type == kind:
                taken |= t.member_ids
        return sorted((m for m in members if m.member_id not in taken), key=lambda m: m.name.casefold())

    def roster(self, team: Team, members: Optional[Sequence[Member]] = None) -> list[Member]:
        """Current members of ``team``; ids of deleted members are skipped."""
        members = list(members) if members is not None else list(self._members.list_all())
        return roster_order(m for m in members if m.member_id in team.member_ids)
