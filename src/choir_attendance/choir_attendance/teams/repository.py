from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import TeamType
from .model import Team


class TeamRepository(Protocol):
    def list_all(self) -> Sequence[Team]:
        raise NotImplementedError

    def get_by_id(self, team_id: int) -> Optional[Team]:
        raise NotImplementedError

    def create(self, *, name: str, team_type: TeamType, member_ids: Iterable[str]) -> int:
        raise NotImplementedError

    def update(self, team_id: int, *, name: str, member_ids: Iterable[str]) -> bool:
        raise NotImplementedError

    def delete(self, team_id: int) -> bool:
        raise NotImplementedError
