from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import TeamType


@dataclass(frozen=True)
class Team:
    """Domain entity: a rotation team (member order is irrelevant)."""

    team_id: int
    name: str
    team_type: TeamType
    member_ids: frozenset[str] = frozenset()
