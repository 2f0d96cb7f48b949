from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Member


class MemberRepository(Protocol):
    """Repository interface for members.

    Services depend on this protocol, never on a concrete database.
    """

    def list_all(self) -> Sequence[Member]:
        raise NotImplementedError

    def get_by_id(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError

    def create(self, member: Member) -> str:
        raise NotImplementedError

    def update(self, member: Member) -> bool:
        raise NotImplementedError

    def delete(self, member_id: str) -> bool:
        raise NotImplementedError
