from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a login account.

    Note: plain data object (no database access code). ``member_id`` links
    the account to the member whose statistics it may view.
    """

    user_id: int
    email: str
    password_hash: str
    role: Role
    member_id: Optional[str]
    is_active: bool = True
