from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_email, require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .repository import UserRepository


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    email: str
    role: Role
    member_id: Optional[str]


class AuthService:
    """Use case: authenticate a user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = (email or "").strip().lower()
        user = self._users.get_by_email(email) if email else None
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # placeholder hashes like 'CHANGE_ME'
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(user_id=user.user_id, email=user.email, role=user.role, member_id=user.member_id)


class UserService:
    """Use case: create login accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_account(self, *, current_role, email: str, password: str, role: Role = Role.MEMBER, member_id: Optional[str] = None) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        email = optional_email(require_non_empty(email, "Email"))
        require_min_length(password, "Password", 6)

        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")
        if role == Role.MEMBER and not member_id:
            raise ValidationError("Member accounts must be linked to a member")

        return self._users.create_user(
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            member_id=member_id,
        )
