import pytest
from werkzeug.security import generate_password_hash

from src.choir_attendance.choir_attendance.core.enums import Role
from src.choir_attendance.choir_attendance.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from src.choir_attendance.choir_attendance.users.model import User
from src.choir_attendance.choir_attendance.users.service import AuthService, UserService
from tests.fakes import InMemoryUsers


@pytest.fixture
def users():
    return InMemoryUsers(
        [
            User(1, "admin@choir.local", generate_password_hash("admin123"), Role.ADMIN, None),
            User(2, "alice@choir.local", generate_password_hash("secret1"), Role.MEMBER, "alice"),
            User(3, "old@choir.local", "CHANGE_ME", Role.MEMBER, "bob"),
            User(4, "off@choir.local", generate_password_hash("secret1"), Role.MEMBER, "carol", is_active=False),
        ]
    )


def test_authenticate_returns_session_user(users):
    s_user = AuthService(users).authenticate(" Alice@Choir.local ", "secret1")
    assert s_user.user_id == 2
    assert s_user.role == Role.MEMBER
    assert s_user.member_id == "alice"


@pytest.mark.parametrize(
    "email,password",
    [
        ("alice@choir.local", "wrong"),
        ("nobody@choir.local", "secret1"),
        ("old@choir.local", "CHANGE_ME"),
        ("off@choir.local", "secret1"),
        ("", ""),
    ],
)
def test_authenticate_rejects_bad_credentials(users, email, password):
    with pytest.raises(AuthenticationError):
        AuthService(users).authenticate(email, password)


def test_create_account_rules(users):
    service = UserService(users)
    user_id = service.create_account(current_role=Role.ADMIN, email="bob@choir.local", password="secret1", member_id="bob")
    assert AuthService(users).authenticate("bob@choir.local", "secret1").user_id == user_id

    with pytest.raises(ValidationError):
        service.create_account(current_role=Role.ADMIN, email="bob@choir.local", password="secret1", member_id="bob")
    with pytest.raises(ValidationError):
        service.create_account(current_role=Role.ADMIN, email="x@choir.local", password="123", member_id="bob")
    with pytest.raises(ValidationError):
        service.create_account(current_role=Role.ADMIN, email="y@choir.local", password="secret1")
    with pytest.raises(AuthorizationError):
        service.create_account(current_role=Role.MEMBER, email="z@choir.local", password="secret1", member_id="bob")
