from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.here.here.core.enums import Role
from src.here.here.core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from src.here.here.users.model import User
from src.here.here.users.service import AuthService, UserService
from tests.fakes import InMemoryUsers


@pytest.fixture
def users():
    return InMemoryUsers(
        [
            User(
                user_id=1,
                email="teacher@here.test",
                first_name="Tom",
                last_name="Teacher",
                password_hash=generate_password_hash("teacher123"),
                primary_role=Role.TEACHER,
                extra_roles=(Role.ADMIN,),
            ),
            User(
                user_id=2,
                email="gone@here.test",
                first_name="Gail",
                last_name="Gone",
                password_hash=generate_password_hash("pw123456"),
                primary_role=Role.STUDENT,
                is_active=False,
            ),
        ]
    )


def test_login_starts_with_primary_role(users):
    s_user = AuthService(users).authenticate("Teacher@Here.test ", "teacher123")

    assert s_user.role == Role.TEACHER
    assert s_user.available_roles == (Role.TEACHER, Role.ADMIN)
    assert s_user.full_name == "Tom Teacher"


@pytest.mark.parametrize(("email", "password"), [("teacher@here.test", "nope"), ("gone@here.test", "pw123456")])
def test_login_rejects_bad_credentials_and_inactive_users(users, email, password):
    with pytest.raises(AuthenticationError):
        AuthService(users).authenticate(email, password)


def test_switch_role_validates_membership(users):
    auth = AuthService(users)

    assert auth.switch_role(user_id=1, role="admin") == Role.ADMIN
    with pytest.raises(AuthorizationError) as exc:
        auth.switch_role(user_id=1, role="student")
    assert str(exc.value) == "You do not have access to that role"


def test_create_account_validates_and_hashes(users):
    svc = UserService(users)

    user_id = svc.create_account(
        current_role=Role.ADMIN,
        email="New.Student@here.test",
        first_name="Nia",
        last_name="New",
        password="secret1",
        primary_role=Role.STUDENT,
    )

    created = users.get_by_id(user_id)
    assert created.email == "new.student@here.test"
    assert created.password_hash != "secret1"

    with pytest.raises(ValidationError):
        svc.create_account(
            current_role=Role.ADMIN,
            email="new.student@here.test",
            first_name="Nia",
            last_name="New",
            password="secret1",
            primary_role=Role.STUDENT,
        )
    with pytest.raises(AuthorizationError):
        svc.create_account(
            current_role=Role.TEACHER,
            email="x@here.test",
            first_name="X",
            last_name="Y",
            password="secret1",
            primary_role=Role.STUDENT,
        )
