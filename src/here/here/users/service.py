from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, ValidationError
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    full_name: str
    email: str
    role: Role
    available_roles: Tuple[Role, ...]


class AuthService:
    """Use cases: login and switching the active role."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, email: str, password: str) -> SessionUser:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hashes in seed data.
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            email=user.email,
            role=user.primary_role,
            available_roles=user.roles,
        )

    def switch_role(self, *, user_id: int, role: str | Role) -> Role:
        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Not authenticated")

        try:
            target = Role(role)
        except ValueError:
            raise AuthorizationError("You do not have access to that role")

        if not user.has_role(target):
            raise AuthorizationError("You do not have access to that role")
        logger.info("User %s switched active role to %s", user_id, target.value)
        return target


class UserService:
    """Use case: manage accounts (admin)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def create_account(
        self,
        *,
        current_role: Role,
        email: str,
        first_name: str,
        last_name: str,
        password: str,
        primary_role: Role,
        extra_roles: Sequence[Role] = (),
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage users")

        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Email is invalid")
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        require_min_length(password, "Password", 6)

        if self._users.get_by_email(email):
            raise ValidationError("A user with that email already exists")

        return self._users.create_user(
            email=email,
            first_name=first_name,
            last_name=last_name,
            password_hash=generate_password_hash(password),
            primary_role=primary_role,
            extra_roles=[r for r in extra_roles if r != primary_role],
        )

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        return self._users.list_users(role=role)

    def deactivate(self, *, current_role: Role, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission to manage users")
        if not self._users.set_active(user_id, is_active=False):
            raise ValidationError("User not found")
