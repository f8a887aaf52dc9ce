from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: an account. Plain data, no DB access."""

    user_id: int
    email: str
    first_name: str
    last_name: str
    password_hash: str
    primary_role: Role
    extra_roles: Tuple[Role, ...] = ()
    is_active: bool = True

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip() or self.email

    @property
    def roles(self) -> Tuple[Role, ...]:
        """Primary role first, then any extra roles without repeats."""
        ordered = [self.primary_role]
        ordered.extend(r for r in self.extra_roles if r != self.primary_role)
        return tuple(dict.fromkeys(ordered))

    def has_role(self, role: Role) -> bool:
        return role in self.roles
