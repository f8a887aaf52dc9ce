from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, email, first_name, last_name, password_hash, primary_role, is_active"


def _extra_roles(cur, user_ids: Sequence[int]) -> Dict[int, List[Role]]:
    if not user_ids:
        return {}
    placeholders = ",".join(["%s"] * len(user_ids))
    cur.execute(f"SELECT user_id, role FROM user_roles WHERE user_id IN ({placeholders})", tuple(user_ids))
    out: Dict[int, List[Role]] = {}
    for r in fetchall(cur):
        out.setdefault(int(r["user_id"]), []).append(Role(r["role"]))
    return out


def _to_user(row: dict, extra: Sequence[Role]) -> User:
    return User(
        user_id=int(row["user_id"]),
        email=row["email"],
        first_name=row.get("first_name") or "",
        last_name=row.get("last_name") or "",
        password_hash=row["password_hash"],
        primary_role=Role(row["primary_role"]),
        extra_roles=tuple(extra),
        is_active=bool(row.get("is_active", True)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE {where}", params)
            row = fetchone(cur)
            if not row:
                return None
            extra = _extra_roles(cur, [int(row["user_id"])])
            return _to_user(row, extra.get(int(row["user_id"]), []))

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id=%s", (int(user_id),))

    def get_by_email(self, email: str) -> Optional[User]:
        return self._get_one("email=%s", (email.strip().lower(),))

    def create_user(
        self,
        *,
        email: str,
        first_name: str,
        last_name: str,
        password_hash: str,
        primary_role: Role,
        extra_roles: Sequence[Role] = (),
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(email, first_name, last_name, password_hash, primary_role, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (email.strip().lower(), first_name, last_name, password_hash, primary_role.value),
            )
            user_id = int(cur.lastrowid)
            for role in extra_roles:
                cur.execute("INSERT IGNORE INTO user_roles(user_id, role) VALUES(%s,%s)", (user_id, role.value))
            return user_id

    def list_users(self, *, role: Optional[Role] = None) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY last_name, first_name")
            else:
                cur.execute(
                    f"""
                    SELECT {_USER_COLUMNS} FROM users
                    WHERE primary_role=%s
                       OR user_id IN (SELECT user_id FROM user_roles WHERE role=%s)
                    ORDER BY last_name, first_name
                    """,
                    (role.value, role.value),
                )
            rows = fetchall(cur)
            extra = _extra_roles(cur, [int(r["user_id"]) for r in rows])
            return [_to_user(r, extra.get(int(r["user_id"]), [])) for r in rows]

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET is_active=%s WHERE user_id=%s", (int(is_active), int(user_id)))
            return cur.rowcount > 0
