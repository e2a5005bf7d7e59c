from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import User
from .repository import UserRepository

_COLUMNS = "id, email, password_hash, role, is_active"


def _to_user(r: Dict[str, Any]) -> User:
    return User(
        id=str(r["id"]),
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        is_active=bool(r.get("is_active", 1)),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE email=%s", (email,))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def get_by_id(self, user_id: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE id=%s", (str(user_id),))
            r = fetchone(cur)
            return _to_user(r) if r else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users ORDER BY created_at")
            return [_to_user(r) for r in fetchall(cur)]

    def create_with_profile(
        self,
        *,
        email: str,
        password_hash: str,
        role: Role,
        first_name: str,
        last_name: str,
    ) -> User:
        user_id = new_id()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "INSERT INTO users(id, email, password_hash, role) VALUES(%s,%s,%s,%s)",
                    (user_id, email, password_hash, role.value),
                )
                cur.execute(
                    "INSERT INTO employees(id, user_id, first_name, last_name) VALUES(%s,%s,%s,%s)",
                    (new_id(), user_id, first_name, last_name),
                )
        except mysql.connector.IntegrityError:
            raise ValidationError("Email already in use")
        return User(id=user_id, email=email, password_hash=password_hash, role=role)
