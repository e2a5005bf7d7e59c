from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, new_id
from .model import RefreshToken
from .repository import RefreshTokenRepository


class MySQLRefreshTokenRepository(RefreshTokenRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, *, user_id: str, token: str, expires_at: datetime) -> RefreshToken:
        token_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO refresh_tokens(id, user_id, token, expires_at) VALUES(%s,%s,%s,%s)",
                (token_id, str(user_id), token, expires_at),
            )
        return RefreshToken(id=token_id, user_id=str(user_id), token=token, expires_at=expires_at)

    def get_by_token(self, token: str) -> Optional[RefreshToken]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, user_id, token, expires_at FROM refresh_tokens WHERE token=%s", (token,))
            r = fetchone(cur)
            if not r:
                return None
            return RefreshToken(
                id=str(r["id"]),
                user_id=str(r["user_id"]),
                token=r["token"],
                expires_at=r["expires_at"],
            )

    def delete_by_token(self, token: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM refresh_tokens WHERE token=%s", (token,))
            return cur.rowcount > 0
