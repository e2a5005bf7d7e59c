from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol

from .model import RefreshToken


class RefreshTokenRepository(Protocol):
    def create(self, *, user_id: str, token: str, expires_at: datetime) -> RefreshToken:
        raise NotImplementedError

    def get_by_token(self, token: str) -> Optional[RefreshToken]:
        raise NotImplementedError

    def delete_by_token(self, token: str) -> bool:
        raise NotImplementedError
