from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt

from ..core.constants import (
    DEFAULT_TOKEN_EXPIRATION_SECONDS,
    REFRESH_TOKEN_EXPIRATION_SECONDS,
    REFRESH_TOKEN_TYPE,
    TOKEN_ALGORITHM,
)
from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .model import RequestUser


class TokenService:
    """Issues and verifies signed tokens.

    Access tokens carry ``(userId, role)``. Refresh tokens carry ``userId``, a
    ``type`` marker and a unique ``jti``; they are only accepted by
    ``verify_refresh``.
    """

    def __init__(
        self,
        secret: str,
        *,
        expires_in: int = DEFAULT_TOKEN_EXPIRATION_SECONDS,
        refresh_expires_in: int = REFRESH_TOKEN_EXPIRATION_SECONDS,
    ):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expires_in = int(expires_in)
        self._refresh_expires_in = int(refresh_expires_in)

    @property
    def expires_in(self) -> int:
        return self._expires_in

    @property
    def refresh_expires_in(self) -> int:
        return self._refresh_expires_in

    def issue(self, *, user_id: str, role: Role) -> str:
        now = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "userId": str(user_id),
            "role": role.value,
            "iat": now,
            "exp": now + timedelta(seconds=self._expires_in),
        }
        return jwt.encode(claims, self._secret, algorithm=TOKEN_ALGORITHM)

    def issue_refresh(self, *, user_id: str) -> str:
        now = datetime.now(timezone.utc)
        claims: Dict[str, Any] = {
            "userId": str(user_id),
            "type": REFRESH_TOKEN_TYPE,
            "jti": uuid.uuid4().hex,
            "iat": now,
            "exp": now + timedelta(seconds=self._refresh_expires_in),
        }
        return jwt.encode(claims, self._secret, algorithm=TOKEN_ALGORITHM)

    def verify(self, token: str) -> RequestUser:
        payload = self._decode(token, "Invalid or expired token")

        user_id = payload.get("userId")
        role = payload.get("role")
        if payload.get("type") == REFRESH_TOKEN_TYPE or not user_id or role not in {r.value for r in Role}:
            raise AuthenticationError("Invalid or expired token")
        return RequestUser(user_id=str(user_id), role=Role(role))

    def verify_refresh(self, token: str) -> str:
        """Return the user id of a valid refresh token."""
        payload = self._decode(token, "Failed to refresh token")

        user_id = payload.get("userId")
        if payload.get("type") != REFRESH_TOKEN_TYPE or not user_id:
            raise AuthenticationError("Failed to refresh token")
        return str(user_id)

    def _decode(self, token: str, message: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self._secret, algorithms=[TOKEN_ALGORITHM])
        except JWTError:
            raise AuthenticationError(message)
