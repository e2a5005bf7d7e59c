from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable

from werkzeug.security import check_password_hash

from ..common.datetime_utils import now_local
from ..core.exceptions import AuthenticationError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .repository import RefreshTokenRepository
from .token import TokenService

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: exchange credentials or a refresh token for an access token."""

    def __init__(
        self,
        users: UserRepository,
        tokens: TokenService,
        refresh_tokens: RefreshTokenRepository,
        *,
        now: Callable[[], datetime] = now_local,
    ):
        self._users = users
        self._tokens = tokens
        self._refresh_tokens = refresh_tokens
        self._now = now

    def login(self, email: str, password: str) -> dict:
        user = self._users.get_by_email((email or "").strip().lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            logger.info("Rejected login for user %s", user.id)
            raise AuthenticationError("Invalid email or password")

        return self._issue_tokens(user)

    def refresh(self, refresh_token: str) -> dict:
        """Trade a stored refresh token for a new token pair; the old one is revoked."""
        user_id = self._tokens.verify_refresh(refresh_token)

        stored = self._refresh_tokens.get_by_token(refresh_token)
        if not stored or stored.user_id != user_id or stored.expires_at < self._now():
            raise AuthenticationError("Failed to refresh token")

        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthenticationError("Failed to refresh token")

        if not self._refresh_tokens.delete_by_token(refresh_token):
            # Lost a race with logout or another refresh of the same token.
            raise AuthenticationError("Failed to refresh token")
        return self._issue_tokens(user)

    def logout(self, user_id: str, refresh_token: str) -> dict:
        if not refresh_token:
            raise ValidationError("Refresh token is required")

        stored = self._refresh_tokens.get_by_token(refresh_token)
        if not stored or stored.user_id != user_id or not self._refresh_tokens.delete_by_token(refresh_token):
            raise AuthenticationError("Failed to logout")

        logger.info("User %s logged out", user_id)
        return {"message": "Logged out successfully"}

    def _issue_tokens(self, user: User) -> dict:
        refresh_token = self._tokens.issue_refresh(user_id=user.id)
        self._refresh_tokens.create(
            user_id=user.id,
            token=refresh_token,
            expires_at=self._now() + timedelta(seconds=self._tokens.refresh_expires_in),
        )
        return {
            "accessToken": self._tokens.issue(user_id=user.id, role=user.role),
            "refreshToken": refresh_token,
            "expiresIn": self._tokens.expires_in,
            "user": {"id": user.id, "email": user.email, "role": user.role.value},
        }
