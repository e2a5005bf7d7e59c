from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.enums import Role


@dataclass(frozen=True)
class RequestUser:
    """Authenticated caller attached to the request by ``auth_required``."""

    user_id: str
    role: Role


@dataclass(frozen=True)
class RefreshToken:
    """Stored refresh token; deleting the row revokes it."""

    id: str
    user_id: str
    token: str
    expires_at: datetime
