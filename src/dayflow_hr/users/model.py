from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Login account. Pure data object, no DB access."""

    id: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
