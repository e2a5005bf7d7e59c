from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_id(self, user_id: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        raise NotImplementedError

    def create_with_profile(
        self,
        *,
        email: str,
        password_hash: str,
        role: Role,
        first_name: str,
        last_name: str,
    ) -> User:
        """Create the account and its employee profile together.

        An email that is already taken raises ``ValidationError``.
        """

        raise NotImplementedError
