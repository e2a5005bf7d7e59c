from __future__ import annotations

import logging
from typing import List, Optional

from werkzeug.security import generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class UserService:
    """Use case: manage login accounts (admin)."""

    def __init__(self, users: UserRepository, employees: EmployeeRepository):
        self._users = users
        self._employees = employees

    def create_user(
        self,
        *,
        current_role: Role,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: Role = Role.EMPLOYEE,
    ) -> dict:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        email = require_email(email)
        require_min_length(password, "Password", PASSWORD_MIN_LENGTH)
        first_name = require_non_empty(first_name, "firstName")
        last_name = require_non_empty(last_name, "lastName")

        if self._users.get_by_email(email):
            raise ValidationError("Email already in use")

        user = self._users.create_with_profile(
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            first_name=first_name,
            last_name=last_name,
        )
        logger.info("User %s created (%s)", user.id, role.value)
        return self._to_dict(user)

    def get_user(self, *, user_id: str, current_role: Role, target_user_id: str) -> dict:
        if current_role != Role.ADMIN and target_user_id != user_id:
            raise AuthorizationError("You can only view your own account")
        user = self._users.get_by_id(target_user_id)
        if not user:
            raise NotFoundError("User not found")
        return self._to_dict(user)

    def list_users(self, *, current_role: Role) -> List[dict]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
        return [self._to_dict(u) for u in self._users.list_all()]

    def _to_dict(self, user: User) -> dict:
        """Account without its password hash, with the linked employee profile."""
        employee: Optional[Employee] = self._employees.get_by_user_id(user.id)
        return {
            "id": user.id,
            "email": user.email,
            "role": user.role.value,
            "isActive": user.is_active,
            "employee": (
                {
                    "id": employee.id,
                    "firstName": employee.first_name,
                    "lastName": employee.last_name,
                    "department": employee.department,
                    "designation": employee.designation,
                }
                if employee
                else None
            ),
        }
