from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..common.cache import CacheService
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..dashboard.keys import invalidate_dashboard
from ..users.model import User
from ..users.repository import UserRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# Request field -> Employee attribute.
UPDATABLE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "phone": "phone",
    "address": "address",
    "profilePictureUrl": "profile_picture_url",
    "department": "department",
    "designation": "designation",
}
SELF_SERVICE_FIELDS = ("phone", "address", "profilePictureUrl")


def find_employee_or_raise(employees: EmployeeRepository, user_id: str, message: str = "Employee not found") -> Employee:
    employee = employees.get_by_user_id(user_id)
    if not employee:
        raise NotFoundError(message)
    return employee


def _parse_changes(payload: Mapping[str, Any]) -> Dict[str, Any]:
    if not isinstance(payload, Mapping):
        raise ValidationError("Request body must be a JSON object")
    unknown = sorted(set(payload) - set(UPDATABLE_FIELDS))
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(unknown)}")

    changes: Dict[str, Any] = {}
    for field, value in payload.items():
        if value is not None and not isinstance(value, str):
            raise ValidationError(f"{field} must be a string")
        if field in ("firstName", "lastName"):
            value = require_non_empty(value, field)
        changes[UPDATABLE_FIELDS[field]] = value
    return changes


def _forbidden_fields(payload: Mapping[str, Any]) -> List[str]:
    return [field for field in payload if field not in SELF_SERVICE_FIELDS]


class EmployeeService:
    def __init__(self, employees: EmployeeRepository, users: UserRepository, cache: CacheService):
        self._employees = employees
        self._users = users
        self._cache = cache

    def get_profile(self, user_id: str) -> dict:
        employee = find_employee_or_raise(self._employees, user_id, "Employee profile not found")
        return self._to_profile(employee)

    def update_my_profile(self, user_id: str, payload: Mapping[str, Any]) -> dict:
        employee = find_employee_or_raise(self._employees, user_id, "Employee profile not found")
        changes = _parse_changes(payload)

        forbidden = _forbidden_fields(payload)
        if forbidden:
            raise AuthorizationError(
                f"You cannot update: {', '.join(forbidden)}. You can only update: {', '.join(SELF_SERVICE_FIELDS)}"
            )

        return self._apply(employee, changes)

    def list_employees(self, *, current_role: Role) -> List[dict]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
        return [self._to_profile(e) for e in self._employees.list_all()]

    def get_employee(self, *, user_id: str, current_role: Role, employee_id: str) -> dict:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        if current_role != Role.ADMIN and employee.user_id != user_id:
            raise AuthorizationError("You can only view your own profile")
        return self._to_profile(employee)

    def update_employee(
        self,
        *,
        user_id: str,
        current_role: Role,
        employee_id: str,
        payload: Mapping[str, Any],
    ) -> dict:
        """Admins may change every profile field; employees only their own contact fields."""
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        if current_role != Role.ADMIN and employee.user_id != user_id:
            raise AuthorizationError("You can only update your own profile")

        changes = _parse_changes(payload)
        if current_role != Role.ADMIN:
            forbidden = _forbidden_fields(payload)
            if forbidden:
                raise AuthorizationError(
                    f"Employees cannot update: {', '.join(forbidden)}. "
                    f"You can only update: {', '.join(SELF_SERVICE_FIELDS)}"
                )

        return self._apply(employee, changes)

    def _apply(self, employee: Employee, changes: Dict[str, Any]) -> dict:
        updated = self._employees.update(employee.id, changes)
        if changes:
            logger.info("Employee %s updated (%s)", employee.id, ", ".join(sorted(changes)))
            invalidate_dashboard(self._cache, employee.user_id)
        return self._to_profile(updated)

    def _to_profile(self, employee: Employee) -> dict:
        user: Optional[User] = self._users.get_by_id(employee.user_id)
        return {
            "id": employee.id,
            "userId": employee.user_id,
            "firstName": employee.first_name,
            "lastName": employee.last_name,
            "email": user.email if user else None,
            "role": user.role.value if user else None,
            "isActive": user.is_active if user else None,
            "phone": employee.phone,
            "address": employee.address,
            "profilePictureUrl": employee.profile_picture_url,
            "department": employee.department,
            "designation": employee.designation,
            "joiningDate": _iso(employee.joining_date),
        }


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None
