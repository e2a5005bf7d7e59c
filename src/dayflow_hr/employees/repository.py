from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_user_id(self, user_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def update(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        """Apply ``changes`` keyed by ``Employee`` attribute name and return the fresh row."""

        raise NotImplementedError
