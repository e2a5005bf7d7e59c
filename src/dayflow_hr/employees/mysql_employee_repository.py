from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    id, user_id, first_name, last_name, phone, address, profile_picture_url,
    department, designation, joining_date, created_at, updated_at
"""

_UPDATABLE = ("first_name", "last_name", "phone", "address", "profile_picture_url", "department", "designation")


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        id=str(r["id"]),
        user_id=str(r["user_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        phone=r.get("phone"),
        address=r.get("address"),
        profile_picture_url=r.get("profile_picture_url"),
        department=r.get("department"),
        designation=r.get("designation"),
        joining_date=r.get("joining_date"),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_user_id(self, user_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE user_id=%s", (str(user_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (str(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY first_name, last_name")
            return [_to_employee(r) for r in fetchall(cur)]

    def update(self, employee_id: str, changes: Mapping[str, Any]) -> Employee:
        unknown = set(changes) - set(_UPDATABLE)
        if unknown:
            raise ValueError(f"not updatable: {sorted(unknown)}")

        with db_cursor(self._conn_factory) as (_, cur):
            if changes:
                # Column names come from _UPDATABLE, never from the request.
                assignments = ", ".join(f"{column}=%s" for column in changes)
                cur.execute(
                    f"UPDATE employees SET {assignments} WHERE id=%s",
                    tuple(changes.values()) + (str(employee_id),),
                )
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (str(employee_id),))
            return _to_employee(fetchone(cur))
