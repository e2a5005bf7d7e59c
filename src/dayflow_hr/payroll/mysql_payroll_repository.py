from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

import mysql.connector

from ..audit.model import AuditEntry
from ..audit.mysql_audit_repository import insert_audit_log
from ..common.datetime_utils import iso_date
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, new_id
from .model import Payroll
from .repository import PayrollRepository

_COLUMNS = """
    id, employee_id, month, base_salary, allowances, deductions,
    net_salary, effective_date, created_at, updated_at
"""


def _to_payroll(r: Dict[str, Any]) -> Payroll:
    return Payroll(
        id=str(r["id"]),
        employee_id=str(r["employee_id"]),
        month=r["month"],
        base_salary=as_decimal(r["base_salary"]),
        allowances=as_decimal(r["allowances"]),
        deductions=as_decimal(r["deductions"]),
        net_salary=as_decimal(r["net_salary"]),
        effective_date=r["effective_date"],
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: str,
        month: date,
        base_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        net_salary: Decimal,
        effective_date: date,
        audit: AuditEntry,
    ) -> Payroll:
        payroll_id = new_id()
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO payrolls(
                        id, employee_id, month, base_salary, allowances, deductions, net_salary, effective_date
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        payroll_id,
                        str(employee_id),
                        month,
                        base_salary,
                        allowances,
                        deductions,
                        net_salary,
                        effective_date,
                    ),
                )
                insert_audit_log(cur, replace(audit, entity_id=payroll_id))
                cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE id=%s", (payroll_id,))
                return _to_payroll(fetchone(cur))
        except mysql.connector.IntegrityError:
            # uq_payrolls_employee_month: another request created the month first.
            raise ValidationError(f"Payroll already exists for this employee in {iso_date(month)}")

    def update(
        self,
        *,
        payroll_id: str,
        base_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        net_salary: Decimal,
        effective_date: date,
        audit: AuditEntry,
    ) -> Payroll:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE payrolls
                SET base_salary=%s, allowances=%s, deductions=%s, net_salary=%s, effective_date=%s
                WHERE id=%s
                """,
                (base_salary, allowances, deductions, net_salary, effective_date, str(payroll_id)),
            )
            insert_audit_log(cur, replace(audit, entity_id=str(payroll_id)))
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE id=%s", (str(payroll_id),))
            return _to_payroll(fetchone(cur))

    def get_by_id(self, payroll_id: str) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payrolls WHERE id=%s", (str(payroll_id),))
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def get_for_month(self, employee_id: str, month: date) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s AND month=%s",
                (str(employee_id), month),
            )
            r = fetchone(cur)
            return _to_payroll(r) if r else None

    def list_for_employee(self, employee_id: str) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s ORDER BY month DESC",
                (str(employee_id),),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def list_all(self, month: Optional[date] = None) -> Sequence[Payroll]:
        columns = ", ".join(f"p.{c.strip()}" for c in _COLUMNS.split(","))
        sql = f"SELECT {columns} FROM payrolls p JOIN employees e ON e.id = p.employee_id"
        params: tuple = ()
        if month:
            sql += " WHERE p.month=%s"
            params = (month,)
        sql += " ORDER BY p.month DESC, e.first_name ASC"

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_payroll(r) for r in fetchall(cur)]

    def list_recently_updated(self, employee_id: str, limit: int) -> Sequence[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s ORDER BY updated_at DESC LIMIT %s",
                (str(employee_id), int(limit)),
            )
            return [_to_payroll(r) for r in fetchall(cur)]

    def get_latest(self, employee_id: str) -> Optional[Payroll]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM payrolls WHERE employee_id=%s ORDER BY month DESC LIMIT 1",
                (str(employee_id),),
            )
            r = fetchone(cur)
            return _to_payroll(r) if r else None
