from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..audit.model import AuditEntry
from .model import Payroll


class PayrollRepository(Protocol):
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
        """Insert the month's payroll and ``audit`` (entity id filled in) together.

        A second payroll for the same employee and month raises ``ValidationError``.
        """

        raise NotImplementedError

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
        raise NotImplementedError

    def get_by_id(self, payroll_id: str) -> Optional[Payroll]:
        raise NotImplementedError

    def get_for_month(self, employee_id: str, month: date) -> Optional[Payroll]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[Payroll]:
        """Newest month first."""

        raise NotImplementedError

    def list_all(self, month: Optional[date] = None) -> Sequence[Payroll]:
        """Every employee's payroll, newest month first, then by employee first name."""

        raise NotImplementedError

    def list_recently_updated(self, employee_id: str, limit: int) -> Sequence[Payroll]:
        raise NotImplementedError

    def get_latest(self, employee_id: str) -> Optional[Payroll]:
        raise NotImplementedError
