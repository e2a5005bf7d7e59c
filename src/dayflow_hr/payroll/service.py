from __future__ import annotations

import json
import logging
from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional

from ..audit.model import AuditEntry
from ..common.cache import CacheService
from ..common.datetime_utils import iso_date, month_start
from ..core.enums import AuditAction, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..dashboard.keys import invalidate_dashboard
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..employees.service import find_employee_or_raise
from .model import Payroll
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def calculate_net_salary(base_salary: Decimal, allowances: Decimal = Decimal("0"), deductions: Decimal = Decimal("0")) -> Decimal:
    return base_salary + allowances - deductions


def _require_admin(current_role: Role) -> None:
    if current_role != Role.ADMIN:
        raise AuthorizationError("Admin access required")


def _check_components(*amounts: Decimal) -> None:
    if any(a < 0 for a in amounts):
        raise ValidationError("Salary components cannot be negative")


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        employees: EmployeeRepository,
        cache: CacheService,
    ):
        self._payrolls = payrolls
        self._employees = employees
        self._cache = cache

    def get_my_payroll(self, user_id: str) -> List[Payroll]:
        employee = find_employee_or_raise(self._employees, user_id)
        return list(self._payrolls.list_for_employee(employee.id))

    def get_payroll_by_month(self, user_id: str, month: date) -> Payroll:
        employee = find_employee_or_raise(self._employees, user_id)
        payroll = self._payrolls.get_for_month(employee.id, month_start(month))
        if not payroll:
            raise NotFoundError("Payroll record not found for this month")
        return payroll

    def get_employee_payroll(self, *, current_role: Role, employee_id: str) -> List[Payroll]:
        _require_admin(current_role)
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return list(self._payrolls.list_for_employee(employee.id))

    def list_payrolls(self, *, current_role: Role, month: Optional[date] = None) -> List[dict]:
        """All payrolls (optionally one month) with the employee's name and department."""
        _require_admin(current_role)

        employees: Dict[str, Optional[Employee]] = {}
        out: List[dict] = []
        for payroll in self._payrolls.list_all(month_start(month) if month else None):
            if payroll.employee_id not in employees:
                employees[payroll.employee_id] = self._employees.get_by_id(payroll.employee_id)
            employee = employees[payroll.employee_id]

            item = payroll.to_dict()
            item["employee"] = (
                {"firstName": employee.first_name, "lastName": employee.last_name, "department": employee.department}
                if employee
                else None
            )
            out.append(item)
        return out

    def create_payroll(
        self,
        *,
        current_role: Role,
        admin_user_id: str,
        employee_id: str,
        base_salary: Decimal,
        allowances: Decimal,
        deductions: Decimal,
        effective_date: date,
    ) -> Payroll:
        _require_admin(current_role)

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        _check_components(base_salary, allowances, deductions)

        month = month_start(effective_date)
        if self._payrolls.get_for_month(employee.id, month):
            raise ValidationError(f"Payroll already exists for this employee in {iso_date(month)}")

        net_salary = calculate_net_salary(base_salary, allowances, deductions)
        payroll = self._payrolls.create(
            employee_id=employee.id,
            month=month,
            base_salary=base_salary,
            allowances=allowances,
            deductions=deductions,
            net_salary=net_salary,
            effective_date=effective_date,
            audit=AuditEntry(
                action=AuditAction.CREATE,
                user_id=admin_user_id,
                entity_type="Payroll",
                reason="Payroll created",
                changes=json.dumps(
                    {
                        "baseSalary": str(base_salary),
                        "allowances": str(allowances),
                        "deductions": str(deductions),
                        "netSalary": str(net_salary),
                    }
                ),
            ),
        )
        logger.info("Payroll %s created for employee %s (%s)", payroll.id, employee.id, iso_date(month))

        invalidate_dashboard(self._cache, employee.user_id)
        return payroll

    def update_payroll(
        self,
        *,
        current_role: Role,
        admin_user_id: str,
        payroll_id: str,
        base_salary: Optional[Decimal] = None,
        allowances: Optional[Decimal] = None,
        deductions: Optional[Decimal] = None,
        effective_date: Optional[date] = None,
    ) -> Payroll:
        """Change any subset of the salary components; the month stays as created."""
        _require_admin(current_role)

        current = self._payrolls.get_by_id(payroll_id)
        if not current:
            raise NotFoundError("Payroll record not found")

        base_salary = current.base_salary if base_salary is None else base_salary
        allowances = current.allowances if allowances is None else allowances
        deductions = current.deductions if deductions is None else deductions
        effective_date = effective_date or current.effective_date
        _check_components(base_salary, allowances, deductions)

        net_salary = calculate_net_salary(base_salary, allowances, deductions)
        payroll = self._payrolls.update(
            payroll_id=current.id,
            base_salary=base_salary,
            allowances=allowances,
            deductions=deductions,
            net_salary=net_salary,
            effective_date=effective_date,
            audit=AuditEntry(
                action=AuditAction.UPDATE,
                user_id=admin_user_id,
                entity_type="Payroll",
                reason="Payroll updated",
                changes=json.dumps(
                    {
                        "previousBaseSalary": str(current.base_salary),
                        "newBaseSalary": str(base_salary),
                        "previousAllowances": str(current.allowances),
                        "newAllowances": str(allowances),
                        "previousDeductions": str(current.deductions),
                        "newDeductions": str(deductions),
                        "previousNetSalary": str(current.net_salary),
                        "newNetSalary": str(net_salary),
                        "previousEffectiveDate": iso_date(current.effective_date),
                        "newEffectiveDate": iso_date(effective_date),
                    }
                ),
            ),
        )
        logger.info("Payroll %s updated by %s", payroll.id, admin_user_id)

        owner = self._employees.get_by_id(payroll.employee_id)
        if owner:
            invalidate_dashboard(self._cache, owner.user_id)
        return payroll
