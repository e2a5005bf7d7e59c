from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Payroll:
    id: str
    employee_id: str
    month: date
    base_salary: Decimal
    allowances: Decimal
    deductions: Decimal
    net_salary: Decimal
    effective_date: date
    created_at: datetime
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "month": self.month.isoformat(),
            "baseSalary": str(self.base_salary),
            "allowances": str(self.allowances),
            "deductions": str(self.deductions),
            "netSalary": str(self.net_salary),
            "effectiveDate": self.effective_date.isoformat(),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
