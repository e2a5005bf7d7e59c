from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class Leave:
    id: str
    employee_id: str
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: Optional[str]
    status: LeaveStatus
    created_at: datetime
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "leaveType": self.leave_type.value,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "reason": self.reason,
            "status": self.status.value,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@dataclass(frozen=True)
class LeaveApproval:
    """Approval note left by the admin (an employee) who approved a leave."""

    id: str
    leave_id: str
    approved_by: str
    approval_date: datetime
    comments: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "leaveId": self.leave_id,
            "approvedBy": self.approved_by,
            "approvalDate": self.approval_date.isoformat(),
            "comments": self.comments,
        }
