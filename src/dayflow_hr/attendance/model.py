from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    id: str
    employee_id: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    status: AttendanceStatus
    overridden_by: Optional[str] = None
    override_reason: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_id,
            "date": self.work_date.isoformat(),
            "checkInTime": self.check_in_time.isoformat() if self.check_in_time else None,
            "checkOutTime": self.check_out_time.isoformat() if self.check_out_time else None,
            "status": self.status.value,
            "overriddenBy": self.overridden_by,
            "overrideReason": self.override_reason,
        }
