from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Callable, Dict, List, Optional

from ..audit.model import AuditEntry
from ..common.cache import CacheService
from ..common.datetime_utils import month_end, now_local
from ..core.enums import AttendanceStatus, AuditAction, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..dashboard.keys import invalidate_dashboard
from ..employees.repository import EmployeeRepository
from ..employees.service import find_employee_or_raise
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_STATS_FIELDS = {
    AttendanceStatus.PRESENT: "present",
    AttendanceStatus.ABSENT: "absent",
    AttendanceStatus.HALF_DAY: "halfDay",
    AttendanceStatus.LEAVE: "leave",
}


class AttendanceService:
    """Daily check-in/check-out, history and admin overrides."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        cache: CacheService,
        *,
        now: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._cache = cache
        self._now = now

    def check_in(self, user_id: str) -> AttendanceRecord:
        employee = find_employee_or_raise(self._employees, user_id)
        now = self._now()

        existing = self._attendance.get_for_employee_and_date(employee.id, now.date())
        if existing and existing.check_in_time:
            raise ConflictError("Already checked in today")

        record = self._attendance.check_in(employee_id=employee.id, work_date=now.date(), check_in_time=now)
        invalidate_dashboard(self._cache, user_id, statistics=True)
        return record

    def check_out(self, user_id: str) -> AttendanceRecord:
        employee = find_employee_or_raise(self._employees, user_id)
        now = self._now()

        record = self._attendance.get_for_employee_and_date(employee.id, now.date())
        if not record:
            raise ValidationError("No check-in record found for today. Please check in first")
        if not record.check_in_time:
            raise ValidationError("Must check in before checking out")
        if record.check_out_time:
            raise ConflictError("Already checked out today")

        updated = self._attendance.check_out(record_id=record.id, check_out_time=now)
        invalidate_dashboard(self._cache, user_id)
        return updated

    def get_today(self, user_id: str) -> Optional[AttendanceRecord]:
        employee = find_employee_or_raise(self._employees, user_id)
        return self._attendance.get_for_employee_and_date(employee.id, self._now().date())

    def get_by_date(self, user_id: str, work_date: date) -> AttendanceRecord:
        employee = find_employee_or_raise(self._employees, user_id)
        record = self._attendance.get_for_employee_and_date(employee.id, work_date)
        if not record:
            raise NotFoundError("Attendance record not found")
        return record

    def get_history(
        self,
        user_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[AttendanceRecord]:
        employee = find_employee_or_raise(self._employees, user_id)
        if start_date and end_date and start_date > end_date:
            raise ValidationError("startDate must not be after endDate")
        return list(self._attendance.list_for_employee(employee.id, start_date=start_date, end_date=end_date))

    def get_stats(self, user_id: str, month: date) -> Dict[str, int]:
        """Day counts per status for the month containing ``month``."""
        employee = find_employee_or_raise(self._employees, user_id)
        start = month.replace(day=1)
        counts = self._attendance.count_by_status(employee.id, start_date=start, end_date=month_end(start))

        stats = {field: int(counts.get(status.value, 0)) for status, field in _STATS_FIELDS.items()}
        stats["total"] = sum(stats.values())
        return stats

    def override_attendance(
        self,
        *,
        current_role: Role,
        admin_user_id: str,
        employee_id: str,
        work_date: date,
        status: AttendanceStatus,
        reason: Optional[str] = None,
    ) -> AttendanceRecord:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")

        previous = self._attendance.get_for_employee_and_date(employee.id, work_date)
        note = (reason or "").strip() or None
        record = self._attendance.override(
            employee_id=employee.id,
            work_date=work_date,
            status=status,
            overridden_by=admin_user_id,
            reason=note,
            audit=AuditEntry(
                action=AuditAction.OVERRIDE,
                user_id=admin_user_id,
                entity_type="Attendance",
                reason=note or "Attendance override",
                changes=json.dumps(
                    {
                        "previousStatus": previous.status.value if previous else "N/A",
                        "newStatus": status.value,
                    }
                ),
            ),
        )
        logger.info("Attendance of %s on %s overridden to %s by %s", employee.id, work_date, status.value, admin_user_id)

        invalidate_dashboard(self._cache, employee.user_id, statistics=True)
        return record
