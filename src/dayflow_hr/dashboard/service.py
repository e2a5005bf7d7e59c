from __future__ import annotations

from datetime import date
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..common.cache import CacheService
from ..common.datetime_utils import iso_date, month_end, month_start, now_local
from ..core.constants import DEFAULT_DASHBOARD_CACHE_TTL_MS
from ..core.enums import LeaveStatus
from ..core.exceptions import NotFoundError
from ..employees.repository import EmployeeRepository
from ..employees.service import find_employee_or_raise
from ..leave.repository import LeaveRepository
from ..payroll.repository import PayrollRepository
from .keys import dashboard_statistics_key, dashboard_summary_key

PROFILE_NOT_FOUND = {"message": "Employee profile not found"}


class DashboardService:
    """Per-user dashboard views, memoized in the shared cache.

    A missing employee profile raises inside the cache factory, so nothing is
    cached for users who have no profile yet.
    """

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        payrolls: PayrollRepository,
        cache: CacheService,
        *,
        ttl: int = DEFAULT_DASHBOARD_CACHE_TTL_MS,
        today: Callable[[], date] = lambda: now_local().date(),
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._payrolls = payrolls
        self._cache = cache
        self._ttl = ttl
        self._today = today

    def get_summary(self, user_id: str) -> dict:
        try:
            return self._cache.get_or_set(
                dashboard_summary_key(user_id),
                lambda: self._build_summary(user_id),
                self._ttl,
            )
        except NotFoundError:
            return dict(PROFILE_NOT_FOUND)

    def get_statistics(self, user_id: str) -> dict:
        try:
            return self._cache.get_or_set(
                dashboard_statistics_key(user_id),
                lambda: self._build_statistics(user_id),
                self._ttl,
            )
        except NotFoundError:
            return dict(PROFILE_NOT_FOUND)

    def _build_summary(self, user_id: str) -> dict:
        employee = find_employee_or_raise(self._employees, user_id)

        today_attendance = self._attendance.get_for_employee_and_date(employee.id, self._today())
        pending_leaves = self._leaves.count_by_status(employee.id, LeaveStatus.PENDING)
        latest_payroll = self._payrolls.get_latest(employee.id)

        return {
            "employee": {
                "name": employee.full_name,
                "department": employee.department,
                "designation": employee.designation,
            },
            "todayAttendance": today_attendance.to_dict() if today_attendance else {"status": "Not checked in"},
            "pendingLeaves": pending_leaves,
            "latestPayroll": latest_payroll.to_dict() if latest_payroll else None,
        }

    def _build_statistics(self, user_id: str) -> dict:
        employee = find_employee_or_raise(self._employees, user_id)

        start = month_start(self._today())
        end = month_end(start)

        stats = self._attendance.count_by_status(employee.id, start_date=start, end_date=end)
        return {"month": iso_date(start), "attendanceStats": dict(stats)}
