from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List

from ..audit.model import AuditLog
from ..audit.repository import AuditLogRepository
from ..common.datetime_utils import iso_date
from ..core.constants import AUDIT_NOTIFICATION_LIMIT, LEAVE_NOTIFICATION_LIMIT, PAYROLL_NOTIFICATION_LIMIT
from ..core.enums import NotificationType
from ..employees.repository import EmployeeRepository
from ..leave.model import Leave
from ..leave.repository import LeaveRepository
from ..payroll.model import Payroll
from ..payroll.repository import PayrollRepository
from .model import Notification, NotificationFeed


def from_audit_log(log: AuditLog) -> Notification:
    return Notification(
        type=NotificationType.AUDIT,
        message=f"{log.action.value} {log.entity_type}",
        created_at=log.created_at,
        metadata={"entityId": log.entity_id, "reason": log.reason},
    )


def from_leave(leave: Leave) -> Notification:
    return Notification(
        type=NotificationType.LEAVE,
        message=f"Leave {leave.status.value} from {iso_date(leave.start_date)} to {iso_date(leave.end_date)}",
        created_at=leave.updated_at or leave.created_at,
        metadata={"leaveId": leave.id, "status": leave.status.value},
    )


def from_payroll(payroll: Payroll) -> Notification:
    return Notification(
        type=NotificationType.PAYROLL,
        message=f"Payroll updated for {iso_date(payroll.month)}",
        created_at=payroll.updated_at or payroll.created_at,
        metadata={"payrollId": payroll.id, "netSalary": str(payroll.net_salary)},
    )


class NotificationService:
    """Builds a user's activity feed from audit logs, leaves and payrolls."""

    def __init__(
        self,
        employees: EmployeeRepository,
        audit_logs: AuditLogRepository,
        leaves: LeaveRepository,
        payrolls: PayrollRepository,
    ):
        self._employees = employees
        self._audit_logs = audit_logs
        self._leaves = leaves
        self._payrolls = payrolls

    def get_notifications(self, user_id: str) -> NotificationFeed:
        employee = self._employees.get_by_user_id(user_id)
        if not employee:
            return NotificationFeed(notifications=[], employee_found=False)

        with ThreadPoolExecutor(max_workers=3, thread_name_prefix="notifications") as pool:
            audit_future = pool.submit(self._audit_logs.list_recent_for_user, user_id, AUDIT_NOTIFICATION_LIMIT)
            leaves_future = pool.submit(self._leaves.list_recently_updated, employee.id, LEAVE_NOTIFICATION_LIMIT)
            payrolls_future = pool.submit(self._payrolls.list_recently_updated, employee.id, PAYROLL_NOTIFICATION_LIMIT)

            audit_logs = audit_future.result()
            leaves = leaves_future.result()
            payrolls = payrolls_future.result()

        notifications: List[Notification] = [
            *(from_audit_log(log) for log in audit_logs),
            *(from_leave(leave) for leave in leaves),
            *(from_payroll(payroll) for payroll in payrolls),
        ]
        notifications.sort(key=lambda n: n.created_at, reverse=True)
        return NotificationFeed(notifications=notifications)
