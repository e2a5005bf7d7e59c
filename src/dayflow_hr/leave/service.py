from __future__ import annotations

import json
import logging
from datetime import date
from typing import List, Optional

from ..audit.model import AuditEntry
from ..common.cache import CacheService
from ..core.enums import AuditAction, LeaveStatus, LeaveType, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..dashboard.keys import invalidate_dashboard
from ..employees.repository import EmployeeRepository
from ..employees.service import find_employee_or_raise
from .model import Leave
from .repository import LeaveRepository

logger = logging.getLogger(__name__)

_BLOCKING_STATUSES = (LeaveStatus.PENDING, LeaveStatus.APPROVED)


class LeaveService:
    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        cache: CacheService,
    ):
        self._leaves = leaves
        self._employees = employees
        self._cache = cache

    def apply_leave(
        self,
        *,
        user_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str] = None,
    ) -> Leave:
        employee = find_employee_or_raise(self._employees, user_id)

        if start_date > end_date:
            raise ValidationError("Start date must be before end date")

        overlapping = self._leaves.find_overlapping(
            employee_id=employee.id,
            start_date=start_date,
            end_date=end_date,
            statuses=_BLOCKING_STATUSES,
        )
        if overlapping:
            raise ConflictError("You already have a leave request that overlaps with these dates")

        leave = self._leaves.create(
            employee_id=employee.id,
            leave_type=leave_type,
            start_date=start_date,
            end_date=end_date,
            reason=(reason or "").strip() or None,
        )
        invalidate_dashboard(self._cache, user_id)
        return leave

    def get_my_leaves(self, user_id: str) -> List[Leave]:
        employee = find_employee_or_raise(self._employees, user_id)
        return list(self._leaves.list_for_employee(employee.id))

    def get_pending_leaves(self, *, current_role: Role) -> List[dict]:
        """Pending requests of every employee, newest first, with the requester's name."""
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        out: List[dict] = []
        for leave in self._leaves.list_by_status(LeaveStatus.PENDING):
            employee = self._employees.get_by_id(leave.employee_id)
            item = leave.to_dict()
            item["employee"] = (
                {"firstName": employee.first_name, "lastName": employee.last_name, "department": employee.department}
                if employee
                else None
            )
            out.append(item)
        return out

    def get_leave(self, *, user_id: str, current_role: Role, leave_id: str) -> dict:
        leave = self._leaves.get_by_id(leave_id)
        if not leave:
            raise NotFoundError("Leave request not found")

        if current_role != Role.ADMIN:
            requester = self._employees.get_by_user_id(user_id)
            if not requester or requester.id != leave.employee_id:
                raise AuthorizationError("You can only view your own leave requests")

        item = leave.to_dict()
        item["approvals"] = [a.to_dict() for a in self._leaves.list_approvals(leave.id)]
        return item

    def approve_leave(self, *, current_role: Role, admin_user_id: str, leave_id: str, comments: str = "") -> Leave:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        leave = self._pending_leave(leave_id, verb="approve")
        approver = self._employees.get_by_user_id(admin_user_id)
        if not approver:
            raise ValidationError("Approver is not an employee")

        note = (comments or "").strip() or None
        decided = self._leaves.decide(
            leave_id=leave.id,
            status=LeaveStatus.APPROVED,
            approver_id=approver.id,
            comments=note,
            audit=AuditEntry(
                action=AuditAction.APPROVE,
                user_id=admin_user_id,
                entity_type="Leave",
                entity_id=leave.id,
                reason="Leave request approved",
                changes=json.dumps({"status": LeaveStatus.APPROVED.value, "comments": note}),
            ),
        )
        return self._after_decision(leave, decided, admin_user_id, statistics=True)

    def reject_leave(self, *, current_role: Role, admin_user_id: str, leave_id: str, comments: str = "") -> Leave:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

        leave = self._pending_leave(leave_id, verb="reject")
        note = (comments or "").strip() or None
        decided = self._leaves.decide(
            leave_id=leave.id,
            status=LeaveStatus.REJECTED,
            audit=AuditEntry(
                action=AuditAction.REJECT,
                user_id=admin_user_id,
                entity_type="Leave",
                entity_id=leave.id,
                reason=note,
                changes=json.dumps({"status": LeaveStatus.REJECTED.value}),
            ),
        )
        return self._after_decision(leave, decided, admin_user_id, statistics=False)

    def _pending_leave(self, leave_id: str, *, verb: str) -> Leave:
        leave = self._leaves.get_by_id(leave_id)
        if not leave:
            raise NotFoundError("Leave request not found")
        if leave.status != LeaveStatus.PENDING:
            raise ValidationError(f"Cannot {verb} a {leave.status.value} leave request")
        return leave

    def _after_decision(self, leave: Leave, decided: bool, admin_user_id: str, *, statistics: bool) -> Leave:
        if not decided:
            raise ConflictError("Leave request was decided concurrently")

        updated = self._leaves.get_by_id(leave.id) or leave
        logger.info("Leave %s %s by %s", leave.id, updated.status.value, admin_user_id)

        owner = self._employees.get_by_id(leave.employee_id)
        if owner:
            invalidate_dashboard(self._cache, owner.user_id, statistics=statistics)
        return updated
