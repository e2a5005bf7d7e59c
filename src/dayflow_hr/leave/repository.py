from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from ..audit.model import AuditEntry
from ..core.enums import LeaveStatus, LeaveType
from .model import Leave, LeaveApproval


class LeaveRepository(Protocol):
    def create(
        self,
        *,
        employee_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> Leave:
        raise NotImplementedError

    def get_by_id(self, leave_id: str) -> Optional[Leave]:
        raise NotImplementedError

    def find_overlapping(
        self,
        *,
        employee_id: str,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveStatus],
    ) -> Optional[Leave]:
        raise NotImplementedError

    def list_for_employee(self, employee_id: str) -> Sequence[Leave]:
        """Newest request first."""

        raise NotImplementedError

    def list_recently_updated(self, employee_id: str, limit: int) -> Sequence[Leave]:
        raise NotImplementedError

    def count_by_status(self, employee_id: str, status: LeaveStatus) -> int:
        raise NotImplementedError

    def list_by_status(self, status: LeaveStatus) -> Sequence[Leave]:
        """All employees, newest request first."""

        raise NotImplementedError

    def list_approvals(self, leave_id: str) -> Sequence[LeaveApproval]:
        raise NotImplementedError

    def decide(
        self,
        *,
        leave_id: str,
        status: LeaveStatus,
        audit: AuditEntry,
        approver_id: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> bool:
        """Move a PENDING leave to ``status`` in one transaction.

        The same transaction writes ``audit``. An approval also records a
        ``LeaveApproval`` by ``approver_id`` and marks every day of the leave
        as LEAVE in attendance. Returns False, writing nothing, if the leave
        was no longer pending.
        """

        raise NotImplementedError
