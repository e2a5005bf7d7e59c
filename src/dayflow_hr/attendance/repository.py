from __future__ import annotations

from datetime import date, datetime
from typing import Dict, Optional, Protocol, Sequence

from ..audit.model import AuditEntry
from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def count_by_status(self, employee_id: str, *, start_date: date, end_date: date) -> Dict[str, int]:
        """Status -> number of days in the inclusive range."""

        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        """Newest day first; either bound may be omitted."""

        raise NotImplementedError

    def check_in(self, *, employee_id: str, work_date: date, check_in_time: datetime) -> AttendanceRecord:
        """Create the day's row as PRESENT, or stamp an existing row (e.g. an overridden one)."""

        raise NotImplementedError

    def check_out(self, *, record_id: str, check_out_time: datetime) -> AttendanceRecord:
        raise NotImplementedError

    def override(
        self,
        *,
        employee_id: str,
        work_date: date,
        status: AttendanceStatus,
        overridden_by: str,
        reason: Optional[str],
        audit: AuditEntry,
    ) -> AttendanceRecord:
        """Force the day's status and write ``audit`` in the same transaction."""

        raise NotImplementedError
