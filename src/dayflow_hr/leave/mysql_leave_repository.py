from __future__ import annotations

from datetime import date
from typing import Any, Dict, Iterable, Optional, Sequence

from ..attendance.mysql_attendance_repository import mark_days
from ..audit.model import AuditEntry
from ..audit.mysql_audit_repository import insert_audit_log
from ..common.datetime_utils import iter_days
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import Leave, LeaveApproval
from .repository import LeaveRepository

_COLUMNS = "id, employee_id, leave_type, start_date, end_date, reason, status, created_at, updated_at"


def _to_leave(r: Dict[str, Any]) -> Leave:
    return Leave(
        id=str(r["id"]),
        employee_id=str(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r.get("reason"),
        status=LeaveStatus(r["status"]),
        created_at=r["created_at"],
        updated_at=r.get("updated_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        employee_id: str,
        leave_type: LeaveType,
        start_date: date,
        end_date: date,
        reason: Optional[str],
    ) -> Leave:
        leave_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leaves(id, employee_id, leave_type, start_date, end_date, reason, status)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    leave_id,
                    str(employee_id),
                    leave_type.value,
                    start_date,
                    end_date,
                    reason,
                    LeaveStatus.PENDING.value,
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM leaves WHERE id=%s", (leave_id,))
            return _to_leave(fetchone(cur))

    def get_by_id(self, leave_id: str) -> Optional[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leaves WHERE id=%s", (str(leave_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def find_overlapping(
        self,
        *,
        employee_id: str,
        start_date: date,
        end_date: date,
        statuses: Iterable[LeaveStatus],
    ) -> Optional[Leave]:
        status_values = [s.value for s in statuses]
        placeholders = ",".join(["%s"] * len(status_values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leaves
                WHERE employee_id=%s
                  AND status IN ({placeholders})
                  AND start_date <= %s AND end_date >= %s
                LIMIT 1
                """,
                tuple([str(employee_id)] + status_values + [end_date, start_date]),
            )
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_for_employee(self, employee_id: str) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves WHERE employee_id=%s ORDER BY created_at DESC",
                (str(employee_id),),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_recently_updated(self, employee_id: str, limit: int) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves WHERE employee_id=%s ORDER BY updated_at DESC LIMIT %s",
                (str(employee_id), int(limit)),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def count_by_status(self, employee_id: str, status: LeaveStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS total FROM leaves WHERE employee_id=%s AND status=%s",
                (str(employee_id), status.value),
            )
            r = fetchone(cur)
            return int(r["total"]) if r else 0

    def list_by_status(self, status: LeaveStatus) -> Sequence[Leave]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leaves WHERE status=%s ORDER BY created_at DESC",
                (status.value,),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def list_approvals(self, leave_id: str) -> Sequence[LeaveApproval]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, leave_id, approved_by, approval_date, comments
                FROM leave_approvals
                WHERE leave_id=%s
                ORDER BY approval_date
                """,
                (str(leave_id),),
            )
            return [
                LeaveApproval(
                    id=str(r["id"]),
                    leave_id=str(r["leave_id"]),
                    approved_by=str(r["approved_by"]),
                    approval_date=r["approval_date"],
                    comments=r.get("comments"),
                )
                for r in fetchall(cur)
            ]

    def decide(
        self,
        *,
        leave_id: str,
        status: LeaveStatus,
        audit: AuditEntry,
        approver_id: Optional[str] = None,
        comments: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT employee_id, start_date, end_date FROM leaves WHERE id=%s AND status=%s FOR UPDATE",
                (str(leave_id), LeaveStatus.PENDING.value),
            )
            r = fetchone(cur)
            if not r:
                return False

            cur.execute(
                "UPDATE leaves SET status=%s WHERE id=%s AND status=%s",
                (status.value, str(leave_id), LeaveStatus.PENDING.value),
            )

            if status == LeaveStatus.APPROVED:
                cur.execute(
                    "INSERT INTO leave_approvals(id, leave_id, approved_by, comments) VALUES(%s,%s,%s,%s)",
                    (new_id(), str(leave_id), str(approver_id), comments),
                )
                mark_days(
                    cur,
                    employee_id=str(r["employee_id"]),
                    days=iter_days(r["start_date"], r["end_date"]),
                    status=AttendanceStatus.LEAVE,
                )

            insert_audit_log(cur, audit)
            return True
