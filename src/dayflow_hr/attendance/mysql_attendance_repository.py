from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence

from ..audit.model import AuditEntry
from ..audit.mysql_audit_repository import insert_audit_log
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = "id, employee_id, work_date, check_in_time, check_out_time, status, overridden_by, override_reason"


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        id=str(r["id"]),
        employee_id=str(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        status=AttendanceStatus(r["status"]),
        overridden_by=r.get("overridden_by"),
        override_reason=r.get("override_reason"),
    )


def _select_day(cur, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
    cur.execute(
        f"SELECT {_COLUMNS} FROM attendance WHERE employee_id=%s AND work_date=%s",
        (str(employee_id), work_date),
    )
    r = fetchone(cur)
    return _to_record(r) if r else None


def mark_days(cur, *, employee_id: str, days: Iterable[date], status: AttendanceStatus) -> int:
    """Upsert one row per day with ``status`` on an open cursor; returns the day count."""
    count = 0
    for day in days:
        cur.execute(
            """
            INSERT INTO attendance(id, employee_id, work_date, status)
            VALUES(%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE status=VALUES(status)
            """,
            (new_id(), str(employee_id), day, status.value),
        )
        count += 1
    return count


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return _select_day(cur, employee_id, work_date)

    def count_by_status(self, employee_id: str, *, start_date: date, end_date: date) -> Dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT status, COUNT(*) AS total
                FROM attendance
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                GROUP BY status
                """,
                (str(employee_id), start_date, end_date),
            )
            return {r["status"]: int(r["total"]) for r in fetchall(cur)}

    def list_for_employee(
        self,
        employee_id: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[AttendanceRecord]:
        where: List[str] = ["employee_id=%s"]
        params: List[Any] = [str(employee_id)]
        if start_date:
            where.append("work_date >= %s")
            params.append(start_date)
        if end_date:
            where.append("work_date <= %s")
            params.append(end_date)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance WHERE {' AND '.join(where)} ORDER BY work_date DESC",
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def check_in(self, *, employee_id: str, work_date: date, check_in_time: datetime) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(id, employee_id, work_date, check_in_time, status)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE check_in_time=VALUES(check_in_time), status=VALUES(status)
                """,
                (new_id(), str(employee_id), work_date, check_in_time, AttendanceStatus.PRESENT.value),
            )
            return _select_day(cur, employee_id, work_date)

    def check_out(self, *, record_id: str, check_out_time: datetime) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET check_out_time=%s WHERE id=%s",
                (check_out_time, str(record_id)),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM attendance WHERE id=%s", (str(record_id),))
            return _to_record(fetchone(cur))

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(id, employee_id, work_date, status, overridden_by, override_reason)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    overridden_by=VALUES(overridden_by),
                    override_reason=VALUES(override_reason)
                """,
                (new_id(), str(employee_id), work_date, status.value, str(overridden_by), reason),
            )
            record = _select_day(cur, employee_id, work_date)
            insert_audit_log(cur, replace(audit, entity_id=record.id))
            return record
