from __future__ import annotations

import json
from datetime import date, datetime

import pytest

from dayflow_hr.attendance.model import AttendanceRecord
from dayflow_hr.attendance.service import AttendanceService
from dayflow_hr.common.cache import CacheService
from dayflow_hr.core.enums import AttendanceStatus, AuditAction, Role
from dayflow_hr.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from dayflow_hr.dashboard.keys import dashboard_statistics_key, dashboard_summary_key

from fakes import InMemoryAttendance, InMemoryEmployees, make_employee, next_id

MORNING = datetime(2026, 3, 2, 8, 55)


def day(work_date, status=AttendanceStatus.PRESENT, **overrides):
    fields = dict(
        id=next_id("att"),
        employee_id="emp-1",
        work_date=work_date,
        check_in_time=None,
        check_out_time=None,
        status=status,
    )
    fields.update(overrides)
    return AttendanceRecord(**fields)


@pytest.fixture
def ctx(scheduler):
    clock = [MORNING]
    attendance = InMemoryAttendance()
    cache = CacheService(clock=scheduler.clock, timer_factory=scheduler.timer_factory)
    svc = AttendanceService(attendance, InMemoryEmployees(make_employee()), cache, now=lambda: clock[0])
    return svc, attendance, cache, clock


def test_check_in_creates_present_day_and_drops_dashboard(ctx):
    svc, _, cache, _ = ctx
    cache.set(dashboard_summary_key("user-1"), {})
    cache.set(dashboard_statistics_key("user-1"), {})

    record = svc.check_in("user-1")

    assert record.work_date == date(2026, 3, 2)
    assert record.check_in_time == MORNING
    assert record.status == AttendanceStatus.PRESENT
    assert cache.size() == 0


def test_second_check_in_conflicts(ctx):
    svc, _, _, _ = ctx
    svc.check_in("user-1")
    with pytest.raises(ConflictError, match="Already checked in today"):
        svc.check_in("user-1")


def test_check_in_stamps_overridden_day(ctx):
    svc, attendance, _, _ = ctx
    attendance.add(day(date(2026, 3, 2), status=AttendanceStatus.HALF_DAY))

    record = svc.check_in("user-1")

    assert record.status == AttendanceStatus.HALF_DAY
    assert record.check_in_time == MORNING
    assert len(attendance.records) == 1


def test_check_out_flow(ctx):
    svc, _, _, clock = ctx
    with pytest.raises(ValidationError, match="Please check in first"):
        svc.check_out("user-1")

    svc.check_in("user-1")
    clock[0] = datetime(2026, 3, 2, 17, 30)
    record = svc.check_out("user-1")
    assert record.check_out_time == datetime(2026, 3, 2, 17, 30)

    with pytest.raises(ConflictError, match="Already checked out today"):
        svc.check_out("user-1")


def test_check_out_needs_check_in_time(ctx):
    svc, attendance, _, _ = ctx
    attendance.add(day(date(2026, 3, 2), status=AttendanceStatus.LEAVE))
    with pytest.raises(ValidationError, match="Must check in before checking out"):
        svc.check_out("user-1")


def test_today_and_by_date(ctx):
    svc, attendance, _, _ = ctx
    assert svc.get_today("user-1") is None

    earlier = attendance.add(day(date(2026, 2, 27)))
    assert svc.get_by_date("user-1", date(2026, 2, 27)) == earlier
    with pytest.raises(NotFoundError, match="Attendance record not found"):
        svc.get_by_date("user-1", date(2026, 2, 28))


def test_history_is_newest_first_within_bounds(ctx):
    svc, attendance, _, _ = ctx
    for d in (date(2026, 2, 1), date(2026, 2, 10), date(2026, 2, 20)):
        attendance.add(day(d))

    history = svc.get_history("user-1", start_date=date(2026, 2, 5))

    assert [r.work_date for r in history] == [date(2026, 2, 20), date(2026, 2, 10)]
    with pytest.raises(ValidationError):
        svc.get_history("user-1", start_date=date(2026, 3, 1), end_date=date(2026, 2, 1))


def test_monthly_stats(ctx):
    svc, attendance, _, _ = ctx
    attendance.add(day(date(2026, 2, 2)))
    attendance.add(day(date(2026, 2, 3)))
    attendance.add(day(date(2026, 2, 4), status=AttendanceStatus.HALF_DAY))
    attendance.add(day(date(2026, 2, 5), status=AttendanceStatus.LEAVE))
    attendance.add(day(date(2026, 3, 1), status=AttendanceStatus.ABSENT))

    stats = svc.get_stats("user-1", date(2026, 2, 1))

    assert stats == {"present": 2, "absent": 0, "halfDay": 1, "leave": 1, "total": 4}


def test_admin_override_audits_previous_status(ctx):
    svc, attendance, cache, _ = ctx
    attendance.add(day(date(2026, 2, 27), status=AttendanceStatus.ABSENT))
    cache.set(dashboard_statistics_key("user-1"), {})

    record = svc.override_attendance(
        current_role=Role.ADMIN,
        admin_user_id="admin-1",
        employee_id="emp-1",
        work_date=date(2026, 2, 27),
        status=AttendanceStatus.PRESENT,
        reason="badge reader down",
    )

    assert record.status == AttendanceStatus.PRESENT
    assert record.overridden_by == "admin-1"
    assert record.override_reason == "badge reader down"
    log = attendance.audit_logs.logs[-1]
    assert log.action == AuditAction.OVERRIDE
    assert log.entity_id == record.id
    assert json.loads(log.changes) == {"previousStatus": "ABSENT", "newStatus": "PRESENT"}
    assert cache.has(dashboard_statistics_key("user-1")) is False


def test_override_of_empty_day(ctx):
    svc, attendance, _, _ = ctx
    svc.override_attendance(
        current_role=Role.ADMIN,
        admin_user_id="admin-1",
        employee_id="emp-1",
        work_date=date(2026, 2, 26),
        status=AttendanceStatus.ABSENT,
    )

    log = attendance.audit_logs.logs[-1]
    assert log.reason == "Attendance override"
    assert json.loads(log.changes)["previousStatus"] == "N/A"


def test_override_requires_admin_and_known_employee(ctx):
    svc, _, _, _ = ctx
    fields = dict(admin_user_id="admin-1", work_date=date(2026, 2, 26), status=AttendanceStatus.ABSENT)
    with pytest.raises(AuthorizationError):
        svc.override_attendance(current_role=Role.EMPLOYEE, employee_id="emp-1", **fields)
    with pytest.raises(NotFoundError, match="Employee not found"):
        svc.override_attendance(current_role=Role.ADMIN, employee_id="emp-404", **fields)
