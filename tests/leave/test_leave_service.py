from __future__ import annotations

import json
from datetime import date

import pytest

from dayflow_hr.common.cache import CacheService
from dayflow_hr.core.enums import AttendanceStatus, AuditAction, LeaveStatus, LeaveType, Role
from dayflow_hr.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from dayflow_hr.dashboard.keys import dashboard_statistics_key, dashboard_summary_key
from dayflow_hr.leave.service import LeaveService

from fakes import InMemoryEmployees, InMemoryLeaves, make_employee, make_leave


@pytest.fixture
def ctx(scheduler):
    leaves = InMemoryLeaves()
    employees = InMemoryEmployees(
        make_employee(),
        make_employee(user_id="admin-1", employee_id="emp-admin", first_name="Admin", department="HR"),
    )
    cache = CacheService(clock=scheduler.clock, timer_factory=scheduler.timer_factory)
    svc = LeaveService(leaves, employees, cache)
    return svc, leaves, employees, cache


def test_apply_creates_pending_leave(ctx):
    svc, leaves, _, _ = ctx
    leave = svc.apply_leave(
        user_id="user-1",
        leave_type=LeaveType.SICK,
        start_date=date(2026, 3, 10),
        end_date=date(2026, 3, 11),
        reason="  Flu  ",
    )

    assert leave.status == LeaveStatus.PENDING
    assert leave.reason == "Flu"
    assert leaves.get_by_id(leave.id) == leave


def test_apply_rejects_inverted_range(ctx):
    svc, _, _, _ = ctx
    with pytest.raises(ValidationError):
        svc.apply_leave(
            user_id="user-1",
            leave_type=LeaveType.PAID,
            start_date=date(2026, 3, 12),
            end_date=date(2026, 3, 10),
        )


def test_apply_rejects_overlap_with_pending_or_approved(ctx):
    svc, leaves, _, _ = ctx
    leaves.add(make_leave(start_date=date(2026, 3, 10), end_date=date(2026, 3, 12), status=LeaveStatus.APPROVED))

    with pytest.raises(ConflictError):
        svc.apply_leave(
            user_id="user-1",
            leave_type=LeaveType.PAID,
            start_date=date(2026, 3, 12),
            end_date=date(2026, 3, 14),
        )


def test_apply_ignores_rejected_overlap(ctx):
    svc, leaves, _, _ = ctx
    leaves.add(make_leave(start_date=date(2026, 3, 10), end_date=date(2026, 3, 12), status=LeaveStatus.REJECTED))

    leave = svc.apply_leave(
        user_id="user-1",
        leave_type=LeaveType.PAID,
        start_date=date(2026, 3, 11),
        end_date=date(2026, 3, 11),
    )
    assert leave.status == LeaveStatus.PENDING


def test_apply_requires_employee_profile(ctx):
    svc, _, _, _ = ctx
    with pytest.raises(NotFoundError):
        svc.apply_leave(
            user_id="nobody",
            leave_type=LeaveType.PAID,
            start_date=date(2026, 3, 1),
            end_date=date(2026, 3, 1),
        )


def test_admin_approval_writes_audit_and_invalidates_dashboard(ctx):
    svc, leaves, _, cache = ctx
    leave = leaves.add(make_leave())
    cache.set(dashboard_summary_key("user-1"), {"pendingLeaves": 1})
    cache.set(dashboard_statistics_key("user-1"), {"attendance": {}})

    decided = svc.approve_leave(current_role=Role.ADMIN, admin_user_id="admin-1", leave_id=leave.id, comments=" ok ")

    assert decided.status == LeaveStatus.APPROVED
    log = leaves.audit_logs.logs[-1]
    assert log.action == AuditAction.APPROVE
    assert log.user_id == "admin-1"
    assert log.entity_id == leave.id
    assert log.reason == "Leave request approved"
    assert json.loads(log.changes) == {"status": "APPROVED", "comments": "ok"}
    assert cache.has(dashboard_summary_key("user-1")) is False
    assert cache.has(dashboard_statistics_key("user-1")) is False


def test_approval_records_approver_and_marks_leave_days(ctx):
    svc, leaves, _, _ = ctx
    leave = leaves.add(make_leave(start_date=date(2026, 3, 10), end_date=date(2026, 3, 12)))

    svc.approve_leave(current_role=Role.ADMIN, admin_user_id="admin-1", leave_id=leave.id, comments="enjoy")

    [approval] = leaves.list_approvals(leave.id)
    assert approval.approved_by == "emp-admin"
    assert approval.comments == "enjoy"
    days = leaves.attendance.list_for_employee("emp-1")
    assert [r.work_date for r in days] == [date(2026, 3, 12), date(2026, 3, 11), date(2026, 3, 10)]
    assert {r.status for r in days} == {AttendanceStatus.LEAVE}


def test_approver_needs_employee_profile(ctx):
    svc, leaves, _, _ = ctx
    leave = leaves.add(make_leave())

    with pytest.raises(ValidationError, match="Approver is not an employee"):
        svc.approve_leave(current_role=Role.ADMIN, admin_user_id="admin-without-profile", leave_id=leave.id)
    assert leaves.get_by_id(leave.id).status == LeaveStatus.PENDING


def test_failed_audit_write_keeps_leave_pending(ctx):
    svc, leaves, _, cache = ctx
    leave = leaves.add(make_leave())
    cache.set(dashboard_summary_key("user-1"), {"pendingLeaves": 1})
    leaves.audit_logs.fail_with = RuntimeError("audit table unavailable")

    with pytest.raises(RuntimeError):
        svc.approve_leave(current_role=Role.ADMIN, admin_user_id="admin-1", leave_id=leave.id)

    assert leaves.get_by_id(leave.id).status == LeaveStatus.PENDING
    assert leaves.list_approvals(leave.id) == []
    assert leaves.attendance.records == []
    assert leaves.audit_logs.logs == []
    assert cache.has(dashboard_summary_key("user-1")) is True


def test_reject_marks_leave_rejected(ctx):
    svc, leaves, _, _ = ctx
    leave = leaves.add(make_leave())

    decided = svc.reject_leave(
        current_role=Role.ADMIN, admin_user_id="admin-1", leave_id=leave.id, comments="short staffed"
    )

    assert decided.status == LeaveStatus.REJECTED
    log = leaves.audit_logs.logs[-1]
    assert log.action == AuditAction.REJECT
    assert log.reason == "short staffed"
    assert leaves.list_approvals(leave.id) == []
    assert leaves.attendance.records == []


def test_employee_cannot_decide(ctx):
    svc, leaves, _, _ = ctx
    leave = leaves.add(make_leave())
    with pytest.raises(AuthorizationError):
        svc.approve_leave(current_role=Role.EMPLOYEE, admin_user_id="user-1", leave_id=leave.id)


def test_cannot_decide_twice(ctx):
    svc, leaves, _, _ = ctx
    leave = leaves.add(make_leave())
    svc.approve_leave(current_role=Role.ADMIN, admin_user_id="admin-1", leave_id=leave.id)

    with pytest.raises(ValidationError, match="Cannot reject a APPROVED leave request"):
        svc.reject_leave(current_role=Role.ADMIN, admin_user_id="admin-1", leave_id=leave.id)


def test_unknown_leave_is_not_found(ctx):
    svc, _, _, _ = ctx
    with pytest.raises(NotFoundError):
        svc.approve_leave(current_role=Role.ADMIN, admin_user_id="admin-1", leave_id="missing")


def test_pending_leaves_carry_requester(ctx):
    svc, leaves, _, _ = ctx
    leaves.add(make_leave(id="old", status=LeaveStatus.PENDING))
    leaves.add(make_leave(id="done", status=LeaveStatus.APPROVED))

    pending = svc.get_pending_leaves(current_role=Role.ADMIN)

    assert [p["id"] for p in pending] == ["old"]
    assert pending[0]["employee"] == {"firstName": "John", "lastName": "Doe", "department": "Engineering"}


def test_pending_leaves_are_admin_only(ctx):
    svc, _, _, _ = ctx
    with pytest.raises(AuthorizationError):
        svc.get_pending_leaves(current_role=Role.EMPLOYEE)


def test_owner_reads_leave_with_approvals(ctx):
    svc, leaves, _, _ = ctx
    leave = leaves.add(make_leave())
    svc.approve_leave(current_role=Role.ADMIN, admin_user_id="admin-1", leave_id=leave.id, comments="fine")

    item = svc.get_leave(user_id="user-1", current_role=Role.EMPLOYEE, leave_id=leave.id)

    assert item["status"] == "APPROVED"
    assert [a["comments"] for a in item["approvals"]] == ["fine"]


def test_other_employee_cannot_read_leave(ctx):
    svc, leaves, employees, _ = ctx
    employees.add(make_employee(user_id="user-2", employee_id="emp-2"))
    leave = leaves.add(make_leave())

    with pytest.raises(AuthorizationError, match="your own leave requests"):
        svc.get_leave(user_id="user-2", current_role=Role.EMPLOYEE, leave_id=leave.id)
    assert svc.get_leave(user_id="admin-1", current_role=Role.ADMIN, leave_id=leave.id)["id"] == leave.id


def test_missing_leave_read_is_not_found(ctx):
    svc, _, _, _ = ctx
    with pytest.raises(NotFoundError, match="Leave request not found"):
        svc.get_leave(user_id="user-1", current_role=Role.EMPLOYEE, leave_id="missing")
