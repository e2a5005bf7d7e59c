from __future__ import annotations

from datetime import date, datetime

import pytest
from werkzeug.security import generate_password_hash

from dayflow_hr.auth.token import TokenService
from dayflow_hr.common.cache import CacheService
from dayflow_hr.container import wire_services
from dayflow_hr.core.enums import AttendanceStatus, Role
from dayflow_hr.main import create_app
from dayflow_hr.users.model import User

from fakes import (
    InMemoryAttendance,
    InMemoryAuditLogs,
    InMemoryEmployees,
    InMemoryLeaves,
    InMemoryPayrolls,
    InMemoryRefreshTokens,
    InMemoryUsers,
    make_audit_log,
    make_employee,
    make_leave,
)


@pytest.fixture
def container(scheduler):
    employees = InMemoryEmployees(make_employee(), make_employee(user_id="admin-1", employee_id="emp-admin", first_name="Admin"))
    users = InMemoryUsers(
        User(id="user-1", email="john.doe@dayflow.com", password_hash=generate_password_hash("password123"), role=Role.EMPLOYEE),
        User(id="admin-1", email="admin@dayflow.com", password_hash=generate_password_hash("password123"), role=Role.ADMIN),
        employees=employees,
    )
    audit_logs = InMemoryAuditLogs()
    audit_logs.add(make_audit_log(created_at=datetime(2026, 3, 2, 9, 0)))
    attendance = InMemoryAttendance(audit_logs)
    leaves = InMemoryLeaves(audit_logs=audit_logs, attendance=attendance)
    leaves.add(make_leave(id="leave-1", updated_at=datetime(2026, 3, 3, 9, 0)))

    return wire_services(
        conn=None,
        cache=CacheService(clock=scheduler.clock, timer_factory=scheduler.timer_factory),
        tokens=TokenService("api-test-secret"),
        users_repo=users,
        employees_repo=employees,
        attendance_repo=attendance,
        leaves_repo=leaves,
        payrolls_repo=InMemoryPayrolls(audit_logs=audit_logs),
        audit_repo=audit_logs,
        refresh_tokens_repo=InMemoryRefreshTokens(),
    )


@pytest.fixture
def client(container):
    app = create_app(container)
    return app.test_client()


def bearer(container, user_id="user-1", role=Role.EMPLOYEE):
    return {"Authorization": f"Bearer {container.tokens.issue(user_id=user_id, role=role)}"}


def admin(container):
    return bearer(container, user_id="admin-1", role=Role.ADMIN)


def test_login_returns_token_pair(client):
    resp = client.post("/authentication/login", json={"email": "john.doe@dayflow.com", "password": "password123"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["user"]["role"] == "EMPLOYEE"
    assert body["accessToken"]
    assert body["refreshToken"]


def test_refresh_then_logout(client):
    login = client.post("/authentication/login", json={"email": "john.doe@dayflow.com", "password": "password123"})
    refreshed = client.post("/authentication/refresh", json={"refreshToken": login.get_json()["refreshToken"]})
    assert refreshed.status_code == 200

    tokens = refreshed.get_json()
    headers = {"Authorization": f"Bearer {tokens['accessToken']}"}
    out = client.post("/authentication/logout", headers=headers, json={"refreshToken": tokens["refreshToken"]})
    assert out.get_json() == {"message": "Logged out successfully"}

    again = client.post("/authentication/refresh", json={"refreshToken": tokens["refreshToken"]})
    assert again.status_code == 401


def test_login_requires_password(client):
    resp = client.post("/authentication/login", json={"email": "john.doe@dayflow.com"})
    assert resp.status_code == 400
    assert resp.get_json()["message"] == "password is required"


def test_login_failure_uses_error_envelope(client):
    resp = client.post("/authentication/login", json={"email": "john.doe@dayflow.com", "password": "nope"})

    body = resp.get_json()
    assert resp.status_code == 401
    assert body["statusCode"] == 401
    assert body["message"] == "Invalid email or password"
    assert body["error"] == "Unauthorized"
    assert body["path"] == "/authentication/login"
    assert "timestamp" in body


def test_missing_token_is_unauthorized(client):
    resp = client.get("/notifications")
    assert resp.status_code == 401
    assert resp.get_json()["message"] == "No token provided"


def test_notifications_for_current_user(client, container):
    resp = client.get("/notifications", headers=bearer(container))

    body = resp.get_json()
    assert resp.status_code == 200
    assert [n["type"] for n in body["notifications"]] == ["LEAVE", "AUDIT"]


def test_dashboard_summary_is_served_from_cache(client, container):
    headers = bearer(container)
    first = client.get("/dashboard/summary", headers=headers).get_json()
    second = client.get("/dashboard/summary", headers=headers).get_json()

    assert first == second
    assert first["pendingLeaves"] == 1
    assert container.cache.stats()["keys"] == ["dashboard:summary:user-1"]


def test_apply_leave_validates_payload(client, container):
    resp = client.post(
        "/leave/apply",
        headers=bearer(container),
        json={"leaveType": "VACATION", "startDate": "2026-04-01", "endDate": "2026-04-02"},
    )
    assert resp.status_code == 400


def test_apply_leave_conflict(client, container):
    resp = client.post(
        "/leave/apply",
        headers=bearer(container),
        json={"leaveType": "PAID", "startDate": "2026-03-11", "endDate": "2026-03-13"},
    )
    assert resp.status_code == 409


def test_apply_and_list_my_requests(client, container):
    created = client.post(
        "/leave/apply",
        headers=bearer(container),
        json={"leaveType": "SICK", "startDate": "2026-04-01", "endDate": "2026-04-02", "reason": "Flu"},
    )
    assert created.status_code == 201

    mine = client.get("/leave/my-requests", headers=bearer(container)).get_json()
    assert created.get_json()["id"] in [leave["id"] for leave in mine]


def test_employee_cannot_approve(client, container):
    resp = client.put("/leave/leave-1/approve", headers=bearer(container), json={})
    assert resp.status_code == 403


def test_admin_approves_leave(client, container):
    resp = client.put("/leave/leave-1/approve", headers=admin(container), json={"comments": "enjoy"})
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "APPROVED"

    detail = client.get("/leave/leave-1", headers=bearer(container)).get_json()
    assert [a["comments"] for a in detail["approvals"]] == ["enjoy"]
    day = client.get("/attendance/2026-03-11", headers=bearer(container)).get_json()
    assert day["status"] == "LEAVE"


def test_admin_rejects_leave_with_reason(client, container):
    resp = client.put("/leave/leave-1/reject", headers=admin(container), json={"reason": "busy week"})
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "REJECTED"
    assert container.audit_repo.list_recent_for_user("admin-1", 1)[0].reason == "busy week"


def test_pending_leaves_for_admin(client, container):
    assert client.get("/leave/pending", headers=bearer(container)).status_code == 403

    pending = client.get("/leave/pending", headers=admin(container)).get_json()
    assert [p["id"] for p in pending] == ["leave-1"]
    assert pending[0]["employee"]["firstName"] == "John"


def test_admin_creates_and_updates_payroll(client, container):
    resp = client.post(
        "/payroll/emp-1",
        headers=admin(container),
        json={"baseSalary": 4000, "allowances": "150.25", "effectiveDate": "2026-03-05"},
    )
    body = resp.get_json()
    assert resp.status_code == 201
    assert body["month"] == "2026-03-01"
    assert body["netSalary"] == "4150.25"

    mine = client.get("/payroll/me", headers=bearer(container)).get_json()
    assert [p["id"] for p in mine] == [body["id"]]
    assert client.get("/payroll/me/2026-03", headers=bearer(container)).get_json()["id"] == body["id"]

    updated = client.put(f"/payroll/{body['id']}", headers=admin(container), json={"deductions": "50"})
    assert updated.get_json()["netSalary"] == "4100.25"

    listed = client.get("/payroll?month=2026-03", headers=admin(container)).get_json()
    assert [p["employee"]["firstName"] for p in listed] == ["John"]
    assert [p["id"] for p in client.get("/payroll/employee/emp-1", headers=admin(container)).get_json()] == [body["id"]]


def test_duplicate_payroll_month_is_bad_request(client, container):
    payload = {"baseSalary": 4000, "effectiveDate": "2026-03-05"}
    assert client.post("/payroll/emp-1", headers=admin(container), json=payload).status_code == 201

    resp = client.post("/payroll/emp-1", headers=admin(container), json=payload)
    assert resp.status_code == 400
    assert "already exists" in resp.get_json()["message"]


def test_attendance_day_cycle(client, container):
    headers = bearer(container)
    assert client.get("/attendance/today", headers=headers).get_json() == {"message": "No attendance record for today"}

    assert client.post("/attendance/check-in", headers=headers).status_code == 201
    assert client.post("/attendance/check-in", headers=headers).status_code == 409
    out = client.post("/attendance/check-out", headers=headers).get_json()
    assert out["checkOutTime"] is not None
    assert client.get("/attendance/today", headers=headers).get_json()["status"] == "PRESENT"


def test_attendance_override_and_stats(client, container):
    resp = client.post(
        "/attendance/override",
        headers=admin(container),
        json={"employeeId": "emp-1", "date": "2026-02-10", "status": "HALF_DAY", "reason": "left early"},
    )
    assert resp.status_code == 200
    assert resp.get_json()["overrideReason"] == "left early"

    stats = client.get("/attendance/stats/2026-02", headers=bearer(container)).get_json()
    assert stats["halfDay"] == 1
    history = client.get("/attendance/history?startDate=2026-02-01&endDate=2026-02-28", headers=bearer(container))
    assert [r["date"] for r in history.get_json()] == ["2026-02-10"]
    assert container.attendance_repo.get_for_employee_and_date("emp-1", date(2026, 2, 10)).status == AttendanceStatus.HALF_DAY


def test_cache_admin_endpoints(client, container):
    headers = admin(container)
    container.cache.set("k", "v")

    assert client.get("/admin/cache/stats", headers=bearer(container)).status_code == 403
    assert client.get("/admin/cache/stats", headers=headers).get_json() == {"size": 1, "keys": ["k"]}
    assert client.delete("/admin/cache", headers=headers).status_code == 200
    assert container.cache.size() == 0


def test_profile(client, container):
    body = client.get("/employees/me", headers=bearer(container)).get_json()
    assert body["email"] == "john.doe@dayflow.com"
    assert body["firstName"] == "John"


def test_profile_missing_message(client, container):
    resp = client.get("/employees/me", headers=bearer(container, user_id="ghost"))
    assert resp.status_code == 404
    assert resp.get_json()["message"] == "Employee profile not found"


def test_profile_updates(client, container):
    mine = client.put("/employees/me", headers=bearer(container), json={"phone": "555-0100"})
    assert mine.get_json()["phone"] == "555-0100"

    forbidden = client.put("/employees/me", headers=bearer(container), json={"department": "Finance"})
    assert forbidden.status_code == 403

    by_admin = client.put("/employees/emp-1", headers=admin(container), json={"department": "Finance"})
    assert by_admin.get_json()["department"] == "Finance"
    assert client.get("/employees/emp-1", headers=bearer(container)).get_json()["department"] == "Finance"
    assert client.get("/employees/emp-admin", headers=bearer(container)).status_code == 403
    assert len(client.get("/employees", headers=admin(container)).get_json()) == 2


def test_admin_creates_user(client, container):
    payload = {"email": "new.hire@dayflow.com", "password": "welcome123", "firstName": "New", "lastName": "Hire"}
    assert client.post("/users", headers=bearer(container), json=payload).status_code == 403

    resp = client.post("/users", headers=admin(container), json=payload)
    created = resp.get_json()
    assert resp.status_code == 201
    assert created["employee"]["lastName"] == "Hire"

    assert client.get(f"/users/{created['id']}", headers=admin(container)).get_json()["email"] == "new.hire@dayflow.com"
    assert len(client.get("/users", headers=admin(container)).get_json()) == 3
    login = client.post("/authentication/login", json={"email": "new.hire@dayflow.com", "password": "welcome123"})
    assert login.status_code == 200


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/does-not-exist")
    assert resp.status_code == 404
    assert resp.get_json()["statusCode"] == 404
