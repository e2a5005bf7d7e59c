from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .audit.mysql_audit_repository import MySQLAuditLogRepository
from .audit.repository import AuditLogRepository
from .auth.mysql_refresh_token_repository import MySQLRefreshTokenRepository
from .auth.repository import RefreshTokenRepository
from .auth.service import AuthService
from .auth.token import TokenService
from .common.cache import CacheService
from .core.constants import DEFAULT_CACHE_TTL_MS, DEFAULT_DASHBOARD_CACHE_TTL_MS, DEFAULT_TOKEN_EXPIRATION_SECONDS
from .dashboard.service import DashboardService
from .database.connection import DatabaseConnection, DBConfig
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leave.mysql_leave_repository import MySQLLeaveRepository
from .leave.repository import LeaveRepository
from .leave.service import LeaveService
from .notifications.service import NotificationService
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    cache: CacheService
    tokens: TokenService

    users_repo: UserRepository
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payrolls_repo: PayrollRepository
    audit_repo: AuditLogRepository
    refresh_tokens_repo: RefreshTokenRepository

    auth_service: AuthService
    user_service: UserService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    dashboard_service: DashboardService
    notification_service: NotificationService


def wire_services(
    *,
    conn: Optional[DatabaseConnection],
    cache: CacheService,
    tokens: TokenService,
    users_repo: UserRepository,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payrolls_repo: PayrollRepository,
    audit_repo: AuditLogRepository,
    refresh_tokens_repo: RefreshTokenRepository,
    dashboard_ttl: int = DEFAULT_DASHBOARD_CACHE_TTL_MS,
) -> Container:
    """Build every service on top of the given repositories."""
    return Container(
        conn=conn,
        cache=cache,
        tokens=tokens,
        users_repo=users_repo,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payrolls_repo=payrolls_repo,
        audit_repo=audit_repo,
        refresh_tokens_repo=refresh_tokens_repo,
        auth_service=AuthService(users_repo, tokens, refresh_tokens_repo),
        user_service=UserService(users_repo, employees_repo),
        employee_service=EmployeeService(employees_repo, users_repo, cache),
        attendance_service=AttendanceService(attendance_repo, employees_repo, cache),
        leave_service=LeaveService(leaves_repo, employees_repo, cache),
        payroll_service=PayrollService(payrolls_repo, employees_repo, cache),
        dashboard_service=DashboardService(
            employees_repo,
            attendance_repo,
            leaves_repo,
            payrolls_repo,
            cache,
            ttl=dashboard_ttl,
        ),
        notification_service=NotificationService(employees_repo, audit_repo, leaves_repo, payrolls_repo),
    )


def build_container(*, db_config: Mapping[str, Any], settings: Any = None) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    cache = CacheService(default_ttl=int(getattr(settings, "CACHE_DEFAULT_TTL_MS", DEFAULT_CACHE_TTL_MS)))
    tokens = TokenService(
        str(getattr(settings, "JWT_SECRET", "")),
        expires_in=int(getattr(settings, "JWT_EXPIRATION_TIME", DEFAULT_TOKEN_EXPIRATION_SECONDS)),
    )

    return wire_services(
        conn=conn,
        cache=cache,
        tokens=tokens,
        users_repo=MySQLUserRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payrolls_repo=MySQLPayrollRepository(conn),
        audit_repo=MySQLAuditLogRepository(conn),
        refresh_tokens_repo=MySQLRefreshTokenRepository(conn),
        dashboard_ttl=int(getattr(settings, "DASHBOARD_CACHE_TTL_MS", DEFAULT_DASHBOARD_CACHE_TTL_MS)),
    )
