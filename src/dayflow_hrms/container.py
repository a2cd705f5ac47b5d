from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.status import ThresholdStatusPolicy
from .auth.service import AuthService
from .auth.tokens import TokenService
from .common.datetime_utils import now_local
from .core.constants import DEFAULT_JWT_EXPIRE_HOURS
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .notifications.mailer import MailConfig, Mailer, SmtpMailer
from .payroll.calculator.standard_calculator import StandardPayrollCalculator
from .payroll.mysql_payroll_repository import MySQLPayrollRepository
from .payroll.repository import PayrollRepository
from .payroll.service import PayrollService


@dataclass(frozen=True)
class Container:
    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    leaves_repo: LeaveRepository
    payroll_repo: PayrollRepository
    mailer: Mailer
    tokens: TokenService

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    leave_service: LeaveService
    payroll_service: PayrollService
    dashboard_service: DashboardService


def assemble_container(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    leaves_repo: LeaveRepository,
    payroll_repo: PayrollRepository,
    mailer: Mailer,
    tokens: TokenService,
    frontend_url: str = "http://localhost:3000",
    recheck_balance_on_approve: bool = False,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    """Wire services over the given repositories (MySQL in the app, in-memory in tests)."""

    auth_service = AuthService(employees_repo, tokens, mailer, frontend_url=frontend_url, clock=clock)
    employee_service = EmployeeService(employees_repo)
    attendance_service = AttendanceService(
        attendance_repo,
        status_policy=ThresholdStatusPolicy(),
        clock=clock,
    )
    leave_service = LeaveService(
        leaves_repo,
        employees_repo,
        recheck_balance_on_approve=recheck_balance_on_approve,
        clock=clock,
    )
    payroll_service = PayrollService(
        payroll_repo,
        employees_repo,
        calculator=StandardPayrollCalculator(),
        clock=clock,
    )
    dashboard_service = DashboardService(employees_repo, attendance_repo, leaves_repo, clock=clock)

    return Container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        mailer=mailer,
        tokens=tokens,
        auth_service=auth_service,
        employee_service=employee_service,
        attendance_service=attendance_service,
        leave_service=leave_service,
        payroll_service=payroll_service,
        dashboard_service=dashboard_service,
    )


def build_container(settings) -> Container:
    conn = DatabaseConnection(DBConfig.from_dict(getattr(settings, "DB_CONFIG")))

    return assemble_container(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        payroll_repo=MySQLPayrollRepository(conn),
        mailer=SmtpMailer(MailConfig.from_dict(getattr(settings, "MAIL_CONFIG", {}) or {})),
        tokens=TokenService(
            getattr(settings, "JWT_SECRET"),
            expire_hours=int(getattr(settings, "JWT_EXPIRE_HOURS", DEFAULT_JWT_EXPIRE_HOURS)),
        ),
        frontend_url=getattr(settings, "FRONTEND_URL", "http://localhost:3000"),
        recheck_balance_on_approve=bool(getattr(settings, "LEAVE_RECHECK_BALANCE_ON_APPROVE", False)),
    )
