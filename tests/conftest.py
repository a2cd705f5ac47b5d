from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from dayflow_hrms.attendance.model import AttendanceRecord, AttendanceRow, Punch
from dayflow_hrms.auth.model import AuthenticatedPrincipal
from dayflow_hrms.auth.tokens import TokenService
from dayflow_hrms.container import assemble_container
from dayflow_hrms.core.enums import (
    AttendanceStatus,
    EmployeeStatus,
    EmploymentType,
    LeaveStatus,
    LeaveType,
    PayrollStatus,
    Role,
)
from dayflow_hrms.employees.model import Employee, EmployeeRef
from dayflow_hrms.leaves.model import LeaveRequest, LeaveRow
from dayflow_hrms.payroll.model import PayrollRecord, PayrollRow

FIXED_NOW = datetime(2026, 3, 10, 9, 0, 0)
DEFAULT_PASSWORD = "Secret123"

_SALARY_COLUMNS = {
    "salary_basic": "basic",
    "salary_hra": "hra",
    "salary_transport": "transport",
    "salary_medical": "medical",
    "salary_other": "other",
}


class FixedClock:
    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingMailer:
    def __init__(self):
        self.sent: list[dict] = []

    def send(self, *, to: str, subject: str, html: str) -> bool:
        self.sent.append({"to": to, "subject": subject, "html": html})
        return True


def principal_for(employee: Employee) -> AuthenticatedPrincipal:
    return AuthenticatedPrincipal(employee_id=employee.employee_id, role=employee.role)


def _ref(employee: Optional[Employee]) -> Optional[EmployeeRef]:
    if employee is None:
        return None
    return EmployeeRef(
        employee_id=employee.employee_id,
        full_name=employee.full_name,
        email=employee.email,
        department=employee.department,
        position=employee.position,
        image_url=employee.image_url,
    )


class InMemoryEmployees:
    def __init__(self):
        self.employees: dict[int, Employee] = {}
        self.balances: dict[int, dict[LeaveType, int]] = {}
        self._next_id = 1
        # other stores register a lookup so delete can see an employee's history
        self.history_sources: list = []

    @staticmethod
    def _apply(employee: Employee, fields) -> Employee:
        changes = dict(fields)
        salary = {_SALARY_COLUMNS[k]: float(changes.pop(k)) for k in list(changes) if k in _SALARY_COLUMNS}
        if salary:
            changes["salary"] = replace(employee.salary, **salary)
        if "role" in changes:
            changes["role"] = Role(changes["role"])
        if "employment_type" in changes:
            changes["employment_type"] = EmploymentType(changes["employment_type"])
        if "status" in changes:
            changes["status"] = EmployeeStatus(changes["status"])
        return replace(employee, **changes)

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.employees.get(int(employee_id))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.employees.values() if e.email == email), None)

    def get_by_reset_token_hash(self, token_hash: str) -> Optional[Employee]:
        return next((e for e in self.employees.values() if e.reset_token_hash == token_hash), None)

    def list(self, *, status=None, department=None, search=None):
        items = list(self.employees.values())
        if status:
            items = [e for e in items if e.status == status]
        if department:
            items = [e for e in items if e.department == department]
        if search:
            needle = search.lower()
            items = [
                e
                for e in items
                if needle in e.full_name.lower() or needle in e.email.lower() or needle in (e.employee_code or "").lower()
            ]
        return items

    def count(self) -> int:
        return len(self.employees)

    def create(self, *, fields, balance) -> int:
        employee_id = self._next_id
        self._next_id += 1
        base = Employee(
            employee_id=employee_id,
            employee_code=None,
            full_name="",
            email="",
            password_hash="",
            role=Role.EMPLOYEE,
            is_verified=False,
            created_at=FIXED_NOW,
        )
        self.employees[employee_id] = self._apply(base, fields)
        self.balances[employee_id] = dict(balance)
        return employee_id

    def update_fields(self, employee_id: int, fields) -> bool:
        employee = self.employees.get(int(employee_id))
        if not employee:
            return False
        self.employees[int(employee_id)] = self._apply(employee, fields)
        return True

    def has_history(self, employee_id: int) -> bool:
        return any(source(int(employee_id)) for source in self.history_sources)

    def delete(self, employee_id: int) -> bool:
        self.balances.pop(int(employee_id), None)
        return self.employees.pop(int(employee_id), None) is not None

    def get_balance(self, employee_id: int):
        return dict(self.balances.get(int(employee_id), {}))

    def set_balance(self, employee_id: int, balance) -> None:
        self.balances.setdefault(int(employee_id), {}).update(balance)

    def adjust_balance(self, employee_id: int, leave_type: LeaveType, delta: int) -> None:
        bucket = self.balances.setdefault(int(employee_id), {})
        bucket[leave_type] = bucket.get(leave_type, 0) + int(delta)

    def add(
        self,
        *,
        name: str,
        email: str,
        role: Role = Role.EMPLOYEE,
        password: str = DEFAULT_PASSWORD,
        verified: bool = True,
        paid: int = 12,
        sick: int = 6,
        **fields,
    ) -> Employee:
        employee_id = self.create(
            fields={
                "full_name": name,
                "email": email,
                "role": role,
                "password_hash": generate_password_hash(password),
                "is_verified": verified,
                **fields,
            },
            balance={LeaveType.PAID: paid, LeaveType.SICK: sick, LeaveType.UNPAID: 0},
        )
        return self.employees[employee_id]


class InMemoryAttendance:
    def __init__(self, employees: Optional[InMemoryEmployees] = None):
        self.records: dict[int, AttendanceRecord] = {}
        self._employees = employees
        self._next_id = 1
        if employees is not None:
            employees.history_sources.append(lambda eid: any(r.employee_id == eid for r in self.records.values()))

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        return self.records.get(int(attendance_id))

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (r for r in self.records.values() if r.employee_id == employee_id and r.work_date == work_date),
            None,
        )

    def create_check_in(self, *, employee_id, work_date, punch, status) -> Optional[int]:
        if self.get_for_employee_and_date(employee_id, work_date):
            return None
        return self.add(employee_id=employee_id, work_date=work_date, check_in=punch, status=status).attendance_id

    def record_check_in(self, *, attendance_id, punch, status) -> bool:
        record = self.records.get(int(attendance_id))
        if not record or record.check_in:
            return False
        self.records[record.attendance_id] = replace(record, check_in=punch, status=status)
        return True

    def record_check_out(self, *, attendance_id, punch, work_minutes, status) -> bool:
        record = self.records.get(int(attendance_id))
        if not record or record.check_out:
            return False
        self.records[record.attendance_id] = replace(
            record, check_out=punch, work_minutes=work_minutes, status=status
        )
        return True

    def list_for_employee(self, employee_id, *, start=None, end=None, limit=30):
        items = [r for r in self.records.values() if r.employee_id == employee_id]
        if start:
            items = [r for r in items if r.work_date >= start]
        if end:
            items = [r for r in items if r.work_date <= end]
        items.sort(key=lambda r: r.work_date, reverse=True)
        return items[:limit]

    def list_rows(self, *, start=None, end=None, status=None, employee_id=None):
        items = list(self.records.values())
        if start:
            items = [r for r in items if r.work_date >= start]
        if end:
            items = [r for r in items if r.work_date <= end]
        if status:
            items = [r for r in items if r.status == status]
        if employee_id:
            items = [r for r in items if r.employee_id == employee_id]
        items.sort(key=lambda r: r.work_date, reverse=True)
        lookup = self._employees.get_by_id if self._employees else (lambda _id: None)
        return [AttendanceRow(record=r, employee=_ref(lookup(r.employee_id))) for r in items]

    def save_override(self, record: AttendanceRecord) -> None:
        self.records[record.attendance_id] = record

    def add(
        self,
        *,
        employee_id: int,
        work_date: date,
        check_in: Optional[Punch] = None,
        check_out: Optional[Punch] = None,
        status: AttendanceStatus = AttendanceStatus.ABSENT,
        work_minutes: int = 0,
    ) -> AttendanceRecord:
        record = AttendanceRecord(
            attendance_id=self._next_id,
            employee_id=employee_id,
            work_date=work_date,
            check_in=check_in,
            check_out=check_out,
            status=status,
            work_minutes=work_minutes,
        )
        self._next_id += 1
        self.records[record.attendance_id] = record
        return record


class InMemoryLeaves:
    def __init__(self, employees: Optional[InMemoryEmployees] = None):
        self.requests: dict[int, LeaveRequest] = {}
        self._employees = employees
        self._next_id = 1
        if employees is not None:
            employees.history_sources.append(lambda eid: any(r.employee_id == eid for r in self.requests.values()))

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self.requests.get(int(request_id))

    def has_overlap(self, employee_id, start, end, *, exclude_id=None) -> bool:
        return any(
            r.employee_id == employee_id
            and r.status != LeaveStatus.REJECTED
            and r.request_id != exclude_id
            and r.start_date <= end
            and r.end_date >= start
            for r in self.requests.values()
        )

    def create(self, *, employee_id, leave_type, start, end, reason, duration) -> int:
        request_id = self._next_id
        self._next_id += 1
        self.requests[request_id] = LeaveRequest(
            request_id=request_id,
            employee_id=employee_id,
            leave_type=leave_type,
            start_date=start,
            end_date=end,
            reason=reason,
            status=LeaveStatus.PENDING,
            duration=duration,
            created_at=FIXED_NOW + timedelta(seconds=request_id),
        )
        return request_id

    def decide(self, *, request_id, status, reviewed_by, reviewed_at, comment) -> bool:
        leave = self.requests.get(int(request_id))
        if not leave or leave.status != LeaveStatus.PENDING:
            return False
        self.requests[leave.request_id] = replace(
            leave, status=status, reviewed_by=reviewed_by, reviewed_at=reviewed_at, admin_comment=comment
        )
        return True

    def list_for_employee(self, employee_id, *, status=None, year=None):
        items = [r for r in self.requests.values() if r.employee_id == employee_id]
        if status:
            items = [r for r in items if r.status == status]
        if year:
            items = [r for r in items if r.start_date.year == year]
        return sorted(items, key=lambda r: r.created_at, reverse=True)

    def list_rows(self, *, status=None, employee_id=None, start=None, end=None):
        items = list(self.requests.values())
        if status:
            items = [r for r in items if r.status == status]
        if employee_id:
            items = [r for r in items if r.employee_id == employee_id]
        if start:
            items = [r for r in items if r.start_date >= start]
        if end:
            items = [r for r in items if r.start_date <= end]
        items.sort(key=lambda r: r.created_at, reverse=True)
        lookup = self._employees.get_by_id if self._employees else (lambda _id: None)
        rows = []
        for r in items:
            reviewer = lookup(r.reviewed_by) if r.reviewed_by else None
            rows.append(
                LeaveRow(
                    request=r,
                    employee=_ref(lookup(r.employee_id)),
                    reviewer_name=reviewer.full_name if reviewer else None,
                    reviewer_email=reviewer.email if reviewer else None,
                )
            )
        return rows

    def count_on_leave(self, day: date) -> int:
        return len(
            {
                r.employee_id
                for r in self.requests.values()
                if r.status == LeaveStatus.APPROVED and r.start_date <= day <= r.end_date
            }
        )


class InMemoryPayroll:
    def __init__(self, employees: Optional[InMemoryEmployees] = None):
        self.records: dict[int, PayrollRecord] = {}
        self._employees = employees
        self._next_id = 1
        if employees is not None:
            employees.history_sources.append(lambda eid: any(r.employee_id == eid for r in self.records.values()))

    def _period_taken(self, record: PayrollRecord) -> bool:
        return any(
            r.payroll_id != record.payroll_id
            and r.employee_id == record.employee_id
            and r.month == record.month
            and r.year == record.year
            for r in self.records.values()
        )

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        return self.records.get(int(payroll_id))

    def exists_for_period(self, employee_id, month, year) -> bool:
        return any(
            r.employee_id == employee_id and r.month == month and r.year == year for r in self.records.values()
        )

    def create(self, record: PayrollRecord) -> Optional[int]:
        record = replace(record, payroll_id=self._next_id, created_at=FIXED_NOW)
        if self._period_taken(record):
            return None
        self._next_id += 1
        self.records[record.payroll_id] = record
        return record.payroll_id

    def save(self, record: PayrollRecord) -> bool:
        if self._period_taken(record):
            return False
        self.records[record.payroll_id] = record
        return True

    def mark_paid(self, payroll_id, paid_on) -> bool:
        record = self.records.get(int(payroll_id))
        if not record:
            return False
        self.records[record.payroll_id] = replace(record, status=PayrollStatus.PAID, paid_on=paid_on)
        return True

    def list_for_employee(self, employee_id, *, year=None, limit=12):
        items = [r for r in self.records.values() if r.employee_id == employee_id]
        if year:
            items = [r for r in items if r.year == year]
        items.sort(key=lambda r: (r.year, r.month), reverse=True)
        return items[:limit]

    def list_rows(self, *, month=None, year=None, status=None, employee_id=None):
        items = list(self.records.values())
        if month:
            items = [r for r in items if r.month == month]
        if year:
            items = [r for r in items if r.year == year]
        if status:
            items = [r for r in items if r.status == status]
        if employee_id:
            items = [r for r in items if r.employee_id == employee_id]
        items.sort(key=lambda r: (r.year, r.month), reverse=True)
        lookup = self._employees.get_by_id if self._employees else (lambda _id: None)
        return [PayrollRow(record=r, employee=_ref(lookup(r.employee_id))) for r in items]


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def mailer() -> RecordingMailer:
    return RecordingMailer()


@pytest.fixture
def tokens() -> TokenService:
    return TokenService("test-jwt-secret-0123456789abcdef0123", expire_hours=1)


@pytest.fixture
def employees_repo() -> InMemoryEmployees:
    return InMemoryEmployees()


@pytest.fixture
def attendance_repo(employees_repo) -> InMemoryAttendance:
    return InMemoryAttendance(employees_repo)


@pytest.fixture
def leaves_repo(employees_repo) -> InMemoryLeaves:
    return InMemoryLeaves(employees_repo)


@pytest.fixture
def payroll_repo(employees_repo) -> InMemoryPayroll:
    return InMemoryPayroll(employees_repo)


@pytest.fixture
def admin(employees_repo) -> Employee:
    return employees_repo.add(name="Alice Admin", email="admin@example.com", role=Role.ADMIN, employee_code="EMP0001")


@pytest.fixture
def employee(employees_repo) -> Employee:
    return employees_repo.add(
        name="Bob Builder",
        email="bob@example.com",
        employee_code="EMP0002",
        department="Engineering",
        position="Developer",
    )


@pytest.fixture
def container(employees_repo, attendance_repo, leaves_repo, payroll_repo, mailer, tokens, clock):
    return assemble_container(
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        leaves_repo=leaves_repo,
        payroll_repo=payroll_repo,
        mailer=mailer,
        tokens=tokens,
        clock=clock,
    )


@pytest.fixture
def app(monkeypatch, container):
    monkeypatch.setenv("APP_ENV", "testing")
    from dayflow_hrms.main import create_app

    return create_app(container)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_header(tokens):
    def _header(employee: Employee) -> dict:
        return {"Authorization": f"Bearer {tokens.issue(employee_id=employee.employee_id, role=employee.role)}"}

    return _header


@pytest.fixture
def admin_principal(admin) -> AuthenticatedPrincipal:
    return principal_for(admin)


@pytest.fixture
def employee_principal(employee) -> AuthenticatedPrincipal:
    return principal_for(employee)
