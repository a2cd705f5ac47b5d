from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import EmployeeStatus, EmploymentType, LeaveType, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from .model import Employee, LeaveBalance, SalaryStructure
from .repository import EmployeeRepository

WRITABLE_COLUMNS = frozenset(
    {
        "employee_code",
        "full_name",
        "email",
        "password_hash",
        "role",
        "is_verified",
        "phone",
        "address",
        "emergency_contact",
        "image_url",
        "department",
        "position",
        "joining_date",
        "employment_type",
        "status",
        "salary_basic",
        "salary_hra",
        "salary_transport",
        "salary_medical",
        "salary_other",
        "otp_code",
        "otp_expires_at",
        "reset_token_hash",
        "reset_expires_at",
    }
)

_SELECT = """
    SELECT employee_id, employee_code, full_name, email, password_hash, role, is_verified,
           phone, address, emergency_contact, image_url, department, position, joining_date,
           employment_type, status, salary_basic, salary_hra, salary_transport, salary_medical,
           salary_other, otp_code, otp_expires_at, reset_token_hash, reset_expires_at, created_at
    FROM employees
"""


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def _checked_columns(fields: Mapping[str, Any]) -> list[str]:
    unknown = set(fields) - WRITABLE_COLUMNS
    if unknown:
        raise ValueError(f"Unknown employee columns: {sorted(unknown)}")
    return list(fields)


def _row_to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        employee_code=r.get("employee_code"),
        full_name=r["full_name"],
        email=r["email"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        is_verified=bool(r["is_verified"]),
        phone=r.get("phone"),
        address=r.get("address"),
        emergency_contact=r.get("emergency_contact"),
        image_url=r.get("image_url"),
        department=r.get("department"),
        position=r.get("position"),
        joining_date=r.get("joining_date"),
        employment_type=EmploymentType(r["employment_type"]),
        status=EmployeeStatus(r["status"]),
        salary=SalaryStructure(
            basic=float(r.get("salary_basic") or 0),
            hra=float(r.get("salary_hra") or 0),
            transport=float(r.get("salary_transport") or 0),
            medical=float(r.get("salary_medical") or 0),
            other=float(r.get("salary_other") or 0),
        ),
        otp_code=r.get("otp_code"),
        otp_expires_at=r.get("otp_expires_at"),
        reset_token_hash=r.get("reset_token_hash"),
        reset_expires_at=r.get("reset_expires_at"),
        created_at=r.get("created_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, params: tuple) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}", params)
            r = fetchone(cur)
            return _row_to_employee(r) if r else None

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self._get_one("employee_id=%s", (int(employee_id),))

    def get_by_email(self, email: str) -> Optional[Employee]:
        return self._get_one("email=%s", (email.lower(),))

    def get_by_reset_token_hash(self, token_hash: str) -> Optional[Employee]:
        return self._get_one("reset_token_hash=%s", (token_hash,))

    def list(
        self,
        *,
        status: Optional[EmployeeStatus] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Employee]:
        clauses: list[str] = []
        params: list[object] = []

        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)
        if department:
            clauses.append("department=%s")
            params.append(department)
        if search:
            like = f"%{search.lower()}%"
            clauses.append("(LOWER(full_name) LIKE %s OR LOWER(email) LIKE %s OR LOWER(employee_code) LIKE %s)")
            params.extend([like, like, like])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT} WHERE {where_clause(clauses)} ORDER BY created_at DESC, employee_id DESC",
                tuple(params),
            )
            return [_row_to_employee(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM employees")
            return int(fetchone(cur)["n"])

    def create(self, *, fields: Mapping[str, Any], balance: LeaveBalance) -> int:
        columns = _checked_columns(fields)
        placeholders = ",".join(["%s"] * len(columns))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO employees({','.join(columns)}) VALUES({placeholders})",
                tuple(_db_value(fields[c]) for c in columns),
            )
            employee_id = int(cur.lastrowid)
            cur.executemany(
                "INSERT INTO leave_balances(employee_id, leave_type, days) VALUES(%s,%s,%s)",
                [(employee_id, t.value, int(days)) for t, days in balance.items()],
            )
            return employee_id

    def update_fields(self, employee_id: int, fields: Mapping[str, Any]) -> bool:
        columns = _checked_columns(fields)
        if not columns:
            return False

        assignments = ", ".join(f"{c}=%s" for c in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {assignments} WHERE employee_id=%s",
                tuple(_db_value(fields[c]) for c in columns) + (int(employee_id),),
            )
            # rowcount is 0 when values are unchanged; existence is what callers need
            cur.execute("SELECT 1 AS ok FROM employees WHERE employee_id=%s", (int(employee_id),))
            return fetchone(cur) is not None

    def has_history(self, employee_id: int) -> bool:
        eid = int(employee_id)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                  EXISTS(SELECT 1 FROM attendance_records WHERE employee_id=%s)
                  OR EXISTS(SELECT 1 FROM leave_requests WHERE employee_id=%s)
                  OR EXISTS(SELECT 1 FROM payroll_records WHERE employee_id=%s) AS found
                """,
                (eid, eid, eid),
            )
            return bool(fetchone(cur)["found"])

    def delete(self, employee_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM employees WHERE employee_id=%s", (int(employee_id),))
            return cur.rowcount > 0

    def get_balance(self, employee_id: int) -> LeaveBalance:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT leave_type, days FROM leave_balances WHERE employee_id=%s",
                (int(employee_id),),
            )
            return {LeaveType(r["leave_type"]): int(r["days"]) for r in fetchall(cur)}

    def set_balance(self, employee_id: int, balance: LeaveBalance) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO leave_balances(employee_id, leave_type, days) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE days=VALUES(days)
                """,
                [(int(employee_id), t.value, int(days)) for t, days in balance.items()],
            )

    def adjust_balance(self, employee_id: int, leave_type: LeaveType, delta: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_balances(employee_id, leave_type, days) VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE days = days + VALUES(days)
                """,
                (int(employee_id), leave_type.value, int(delta)),
            )
