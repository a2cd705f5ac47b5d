from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import PayrollStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, where_clause
from ..employees.model import EmployeeRef
from .model import Allowances, Deductions, PayrollRecord, PayrollRow
from .repository import PayrollRepository

_COLUMNS = """
    p.payroll_id, p.employee_id, p.month, p.year, p.basic,
    p.allowance_hra, p.allowance_transport, p.allowance_medical, p.allowance_special, p.allowance_other,
    p.deduction_tax, p.deduction_pf, p.deduction_insurance, p.deduction_other,
    p.gross_salary, p.total_deductions, p.net_salary, p.status, p.paid_on,
    p.working_days, p.present_days, p.notes, p.created_at
"""

_EDITABLE = (
    "month",
    "year",
    "basic",
    "allowance_hra",
    "allowance_transport",
    "allowance_medical",
    "allowance_special",
    "allowance_other",
    "deduction_tax",
    "deduction_pf",
    "deduction_insurance",
    "deduction_other",
    "gross_salary",
    "total_deductions",
    "net_salary",
    "status",
    "working_days",
    "present_days",
    "notes",
)


def _money(value) -> float:
    return float(value or 0)


def _row_to_record(r: Dict[str, Any]) -> PayrollRecord:
    return PayrollRecord(
        payroll_id=int(r["payroll_id"]),
        employee_id=int(r["employee_id"]),
        month=int(r["month"]),
        year=int(r["year"]),
        basic=_money(r.get("basic")),
        allowances=Allowances(
            hra=_money(r.get("allowance_hra")),
            transport=_money(r.get("allowance_transport")),
            medical=_money(r.get("allowance_medical")),
            special=_money(r.get("allowance_special")),
            other=_money(r.get("allowance_other")),
        ),
        deductions=Deductions(
            tax=_money(r.get("deduction_tax")),
            pf=_money(r.get("deduction_pf")),
            insurance=_money(r.get("deduction_insurance")),
            other=_money(r.get("deduction_other")),
        ),
        gross_salary=_money(r.get("gross_salary")),
        total_deductions=_money(r.get("total_deductions")),
        net_salary=_money(r.get("net_salary")),
        status=PayrollStatus(r["status"]),
        paid_on=r.get("paid_on"),
        working_days=int(r.get("working_days") or 0),
        present_days=int(r.get("present_days") or 0),
        notes=r.get("notes"),
        created_at=r.get("created_at"),
    )


def _editable_values(p: PayrollRecord) -> tuple:
    a, d = p.allowances, p.deductions
    return (
        int(p.month),
        int(p.year),
        p.basic,
        a.hra,
        a.transport,
        a.medical,
        a.special,
        a.other,
        d.tax,
        d.pf,
        d.insurance,
        d.other,
        p.gross_salary,
        p.total_deductions,
        p.net_salary,
        p.status.value,
        int(p.working_days),
        int(p.present_days),
        p.notes,
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_records p WHERE p.payroll_id=%s", (int(payroll_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def exists_for_period(self, employee_id: int, month: int, year: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT 1 FROM payroll_records WHERE employee_id=%s AND month=%s AND year=%s",
                (int(employee_id), int(month), int(year)),
            )
            return fetchone(cur) is not None

    def create(self, record: PayrollRecord) -> Optional[int]:
        columns = ("employee_id",) + _EDITABLE
        placeholders = ",".join(["%s"] * len(columns))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"INSERT INTO payroll_records({', '.join(columns)}) VALUES({placeholders})",
                    (int(record.employee_id),) + _editable_values(record),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

    def save(self, record: PayrollRecord) -> bool:
        assignments = ", ".join(f"{c}=%s" for c in _EDITABLE)
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE payroll_records SET {assignments} WHERE payroll_id=%s",
                    _editable_values(record) + (int(record.payroll_id),),
                )
        except IntegrityError as e:
            if is_duplicate_key(e):
                return False
            raise
        return True

    def mark_paid(self, payroll_id: int, paid_on: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_records SET status=%s, paid_on=%s WHERE payroll_id=%s",
                (PayrollStatus.PAID.value, paid_on, int(payroll_id)),
            )
            return cur.rowcount > 0

    def list_for_employee(
        self,
        employee_id: int,
        *,
        year: Optional[int] = None,
        limit: int = 12,
    ) -> Sequence[PayrollRecord]:
        clauses = ["p.employee_id=%s"]
        params: list = [int(employee_id)]
        if year:
            clauses.append("p.year=%s")
            params.append(int(year))
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM payroll_records p
                WHERE {where_clause(clauses)}
                ORDER BY p.year DESC, p.month DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_rows(
        self,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[PayrollRow]:
        clauses: list[str] = []
        params: list = []
        if month:
            clauses.append("p.month=%s")
            params.append(int(month))
        if year:
            clauses.append("p.year=%s")
            params.append(int(year))
        if status:
            clauses.append("p.status=%s")
            params.append(status.value)
        if employee_id:
            clauses.append("p.employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.full_name, e.email, e.department, e.position
                FROM payroll_records p
                LEFT JOIN employees e ON e.employee_id = p.employee_id
                WHERE {where_clause(clauses)}
                ORDER BY p.year DESC, p.month DESC
                """,
                tuple(params),
            )
            return [
                PayrollRow(
                    record=_row_to_record(r),
                    employee=EmployeeRef(
                        employee_id=int(r["employee_id"]),
                        full_name=r["full_name"],
                        email=r["email"],
                        department=r.get("department"),
                        position=r.get("position"),
                    )
                    if r.get("full_name") is not None
                    else None,
                )
                for r in fetchall(cur)
            ]
