from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from mysql.connector.errors import IntegrityError

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, where_clause
from ..employees.model import EmployeeRef
from .model import AttendanceRecord, AttendanceRow, Punch
from .repository import AttendanceRepository

_COLUMNS = """
    a.attendance_id, a.employee_id, a.work_date, a.check_in_time, a.check_in_ip,
    a.check_out_time, a.check_out_ip, a.status, a.work_minutes, a.notes,
    a.overridden_by, a.override_reason, a.created_at
"""


def _punch(time, ip) -> Optional[Punch]:
    return Punch(time=time, ip=ip) if time else None


def _row_to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        check_in=_punch(r.get("check_in_time"), r.get("check_in_ip")),
        check_out=_punch(r.get("check_out_time"), r.get("check_out_ip")),
        status=AttendanceStatus(r["status"]),
        work_minutes=int(r.get("work_minutes") or 0),
        notes=r.get("notes"),
        overridden_by=int(r["overridden_by"]) if r.get("overridden_by") else None,
        override_reason=r.get("override_reason"),
        created_at=r.get("created_at"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records a WHERE a.attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance_records a WHERE a.employee_id=%s AND a.work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _row_to_record(r) if r else None

    def create_check_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        punch: Punch,
        status: AttendanceStatus,
    ) -> Optional[int]:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, check_in_time, check_in_ip, status)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, punch.time, punch.ip, status.value),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                return None
            raise

    def record_check_in(self, *, attendance_id: int, punch: Punch, status: AttendanceStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_ip=%s, status=%s
                WHERE attendance_id=%s AND check_in_time IS NULL
                """,
                (punch.time, punch.ip, status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def record_check_out(
        self,
        *,
        attendance_id: int,
        punch: Punch,
        work_minutes: int,
        status: AttendanceStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out_time=%s, check_out_ip=%s, work_minutes=%s, status=%s
                WHERE attendance_id=%s AND check_out_time IS NULL
                """,
                (punch.time, punch.ip, int(work_minutes), status.value, int(attendance_id)),
            )
            return cur.rowcount > 0

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 30,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["a.employee_id=%s"]
        params: list = [int(employee_id)]
        if start:
            clauses.append("a.work_date >= %s")
            params.append(start)
        if end:
            clauses.append("a.work_date <= %s")
            params.append(end)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records a
                WHERE {where_clause(clauses)}
                ORDER BY a.work_date DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [_row_to_record(r) for r in fetchall(cur)]

    def list_rows(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRow]:
        clauses: list[str] = []
        params: list = []
        if start:
            clauses.append("a.work_date >= %s")
            params.append(start)
        if end:
            clauses.append("a.work_date <= %s")
            params.append(end)
        if status:
            clauses.append("a.status=%s")
            params.append(status.value)
        if employee_id:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                       e.full_name, e.email, e.department, e.position, e.image_url
                FROM attendance_records a
                LEFT JOIN employees e ON e.employee_id = a.employee_id
                WHERE {where_clause(clauses)}
                ORDER BY a.work_date DESC, a.check_in_time DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                AttendanceRow(
                    record=_row_to_record(r),
                    employee=EmployeeRef(
                        employee_id=int(r["employee_id"]),
                        full_name=r["full_name"],
                        email=r["email"],
                        department=r.get("department"),
                        position=r.get("position"),
                        image_url=r.get("image_url"),
                    )
                    if r.get("full_name") is not None
                    else None,
                )
                for r in rows
            ]

    def save_override(self, record: AttendanceRecord) -> None:
        check_in = record.check_in or Punch(time=None)
        check_out = record.check_out or Punch(time=None)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_in_time=%s, check_in_ip=%s, check_out_time=%s, check_out_ip=%s,
                    status=%s, work_minutes=%s, notes=%s, overridden_by=%s, override_reason=%s
                WHERE attendance_id=%s
                """,
                (
                    check_in.time,
                    check_in.ip,
                    check_out.time,
                    check_out.ip,
                    record.status.value,
                    int(record.work_minutes),
                    record.notes,
                    record.overridden_by,
                    record.override_reason,
                    int(record.attendance_id),
                ),
            )
