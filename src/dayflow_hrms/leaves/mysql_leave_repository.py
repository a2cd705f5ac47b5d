from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, where_clause
from ..employees.model import EmployeeRef
from .model import LeaveRequest, LeaveRow
from .repository import LeaveRepository

_COLUMNS = """
    l.request_id, l.employee_id, l.leave_type, l.start_date, l.end_date, l.reason, l.status,
    l.duration, l.admin_comment, l.reviewed_by, l.reviewed_at, l.created_at
"""


def _row_to_request(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_type=LeaveType(r["leave_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=LeaveStatus(r["status"]),
        duration=int(r["duration"]),
        admin_comment=r.get("admin_comment"),
        reviewed_by=int(r["reviewed_by"]) if r.get("reviewed_by") else None,
        reviewed_at=r.get("reviewed_at"),
        created_at=r.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests l WHERE l.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _row_to_request(r) if r else None

    def has_overlap(
        self,
        employee_id: int,
        start: date,
        end: date,
        *,
        exclude_id: Optional[int] = None,
    ) -> bool:
        clauses = ["employee_id=%s", "status <> %s", "start_date <= %s", "end_date >= %s"]
        params: list = [int(employee_id), LeaveStatus.REJECTED.value, end, start]
        if exclude_id is not None:
            clauses.append("request_id <> %s")
            params.append(int(exclude_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT 1 FROM leave_requests WHERE {where_clause(clauses)} LIMIT 1", tuple(params))
            return fetchone(cur) is not None

    def create(
        self,
        *,
        employee_id: int,
        leave_type: LeaveType,
        start: date,
        end: date,
        reason: str,
        duration: int,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, leave_type, start_date, end_date, reason, status, duration)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(employee_id), leave_type.value, start, end, reason, LeaveStatus.PENDING.value, int(duration)),
            )
            return int(cur.lastrowid)

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        comment: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s, admin_comment=%s
                WHERE request_id=%s AND status=%s
                """,
                (
                    status.value,
                    int(reviewed_by),
                    reviewed_at,
                    comment,
                    int(request_id),
                    LeaveStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[LeaveStatus] = None,
        year: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["l.employee_id=%s"]
        params: list = [int(employee_id)]
        if status:
            clauses.append("l.status=%s")
            params.append(status.value)
        if year:
            clauses.append("l.start_date BETWEEN %s AND %s")
            params.extend([date(int(year), 1, 1), date(int(year), 12, 31)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests l
                WHERE {where_clause(clauses)}
                ORDER BY l.created_at DESC, l.request_id DESC
                """,
                tuple(params),
            )
            return [_row_to_request(r) for r in fetchall(cur)]

    def list_rows(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[LeaveRow]:
        clauses: list[str] = []
        params: list = []
        if status:
            clauses.append("l.status=%s")
            params.append(status.value)
        if employee_id:
            clauses.append("l.employee_id=%s")
            params.append(int(employee_id))
        if start:
            clauses.append("l.start_date >= %s")
            params.append(start)
        if end:
            clauses.append("l.start_date <= %s")
            params.append(end)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS},
                       e.full_name, e.email, e.department, e.position, e.image_url,
                       r.full_name AS reviewer_name, r.email AS reviewer_email
                FROM leave_requests l
                LEFT JOIN employees e ON e.employee_id = l.employee_id
                LEFT JOIN employees r ON r.employee_id = l.reviewed_by
                WHERE {where_clause(clauses)}
                ORDER BY l.created_at DESC, l.request_id DESC
                """,
                tuple(params),
            )
            rows = fetchall(cur)
            return [
                LeaveRow(
                    request=_row_to_request(r),
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
                    reviewer_name=r.get("reviewer_name"),
                    reviewer_email=r.get("reviewer_email"),
                )
                for r in rows
            ]

    def count_on_leave(self, day: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(DISTINCT employee_id) AS n
                FROM leave_requests
                WHERE status=%s AND start_date <= %s AND end_date >= %s
                """,
                (LeaveStatus.APPROVED.value, day, day),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
