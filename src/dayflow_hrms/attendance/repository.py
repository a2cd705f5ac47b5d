from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceRow, Punch


class AttendanceRepository(Protocol):
    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_check_in(
        self,
        *,
        employee_id: int,
        work_date: date,
        punch: Punch,
        status: AttendanceStatus,
    ) -> Optional[int]:
        """Insert the day's record; None when one already exists for (employee, date)."""

        raise NotImplementedError

    def record_check_in(self, *, attendance_id: int, punch: Punch, status: AttendanceStatus) -> bool:
        """Fill in check-in on an existing record, only while it has none."""

        raise NotImplementedError

    def record_check_out(
        self,
        *,
        attendance_id: int,
        punch: Punch,
        work_minutes: int,
        status: AttendanceStatus,
    ) -> bool:
        """Set check-out only while it is still empty; False if another request won."""

        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = 30,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_rows(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceRow]:
        raise NotImplementedError

    def save_override(self, record: AttendanceRecord) -> None:
        """Admin-only full write of punches, status, minutes, notes and override stamp."""

        raise NotImplementedError
