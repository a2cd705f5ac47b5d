from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus
from ..employees.model import EmployeeRef


@dataclass(frozen=True)
class Punch:
    time: datetime
    ip: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    check_in: Optional[Punch]
    check_out: Optional[Punch]
    status: AttendanceStatus = AttendanceStatus.ABSENT
    work_minutes: int = 0
    notes: Optional[str] = None
    overridden_by: Optional[int] = None
    override_reason: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceRow:
    """Read-model for the admin listing (record joined with its employee)."""

    record: AttendanceRecord
    employee: Optional[EmployeeRef]
