from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType
from ..employees.model import EmployeeRef


@dataclass(frozen=True)
class LeaveRequest:
    """Domain entity: a leave application and its review outcome."""

    request_id: int
    employee_id: int
    leave_type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    duration: int
    admin_comment: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class LeaveRow:
    """Read-model for the admin listing."""

    request: LeaveRequest
    employee: Optional[EmployeeRef]
    reviewer_name: Optional[str] = None
    reviewer_email: Optional[str] = None
