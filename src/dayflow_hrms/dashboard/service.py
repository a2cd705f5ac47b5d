from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..auth.model import AuthenticatedPrincipal
from ..common.datetime_utils import now_local
from ..core.enums import AttendanceStatus, LeaveStatus
from ..core.exceptions import AuthorizationError
from ..employees.repository import EmployeeRepository
from ..leaves.repository import LeaveRepository


@dataclass(frozen=True)
class DashboardStats:
    total_employees: int
    present_today: int
    pending_leaves: int
    on_leave_today: int


class DashboardService:
    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        leaves: LeaveRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._employees = employees
        self._attendance = attendance
        self._leaves = leaves
        self._clock = clock

    def stats(self, principal: AuthenticatedPrincipal) -> DashboardStats:
        if not principal.is_admin:
            raise AuthorizationError("Admin access required")

        today = self._clock().date()
        present = self._attendance.list_rows(start=today, end=today, status=AttendanceStatus.PRESENT)
        return DashboardStats(
            total_employees=self._employees.count(),
            present_today=len(present),
            pending_leaves=len(self._leaves.list_rows(status=LeaveStatus.PENDING)),
            on_leave_today=self._leaves.count_on_leave(today),
        )
