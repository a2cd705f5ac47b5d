from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest, LeaveRow


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def has_overlap(
        self,
        employee_id: int,
        start: date,
        end: date,
        *,
        exclude_id: Optional[int] = None,
    ) -> bool:
        """Any non-rejected request of the employee intersecting [start, end] (closed)."""

        raise NotImplementedError

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
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: LeaveStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        comment: Optional[str],
    ) -> bool:
        """Move a request out of pending; False when it was no longer pending."""

        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        status: Optional[LeaveStatus] = None,
        year: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def list_rows(
        self,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[LeaveRow]:
        """Admin listing; ``start``/``end`` bound the request's start date."""

        raise NotImplementedError

    def count_on_leave(self, day: date) -> int:
        """Approved requests covering ``day``."""

        raise NotImplementedError
