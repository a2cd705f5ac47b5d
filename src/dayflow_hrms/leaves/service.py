from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Dict, Optional, Sequence

from ..auth.model import AuthenticatedPrincipal
from ..common.datetime_utils import inclusive_days, now_local, parse_iso_date, start_of_day
from ..common.validators import require_enum
from ..core.constants import DEFAULT_REJECT_COMMENT
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import AuthorizationError, BalanceError, ConflictError, NotFoundError, ValidationError
from ..employees.model import LeaveBalance
from ..employees.repository import EmployeeRepository
from .model import LeaveRequest, LeaveRow
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


def _approved_days(requests: Sequence[LeaveRequest]) -> Dict[LeaveType, int]:
    days: Dict[LeaveType, int] = {}
    for r in requests:
        if r.status == LeaveStatus.APPROVED:
            days[r.leave_type] = days.get(r.leave_type, 0) + r.duration
    return days


def _status_counts(requests: Sequence[LeaveRequest]) -> Dict[LeaveStatus, int]:
    counts = {s: 0 for s in LeaveStatus}
    for r in requests:
        counts[r.status] += 1
    return counts


@dataclass(frozen=True)
class LeaveHistory:
    requests: Sequence[LeaveRequest]
    balance: LeaveBalance

    @property
    def counts(self) -> Dict[LeaveStatus, int]:
        return _status_counts(self.requests)

    @property
    def approved_days(self) -> Dict[LeaveType, int]:
        return _approved_days(self.requests)


@dataclass(frozen=True)
class LeaveOverview:
    rows: Sequence[LeaveRow]

    @property
    def counts(self) -> Dict[LeaveStatus, int]:
        return _status_counts([r.request for r in self.rows])

    @property
    def approved_days(self) -> Dict[LeaveType, int]:
        return _approved_days([r.request for r in self.rows])


class LeaveService:
    """Leave applications and their pending -> approved/rejected review."""

    def __init__(
        self,
        leaves: LeaveRepository,
        employees: EmployeeRepository,
        *,
        recheck_balance_on_approve: bool = False,
        clock: Callable[[], datetime] = now_local,
    ):
        self._leaves = leaves
        self._employees = employees
        self._recheck_balance = bool(recheck_balance_on_approve)
        self._clock = clock

    @staticmethod
    def _require_admin(principal: AuthenticatedPrincipal) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Admin access required")

    def _available(self, employee_id: int, leave_type: LeaveType) -> int:
        return int(self._employees.get_balance(employee_id).get(leave_type, 0))

    def apply(
        self,
        principal: AuthenticatedPrincipal,
        *,
        leave_type: str,
        start: str,
        end: str,
        reason: str,
    ) -> LeaveRequest:
        if not leave_type or not start or not end or not reason or not str(reason).strip():
            raise ValidationError("All fields are required")

        type_ = require_enum(LeaveType, leave_type, "Leave type")
        try:
            start_date = parse_iso_date(str(start))
            end_date = parse_iso_date(str(end))
        except ValueError:
            raise ValidationError("Dates must be YYYY-MM-DD")

        if start_date > end_date:
            raise ValidationError("End date must be after start date")
        # a leave starting today is already in the past once the day has begun
        if start_of_day(start_date) < self._clock():
            raise ValidationError("Cannot apply for past dates")

        employee_id = principal.employee_id
        if self._leaves.has_overlap(employee_id, start_date, end_date):
            raise ConflictError("You already have a leave request for these dates")

        duration = inclusive_days(start_date, end_date)
        if type_ != LeaveType.UNPAID and self._available(employee_id, type_) < duration:
            raise BalanceError(f"Insufficient {type_.value} leave balance")

        request_id = self._leaves.create(
            employee_id=employee_id,
            leave_type=type_,
            start=start_date,
            end=end_date,
            reason=str(reason).strip(),
            duration=duration,
        )
        logger.info(
            "Leave %s applied by employee %s: %s %s..%s (%s days)",
            request_id,
            employee_id,
            type_.value,
            start_date,
            end_date,
            duration,
        )
        return self._leaves.get_by_id(request_id)

    def _pending_or_raise(self, request_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(request_id))
        if not leave:
            raise NotFoundError("Leave request not found")
        if leave.status != LeaveStatus.PENDING:
            raise ConflictError("Leave request has already been processed")
        return leave

    def _decide(self, principal: AuthenticatedPrincipal, leave: LeaveRequest, status: LeaveStatus, comment):
        if not self._leaves.decide(
            request_id=leave.request_id,
            status=status,
            reviewed_by=principal.employee_id,
            reviewed_at=self._clock(),
            comment=comment,
        ):
            # another reviewer decided first
            raise ConflictError("Leave request has already been processed")

    def approve(
        self, principal: AuthenticatedPrincipal, request_id: int, *, comment: Optional[str] = None
    ) -> LeaveRequest:
        self._require_admin(principal)
        leave = self._pending_or_raise(request_id)

        deducts = leave.leave_type != LeaveType.UNPAID
        if deducts and self._recheck_balance:
            if self._available(leave.employee_id, leave.leave_type) < leave.duration:
                raise BalanceError(f"Insufficient {leave.leave_type.value} leave balance")

        self._decide(principal, leave, LeaveStatus.APPROVED, comment)
        if deducts:
            self._employees.adjust_balance(leave.employee_id, leave.leave_type, -leave.duration)

        logger.info("Leave %s approved by admin %s", leave.request_id, principal.employee_id)
        return self._leaves.get_by_id(leave.request_id)

    def reject(
        self, principal: AuthenticatedPrincipal, request_id: int, *, comment: Optional[str] = None
    ) -> LeaveRequest:
        self._require_admin(principal)
        leave = self._pending_or_raise(request_id)

        self._decide(principal, leave, LeaveStatus.REJECTED, comment or DEFAULT_REJECT_COMMENT)
        logger.info("Leave %s rejected by admin %s", leave.request_id, principal.employee_id)
        return self._leaves.get_by_id(leave.request_id)

    def list_mine(
        self,
        principal: AuthenticatedPrincipal,
        *,
        status: Optional[LeaveStatus] = None,
        year: Optional[int] = None,
    ) -> LeaveHistory:
        requests = self._leaves.list_for_employee(principal.employee_id, status=status, year=year)
        return LeaveHistory(requests=requests, balance=self._employees.get_balance(principal.employee_id))

    def list_all(
        self,
        principal: AuthenticatedPrincipal,
        *,
        status: Optional[LeaveStatus] = None,
        employee_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> LeaveOverview:
        self._require_admin(principal)
        rows = self._leaves.list_rows(status=status, employee_id=employee_id, start=start, end=end)
        return LeaveOverview(rows=rows)
