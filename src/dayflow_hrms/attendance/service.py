from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from ..auth.model import AuthenticatedPrincipal
from ..common.datetime_utils import minutes_between, now_local, parse_iso_datetime
from ..core.constants import DEFAULT_HISTORY_LIMIT, DEFAULT_OVERRIDE_REASON
from ..core.enums import AttendanceStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import AttendanceRecord, AttendanceRow, Punch
from .repository import AttendanceRepository
from .status import StatusPolicy, ThresholdStatusPolicy

logger = logging.getLogger(__name__)

_HISTORY_BUCKETS = (
    AttendanceStatus.PRESENT,
    AttendanceStatus.ABSENT,
    AttendanceStatus.HALF_DAY,
    AttendanceStatus.LEAVE,
)


@dataclass(frozen=True)
class TodayStatus:
    record: Optional[AttendanceRecord]

    @property
    def checked_in(self) -> bool:
        return bool(self.record and self.record.check_in)

    @property
    def checked_out(self) -> bool:
        return bool(self.record and self.record.check_out)


@dataclass(frozen=True)
class AttendanceHistory:
    records: Sequence[AttendanceRecord]
    counts: Dict[AttendanceStatus, int] = field(default_factory=dict)
    total_minutes: int = 0


@dataclass(frozen=True)
class AttendanceOverview:
    rows: Sequence[AttendanceRow]

    def count(self, status: AttendanceStatus) -> int:
        return sum(1 for r in self.rows if r.record.status == status)


class AttendanceService:
    """Daily check-in/check-out ledger, one record per employee per day."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        *,
        status_policy: Optional[StatusPolicy] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._policy = status_policy or ThresholdStatusPolicy()
        self._clock = clock

    def check_in(self, principal: AuthenticatedPrincipal, *, ip: Optional[str] = None) -> AttendanceRecord:
        now = self._clock()
        today = now.date()
        employee_id = principal.employee_id
        punch = Punch(time=now, ip=ip)

        existing = self._attendance.get_for_employee_and_date(employee_id, today)
        if existing and existing.check_in:
            raise ConflictError("You have already checked in today")

        if existing:
            if not self._attendance.record_check_in(
                attendance_id=existing.attendance_id, punch=punch, status=AttendanceStatus.PRESENT
            ):
                raise ConflictError("You have already checked in today")
            attendance_id = existing.attendance_id
        else:
            # the (employee, date) unique key turns a concurrent second insert into None
            new_id = self._attendance.create_check_in(
                employee_id=employee_id, work_date=today, punch=punch, status=AttendanceStatus.PRESENT
            )
            if new_id is None:
                raise ConflictError("You have already checked in today")
            attendance_id = new_id

        logger.info("Employee %s checked in at %s", employee_id, now.isoformat())
        return self._attendance.get_by_id(attendance_id)

    def check_out(self, principal: AuthenticatedPrincipal, *, ip: Optional[str] = None) -> AttendanceRecord:
        now = self._clock()
        employee_id = principal.employee_id

        record = self._attendance.get_for_employee_and_date(employee_id, now.date())
        if not record or not record.check_in:
            raise ConflictError("You haven't checked in today")
        if record.check_out:
            raise ConflictError("You have already checked out today")

        work_minutes = minutes_between(record.check_in.time, now)
        status = self._policy.derive(work_minutes, record.status)

        if not self._attendance.record_check_out(
            attendance_id=record.attendance_id,
            punch=Punch(time=now, ip=ip),
            work_minutes=work_minutes,
            status=status,
        ):
            raise ConflictError("You have already checked out today")

        logger.info("Employee %s checked out after %s minutes (%s)", employee_id, work_minutes, status.value)
        return self._attendance.get_by_id(record.attendance_id)

    def get_today(self, principal: AuthenticatedPrincipal) -> TodayStatus:
        today = self._clock().date()
        return TodayStatus(record=self._attendance.get_for_employee_and_date(principal.employee_id, today))

    def list_history(
        self,
        principal: AuthenticatedPrincipal,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> AttendanceHistory:
        records = self._attendance.list_for_employee(principal.employee_id, start=start, end=end, limit=limit)

        counts: Dict[AttendanceStatus, int] = {s: 0 for s in _HISTORY_BUCKETS}
        total_minutes = 0
        for r in records:
            counts[r.status] = counts.get(r.status, 0) + 1
            total_minutes += r.work_minutes or 0
        return AttendanceHistory(records=records, counts=counts, total_minutes=total_minutes)

    def list_all(
        self,
        principal: AuthenticatedPrincipal,
        *,
        on_date: Optional[date] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        status: Optional[AttendanceStatus] = None,
        employee_id: Optional[int] = None,
    ) -> AttendanceOverview:
        if not principal.is_admin:
            raise AuthorizationError("Admin access required")

        if on_date:
            start = end = on_date
        elif not start and not end:
            start = end = self._clock().date()

        rows = self._attendance.list_rows(start=start, end=end, status=status, employee_id=employee_id)
        return AttendanceOverview(rows=rows)

    @staticmethod
    def _merge_punch(current: Optional[Punch], patch: Any) -> Optional[Punch]:
        if not isinstance(patch, Mapping) or not patch:
            return current
        time = current.time if current else None
        ip = current.ip if current else None
        if patch.get("time"):
            try:
                time = parse_iso_datetime(str(patch["time"]))
            except ValueError:
                raise ValidationError("Invalid time format")
        if "ip" in patch:
            ip = patch["ip"]
        return Punch(time=time, ip=ip) if time else None

    def override(
        self, principal: AuthenticatedPrincipal, attendance_id: int, patch: Mapping[str, Any]
    ) -> AttendanceRecord:
        """Admin correction of a record.

        Fields present in ``patch`` (status, notes, checkIn, checkOut) are merged
        onto the record. Times are not cross-validated; when both punches are
        set, minutes and threshold status are derived again as on check-out.
        """

        if not principal.is_admin:
            raise AuthorizationError("Admin access required")

        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found")

        status = record.status
        if patch.get("status"):
            try:
                status = AttendanceStatus(patch["status"])
            except ValueError:
                raise ValidationError("Invalid attendance status")

        updated = replace(
            record,
            status=status,
            notes=patch.get("notes") or record.notes,
            check_in=self._merge_punch(record.check_in, patch.get("checkIn")),
            check_out=self._merge_punch(record.check_out, patch.get("checkOut")),
            overridden_by=principal.employee_id,
            override_reason=patch.get("overrideReason") or DEFAULT_OVERRIDE_REASON,
        )

        if updated.check_in and updated.check_out:
            minutes = minutes_between(updated.check_in.time, updated.check_out.time)
            updated = replace(updated, work_minutes=minutes, status=self._policy.derive(minutes, updated.status))

        self._attendance.save_override(updated)
        logger.info(
            "Attendance %s overridden by admin %s (%s)",
            updated.attendance_id,
            principal.employee_id,
            updated.override_reason,
        )
        return updated
