from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..auth.model import AuthenticatedPrincipal
from ..common.datetime_utils import now_local
from ..common.validators import optional_int, require_enum
from ..core.constants import DEFAULT_PAYROLL_LIMIT
from ..core.enums import PayrollStatus
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import Allowances, Deductions, PayrollRecord, PayrollRow
from .repository import PayrollRepository

logger = logging.getLogger(__name__)


def _amount(value: Any, field_name: str) -> float:
    if value is None or value == "":
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def _merge_amounts(current, patch: Any, prefix: str):
    """Overlay a JSON mapping of amounts onto an Allowances/Deductions value."""

    if not isinstance(patch, Mapping):
        return current
    changes = {f.name: _amount(patch[f.name], f"{prefix}.{f.name}") for f in fields(current) if f.name in patch}
    return replace(current, **changes)


def _require_month(month: int) -> int:
    if not 1 <= month <= 12:
        raise ValidationError("Month must be between 1 and 12")
    return month


@dataclass(frozen=True)
class PayrollHistory:
    records: Sequence[PayrollRecord]

    @property
    def total_earnings(self) -> float:
        return sum(r.gross_salary for r in self.records)

    @property
    def total_deductions(self) -> float:
        return sum(r.total_deductions for r in self.records)

    @property
    def total_net(self) -> float:
        return sum(r.net_salary for r in self.records)


@dataclass(frozen=True)
class PayrollOverview:
    rows: Sequence[PayrollRow]

    @property
    def total_gross(self) -> float:
        return sum(r.record.gross_salary for r in self.rows)

    @property
    def total_net(self) -> float:
        return sum(r.record.net_salary for r in self.rows)

    def count(self, status: PayrollStatus) -> int:
        return sum(1 for r in self.rows if r.record.status == status)


class PayrollService:
    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        clock: Callable[[], datetime] = now_local,
    ):
        self._payroll = payroll
        self._employees = employees
        self._calculator = calculator or StandardPayrollCalculator()
        self._clock = clock

    @staticmethod
    def _require_admin(principal: AuthenticatedPrincipal) -> None:
        if not principal.is_admin:
            raise AuthorizationError("Admin access required")

    def _with_totals(self, record: PayrollRecord) -> PayrollRecord:
        totals = self._calculator.totals(
            basic=record.basic, allowances=record.allowances, deductions=record.deductions
        )
        return replace(
            record,
            gross_salary=totals.gross_salary,
            total_deductions=totals.total_deductions,
            net_salary=totals.net_salary,
        )

    def _get_or_404(self, payroll_id: int) -> PayrollRecord:
        record = self._payroll.get_by_id(int(payroll_id))
        if not record:
            raise NotFoundError("Payroll record not found")
        return record

    def list_mine(
        self,
        principal: AuthenticatedPrincipal,
        *,
        year: Optional[int] = None,
        limit: int = DEFAULT_PAYROLL_LIMIT,
    ) -> PayrollHistory:
        records = self._payroll.list_for_employee(principal.employee_id, year=year, limit=limit)
        return PayrollHistory(records=records)

    def list_all(
        self,
        principal: AuthenticatedPrincipal,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        employee_id: Optional[int] = None,
    ) -> PayrollOverview:
        self._require_admin(principal)
        rows = self._payroll.list_rows(month=month, year=year, status=status, employee_id=employee_id)
        return PayrollOverview(rows=rows)

    def create(self, principal: AuthenticatedPrincipal, data: Mapping[str, Any]) -> PayrollRecord:
        self._require_admin(principal)

        employee_id = optional_int(data.get("employeeId"), "employeeId")
        month = optional_int(data.get("month"), "month")
        year = optional_int(data.get("year"), "year")
        if not employee_id or not month or not year:
            raise ValidationError("Employee, month, and year are required")
        _require_month(month)

        if not self._employees.get_by_id(employee_id):
            raise NotFoundError("Employee not found")
        if self._payroll.exists_for_period(employee_id, month, year):
            raise ConflictError("Payroll record already exists for this month")

        record = self._with_totals(
            PayrollRecord(
                payroll_id=0,
                employee_id=employee_id,
                month=month,
                year=year,
                basic=_amount(data.get("basic"), "basic"),
                allowances=_merge_amounts(Allowances(), data.get("allowances"), "allowances"),
                deductions=_merge_amounts(Deductions(), data.get("deductions"), "deductions"),
                working_days=optional_int(data.get("workingDays"), "workingDays") or 0,
                present_days=optional_int(data.get("presentDays"), "presentDays") or 0,
                notes=data.get("notes"),
            )
        )

        payroll_id = self._payroll.create(record)
        if payroll_id is None:
            raise ConflictError("Payroll record already exists for this month")

        logger.info(
            "Payroll %s created for employee %s (%02d/%s, net=%.2f)",
            payroll_id,
            employee_id,
            month,
            year,
            record.net_salary,
        )
        return self._get_or_404(payroll_id)

    def update(self, principal: AuthenticatedPrincipal, payroll_id: int, patch: Mapping[str, Any]) -> PayrollRecord:
        """Apply an admin edit; the owning employee and the id cannot change."""

        self._require_admin(principal)
        record = self._get_or_404(payroll_id)

        changes: dict[str, Any] = {}
        if "month" in patch:
            changes["month"] = _require_month(optional_int(patch["month"], "month") or 0)
        if "year" in patch:
            changes["year"] = optional_int(patch["year"], "year") or record.year
        if "basic" in patch:
            changes["basic"] = _amount(patch["basic"], "basic")
        if "status" in patch:
            changes["status"] = require_enum(PayrollStatus, patch["status"], "Status")
        if "workingDays" in patch:
            changes["working_days"] = optional_int(patch["workingDays"], "workingDays") or 0
        if "presentDays" in patch:
            changes["present_days"] = optional_int(patch["presentDays"], "presentDays") or 0
        if "notes" in patch:
            changes["notes"] = patch["notes"]
        changes["allowances"] = _merge_amounts(record.allowances, patch.get("allowances"), "allowances")
        changes["deductions"] = _merge_amounts(record.deductions, patch.get("deductions"), "deductions")

        updated = self._with_totals(replace(record, **changes))
        if not self._payroll.save(updated):
            raise ConflictError("Payroll record already exists for this month")

        logger.info("Payroll %s updated by admin %s", updated.payroll_id, principal.employee_id)
        return self._get_or_404(updated.payroll_id)

    def mark_paid(self, principal: AuthenticatedPrincipal, payroll_id: int) -> PayrollRecord:
        self._require_admin(principal)
        self._get_or_404(payroll_id)
        self._payroll.mark_paid(int(payroll_id), self._clock())

        logger.info("Payroll %s marked paid by admin %s", payroll_id, principal.employee_id)
        return self._get_or_404(payroll_id)
