from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.enums import PayrollStatus
from ..employees.model import EmployeeRef


@dataclass(frozen=True)
class Allowances:
    hra: float = 0.0
    transport: float = 0.0
    medical: float = 0.0
    special: float = 0.0
    other: float = 0.0


@dataclass(frozen=True)
class Deductions:
    tax: float = 0.0
    pf: float = 0.0
    insurance: float = 0.0
    other: float = 0.0


@dataclass(frozen=True)
class PayrollTotals:
    gross_salary: float
    total_deductions: float
    net_salary: float


@dataclass(frozen=True)
class PayrollRecord:
    """Domain entity: one employee's payslip for a month."""

    payroll_id: int
    employee_id: int
    month: int
    year: int
    basic: float = 0.0
    allowances: Allowances = field(default_factory=Allowances)
    deductions: Deductions = field(default_factory=Deductions)
    gross_salary: float = 0.0
    total_deductions: float = 0.0
    net_salary: float = 0.0
    status: PayrollStatus = PayrollStatus.PENDING
    paid_on: Optional[datetime] = None
    working_days: int = 0
    present_days: int = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class PayrollRow:
    record: PayrollRecord
    employee: Optional[EmployeeRef]
