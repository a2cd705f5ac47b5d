from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Optional

from ..core.enums import EmployeeStatus, EmploymentType, LeaveType, Role


@dataclass(frozen=True)
class SalaryStructure:
    basic: float = 0.0
    hra: float = 0.0
    transport: float = 0.0
    medical: float = 0.0
    other: float = 0.0

    @property
    def total(self) -> float:
        return self.basic + self.hra + self.transport + self.medical + self.other


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee account.

    Admins are employees with ``role == Role.ADMIN``; both sign in the same way.
    """

    employee_id: int
    employee_code: Optional[str]
    full_name: str
    email: str
    password_hash: str
    role: Role
    is_verified: bool
    phone: Optional[str] = None
    address: Optional[str] = None
    emergency_contact: Optional[str] = None
    image_url: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    joining_date: Optional[date] = None
    employment_type: EmploymentType = EmploymentType.FULL_TIME
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    salary: SalaryStructure = field(default_factory=SalaryStructure)
    otp_code: Optional[str] = None
    otp_expires_at: Optional[datetime] = None
    reset_token_hash: Optional[str] = None
    reset_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


LeaveBalance = Dict[LeaveType, int]


@dataclass(frozen=True)
class EmployeeRef:
    """Read-side join used by attendance/leave listings."""

    employee_id: int
    full_name: str
    email: str
    department: Optional[str] = None
    position: Optional[str] = None
    image_url: Optional[str] = None
