from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import generate_password_hash

from ..auth.model import AuthenticatedPrincipal
from ..auth.service import default_balance
from ..common.validators import (
    optional_date,
    optional_int,
    require_email,
    require_enum,
    require_min_length,
    require_non_empty,
)
from ..core.constants import EMPLOYEE_CODE_PREFIX
from ..core.enums import EmployeeStatus, EmploymentType, LeaveType, Role
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from .model import Employee, LeaveBalance
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

# JSON key -> column, for fields employees may edit on their own profile
EMPLOYEE_EDITABLE_FIELDS = {
    "phone": "phone",
    "address": "address",
    "emergencyContact": "emergency_contact",
    "image": "image_url",
}

ADMIN_EDITABLE_FIELDS = {
    **EMPLOYEE_EDITABLE_FIELDS,
    "name": "full_name",
    "department": "department",
    "position": "position",
    "employeeId": "employee_code",
}

SALARY_FIELDS = ("basic", "hra", "transport", "medical", "other")


def _require_admin(principal: AuthenticatedPrincipal) -> None:
    if not principal.is_admin:
        raise AuthorizationError("Admin access required")


def _salary_columns(salary: Mapping[str, Any]) -> dict:
    out = {}
    for key in SALARY_FIELDS:
        if key in salary:
            try:
                out[f"salary_{key}"] = float(salary[key] or 0)
            except (TypeError, ValueError):
                raise ValidationError(f"salary.{key} must be a number")
    return out


def _parse_balance(data: Mapping[str, Any]) -> LeaveBalance:
    balance: LeaveBalance = {}
    for key, days in data.items():
        leave_type = require_enum(LeaveType, key, "Leave type")
        balance[leave_type] = optional_int(days, f"leaveBalance.{key}") or 0
    return balance


class EmployeeService:
    """Use cases: employee directory and profile management."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def _get_or_404(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def list(
        self,
        principal: AuthenticatedPrincipal,
        *,
        status: Optional[str] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Employee]:
        _require_admin(principal)
        status_enum = require_enum(EmployeeStatus, status, "Status") if status else None
        return self._employees.list(status=status_enum, department=department or None, search=search or None)

    def get(self, principal: AuthenticatedPrincipal, employee_id: int) -> Employee:
        if not principal.is_admin and principal.employee_id != int(employee_id):
            raise AuthorizationError("Access denied. You can only view your own profile.")
        return self._get_or_404(employee_id)

    def balance(self, employee_id: int) -> LeaveBalance:
        return self._employees.get_balance(int(employee_id))

    def create(
        self,
        principal: AuthenticatedPrincipal,
        *,
        name: str,
        email: str,
        password: str,
        department: Optional[str] = None,
        position: Optional[str] = None,
        joining_date: Optional[str] = None,
        employment_type: Optional[str] = None,
        salary: Optional[Mapping[str, Any]] = None,
        image: Optional[str] = None,
        role: Optional[str] = None,
    ) -> int:
        _require_admin(principal)
        if not name or not email or not password:
            raise ValidationError("Name, email, and password are required")

        name = require_non_empty(name, "Name")
        email = require_email(email)
        require_min_length(password, "Password", 6)

        if self._employees.get_by_email(email):
            raise ConflictError("Employee with this email already exists")

        code = f"{EMPLOYEE_CODE_PREFIX}{self._employees.count() + 1:04d}"
        fields: dict[str, Any] = {
            "employee_code": code,
            "full_name": name,
            "email": email,
            "password_hash": generate_password_hash(password),
            "role": require_enum(Role, role, "Role") if role else Role.EMPLOYEE,
            # admin-created accounts skip OTP verification
            "is_verified": True,
            "department": department,
            "position": position,
            "joining_date": optional_date(joining_date, "joiningDate"),
            "employment_type": (
                require_enum(EmploymentType, employment_type, "Employment type")
                if employment_type
                else EmploymentType.FULL_TIME
            ),
            "status": EmployeeStatus.ACTIVE,
            "image_url": image,
        }
        fields.update(_salary_columns(salary or {}))

        employee_id = self._employees.create(fields=fields, balance=default_balance())
        logger.info("Employee %s (%s) created by admin %s", employee_id, code, principal.employee_id)
        return employee_id

    def update(self, principal: AuthenticatedPrincipal, employee_id: int, patch: Mapping[str, Any]) -> Employee:
        employee_id = int(employee_id)
        if not principal.is_admin and principal.employee_id != employee_id:
            raise AuthorizationError("Access denied. You can only update your own profile.")

        allowed = ADMIN_EDITABLE_FIELDS if principal.is_admin else EMPLOYEE_EDITABLE_FIELDS
        fields: dict[str, Any] = {allowed[k]: v for k, v in patch.items() if k in allowed}
        balance: Optional[LeaveBalance] = None

        if principal.is_admin:
            if "email" in patch:
                fields["email"] = require_email(patch["email"])
            if "joiningDate" in patch:
                fields["joining_date"] = optional_date(patch["joiningDate"], "joiningDate")
            if "employmentType" in patch:
                fields["employment_type"] = require_enum(EmploymentType, patch["employmentType"], "Employment type")
            if "status" in patch:
                fields["status"] = require_enum(EmployeeStatus, patch["status"], "Status")
            if "role" in patch:
                fields["role"] = require_enum(Role, patch["role"], "Role")
            if isinstance(patch.get("salary"), Mapping):
                fields.update(_salary_columns(patch["salary"]))
            if isinstance(patch.get("leaveBalance"), Mapping):
                balance = _parse_balance(patch["leaveBalance"])

        if not fields and not balance:
            raise ValidationError("No valid fields to update")

        self._get_or_404(employee_id)
        if fields:
            self._employees.update_fields(employee_id, fields)
        if balance:
            self._employees.set_balance(employee_id, balance)

        logger.info("Employee %s updated by %s (%s)", employee_id, principal.employee_id, sorted(fields))
        return self._get_or_404(employee_id)

    def delete(self, principal: AuthenticatedPrincipal, employee_id: int) -> None:
        _require_admin(principal)
        employee_id = int(employee_id)
        self._get_or_404(employee_id)
        if self._employees.has_history(employee_id):
            raise ConflictError(
                "Employee has attendance, leave or payroll history; set status to inactive instead"
            )
        if not self._employees.delete(employee_id):
            raise NotFoundError("Employee not found")
        logger.info("Employee %s deleted by admin %s", employee_id, principal.employee_id)
