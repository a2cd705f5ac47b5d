from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import iso_or_none
from .model import Employee, EmployeeRef, LeaveBalance


def balance_to_json(balance: LeaveBalance) -> dict:
    return {t.value: days for t, days in balance.items()}


def account_to_json(e: Employee) -> dict:
    return {
        "id": e.employee_id,
        "employeeId": e.employee_code,
        "name": e.full_name,
        "email": e.email,
        "role": e.role.value,
        "isVerified": e.is_verified,
        "createdAt": iso_or_none(e.created_at),
    }


def employee_to_json(e: Employee, balance: Optional[LeaveBalance] = None) -> dict:
    """Public view of an employee; credential and OTP fields never leave the service."""

    data = account_to_json(e)
    data.update(
        {
            "phone": e.phone,
            "address": e.address,
            "emergencyContact": e.emergency_contact,
            "image": e.image_url,
            "department": e.department,
            "position": e.position,
            "joiningDate": iso_or_none(e.joining_date),
            "employmentType": e.employment_type.value,
            "status": e.status.value,
            "salary": {
                "basic": e.salary.basic,
                "hra": e.salary.hra,
                "transport": e.salary.transport,
                "medical": e.salary.medical,
                "other": e.salary.other,
            },
            "totalSalary": e.salary.total,
        }
    )
    if balance is not None:
        data["leaveBalance"] = balance_to_json(balance)
    return data


def employee_ref_to_json(ref: Optional[EmployeeRef]) -> Optional[dict]:
    if ref is None:
        return None
    return {
        "id": ref.employee_id,
        "name": ref.full_name,
        "email": ref.email,
        "department": ref.department,
        "position": ref.position,
        "image": ref.image_url,
    }
