from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus, LeaveType
from .model import Employee, LeaveBalance


class EmployeeRepository(Protocol):
    """Repository interface for employees and their leave balances.

    Note: services depend on this interface, never on a concrete database.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_reset_token_hash(self, token_hash: str) -> Optional[Employee]:
        raise NotImplementedError

    def list(
        self,
        *,
        status: Optional[EmployeeStatus] = None,
        department: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Sequence[Employee]:
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError

    def create(self, *, fields: Mapping[str, Any], balance: LeaveBalance) -> int:
        """Insert an employee row (column -> value) and its initial leave balance."""

        raise NotImplementedError

    def update_fields(self, employee_id: int, fields: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def has_history(self, employee_id: int) -> bool:
        """True when attendance, leave or payroll rows reference the employee."""
        raise NotImplementedError

    def delete(self, employee_id: int) -> bool:
        raise NotImplementedError

    def get_balance(self, employee_id: int) -> LeaveBalance:
        raise NotImplementedError

    def set_balance(self, employee_id: int, balance: LeaveBalance) -> None:
        raise NotImplementedError

    def adjust_balance(self, employee_id: int, leave_type: LeaveType, delta: int) -> None:
        """Atomically add ``delta`` (usually negative) to one balance bucket."""

        raise NotImplementedError
