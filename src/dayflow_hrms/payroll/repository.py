from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollStatus
from .model import PayrollRecord, PayrollRow


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[PayrollRecord]:
        raise NotImplementedError

    def exists_for_period(self, employee_id: int, month: int, year: int) -> bool:
        raise NotImplementedError

    def create(self, record: PayrollRecord) -> Optional[int]:
        """Insert ``record`` (its id is ignored); None if the period is already taken."""

        raise NotImplementedError

    def save(self, record: PayrollRecord) -> bool:
        """Overwrite the editable columns; False if the new period clashes with another record."""

        raise NotImplementedError

    def mark_paid(self, payroll_id: int, paid_on: datetime) -> bool:
        raise NotImplementedError

    def list_for_employee(
        self,
        employee_id: int,
        *,
        year: Optional[int] = None,
        limit: int = 12,
    ) -> Sequence[PayrollRecord]:
        raise NotImplementedError

    def list_rows(
        self,
        *,
        month: Optional[int] = None,
        year: Optional[int] = None,
        status: Optional[PayrollStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[PayrollRow]:
        raise NotImplementedError
