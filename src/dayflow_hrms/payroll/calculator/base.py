from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import Allowances, Deductions, PayrollTotals


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def totals(self, *, basic: float, allowances: Allowances, deductions: Deductions) -> PayrollTotals:
        raise NotImplementedError
