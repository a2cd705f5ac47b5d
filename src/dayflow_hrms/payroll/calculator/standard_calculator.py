from __future__ import annotations

from ..model import Allowances, Deductions, PayrollTotals
from .base import PayrollCalculator


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: gross = basic + allowances, net = gross - deductions."""

    def totals(self, *, basic: float, allowances: Allowances, deductions: Deductions) -> PayrollTotals:
        gross = (basic or 0) + sum(
            [allowances.hra, allowances.transport, allowances.medical, allowances.special, allowances.other]
        )
        total_deductions = sum([deductions.tax, deductions.pf, deductions.insurance, deductions.other])
        return PayrollTotals(
            gross_salary=gross,
            total_deductions=total_deductions,
            net_salary=gross - total_deductions,
        )
