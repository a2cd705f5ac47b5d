from __future__ import annotations

from dayflow_hrms.payroll.calculator.standard_calculator import StandardPayrollCalculator
from dayflow_hrms.payroll.model import Allowances, Deductions, PayrollTotals


def test_gross_and_net():
    totals = StandardPayrollCalculator().totals(
        basic=50000,
        allowances=Allowances(hra=10000, transport=2000, medical=1500, special=500, other=0),
        deductions=Deductions(tax=5000, pf=6000, insurance=800, other=200),
    )

    assert totals == PayrollTotals(gross_salary=64000, total_deductions=12000, net_salary=52000)


def test_net_may_be_negative():
    totals = StandardPayrollCalculator().totals(
        basic=1000, allowances=Allowances(), deductions=Deductions(tax=1500)
    )

    assert totals.net_salary == -500
