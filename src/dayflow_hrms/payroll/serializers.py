from __future__ import annotations

from dataclasses import asdict

from ..common.datetime_utils import iso_or_none
from ..core.enums import PayrollStatus
from ..employees.serializers import employee_ref_to_json
from .model import PayrollRecord, PayrollRow
from .service import PayrollHistory, PayrollOverview


def payroll_to_json(p: PayrollRecord) -> dict:
    return {
        "id": p.payroll_id,
        "employeeId": p.employee_id,
        "month": p.month,
        "year": p.year,
        "basic": p.basic,
        "allowances": asdict(p.allowances),
        "deductions": asdict(p.deductions),
        "grossSalary": p.gross_salary,
        "totalDeductions": p.total_deductions,
        "netSalary": p.net_salary,
        "status": p.status.value,
        "paidOn": iso_or_none(p.paid_on),
        "workingDays": p.working_days,
        "presentDays": p.present_days,
        "notes": p.notes,
        "createdAt": iso_or_none(p.created_at),
    }


def payroll_row_to_json(row: PayrollRow) -> dict:
    data = payroll_to_json(row.record)
    data["employee"] = employee_ref_to_json(row.employee)
    return data


def history_totals_to_json(history: PayrollHistory) -> dict:
    return {
        "totalEarnings": history.total_earnings,
        "totalDeductions": history.total_deductions,
        "totalNet": history.total_net,
    }


def overview_summary_to_json(overview: PayrollOverview) -> dict:
    return {
        "total": len(overview.rows),
        "totalGross": overview.total_gross,
        "totalNet": overview.total_net,
        "pending": overview.count(PayrollStatus.PENDING),
        "processed": overview.count(PayrollStatus.PROCESSED),
        "paid": overview.count(PayrollStatus.PAID),
    }
