from __future__ import annotations

from ..common.datetime_utils import iso_or_none
from ..employees.serializers import employee_ref_to_json
from .model import LeaveRequest, LeaveRow
from .service import LeaveHistory, LeaveOverview


def leave_to_json(r: LeaveRequest) -> dict:
    return {
        "id": r.request_id,
        "employeeId": r.employee_id,
        "type": r.leave_type.value,
        "startDate": iso_or_none(r.start_date),
        "endDate": iso_or_none(r.end_date),
        "reason": r.reason,
        "status": r.status.value,
        "duration": r.duration,
        "adminComment": r.admin_comment,
        "reviewedBy": r.reviewed_by,
        "reviewedAt": iso_or_none(r.reviewed_at),
        "createdAt": iso_or_none(r.created_at),
    }


def leave_row_to_json(row: LeaveRow) -> dict:
    data = leave_to_json(row.request)
    data["employee"] = employee_ref_to_json(row.employee)
    if row.request.reviewed_by is not None:
        data["reviewer"] = {
            "id": row.request.reviewed_by,
            "name": row.reviewer_name,
            "email": row.reviewer_email,
        }
    return data


def history_summary_to_json(history: LeaveHistory) -> dict:
    summary = {status.value: n for status, n in history.counts.items()}
    summary.update({t.value: days for t, days in history.approved_days.items()})
    return summary


def overview_summary_to_json(overview: LeaveOverview) -> dict:
    summary = {"total": len(overview.rows)}
    summary.update({status.value: n for status, n in overview.counts.items()})
    summary["approvedDays"] = {t.value: days for t, days in overview.approved_days.items()}
    return summary
