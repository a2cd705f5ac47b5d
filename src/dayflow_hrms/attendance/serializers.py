from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import iso_or_none
from ..core.enums import AttendanceStatus
from ..employees.serializers import employee_ref_to_json
from .model import AttendanceRecord, AttendanceRow, Punch
from .service import AttendanceHistory, AttendanceOverview


def punch_to_json(punch: Optional[Punch]) -> Optional[dict]:
    if punch is None:
        return None
    return {"time": iso_or_none(punch.time), "ip": punch.ip}


def record_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "employeeId": r.employee_id,
        "date": iso_or_none(r.work_date),
        "checkIn": punch_to_json(r.check_in),
        "checkOut": punch_to_json(r.check_out),
        "status": r.status.value,
        # minutes, under the historical field name
        "workHours": r.work_minutes,
        "notes": r.notes,
        "overriddenBy": r.overridden_by,
        "overrideReason": r.override_reason,
        "createdAt": iso_or_none(r.created_at),
    }


def row_to_json(row: AttendanceRow) -> dict:
    data = record_to_json(row.record)
    data["employee"] = employee_ref_to_json(row.employee)
    return data


def history_summary_to_json(history: AttendanceHistory) -> dict:
    summary = {status.value: n for status, n in history.counts.items()}
    summary["totalHours"] = history.total_minutes
    return summary


def overview_summary_to_json(overview: AttendanceOverview) -> dict:
    return {
        "total": len(overview.rows),
        "present": overview.count(AttendanceStatus.PRESENT),
        "absent": overview.count(AttendanceStatus.ABSENT),
        "halfDay": overview.count(AttendanceStatus.HALF_DAY),
        "onLeave": overview.count(AttendanceStatus.LEAVE),
    }
