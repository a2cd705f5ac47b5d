from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import build_guards, current_principal
from ..common.query_args import date_arg, enum_arg, int_arg, json_body
from ..common.responses import ok
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import AttendanceStatus
from .serializers import history_summary_to_json, overview_summary_to_json, record_to_json, row_to_json


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    service = container.attendance_service

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @guards.login_required
    def check_in():
        record = service.check_in(current_principal(), ip=request.remote_addr)
        return ok(
            "Check-in successful",
            attendance={
                "date": record.work_date.isoformat(),
                "checkInTime": record.check_in.time.isoformat(),
                "status": record.status.value,
            },
        )

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @guards.login_required
    def check_out():
        record = service.check_out(current_principal(), ip=request.remote_addr)
        return ok(
            "Check-out successful",
            attendance={
                "date": record.work_date.isoformat(),
                "checkInTime": record.check_in.time.isoformat(),
                "checkOutTime": record.check_out.time.isoformat(),
                "workHours": record.work_minutes,
                "status": record.status.value,
            },
        )

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @guards.login_required
    def today():
        status = service.get_today(current_principal())
        return ok(
            attendance=record_to_json(status.record) if status.record else None,
            checkedIn=status.checked_in,
            checkedOut=status.checked_out,
        )

    @app.route("/attendance/me", methods=["GET"], endpoint="attendance_me")
    @guards.login_required
    def my_history():
        limit = int_arg("limit") or DEFAULT_HISTORY_LIMIT
        history = service.list_history(
            current_principal(),
            start=date_arg("startDate"),
            end=date_arg("endDate"),
            limit=limit,
        )
        return ok(
            count=len(history.records),
            summary=history_summary_to_json(history),
            attendance=[record_to_json(r) for r in history.records],
        )

    @app.route("/attendance/all", methods=["GET"], endpoint="attendance_all")
    @guards.admin_required
    def all_attendance():
        overview = service.list_all(
            current_principal(),
            on_date=date_arg("date"),
            start=date_arg("startDate"),
            end=date_arg("endDate"),
            status=enum_arg(AttendanceStatus, "status"),
            employee_id=int_arg("employeeId"),
        )
        return ok(
            summary=overview_summary_to_json(overview),
            attendance=[row_to_json(r) for r in overview.rows],
        )

    @app.route("/attendance/<int:attendance_id>", methods=["PUT"], endpoint="attendance_override")
    @guards.admin_required
    def override(attendance_id: int):
        body = json_body()
        record = service.override(current_principal(), attendance_id, body)
        return ok("Attendance updated successfully", attendance=record_to_json(record))
