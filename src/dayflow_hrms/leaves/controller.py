from __future__ import annotations

from flask import Flask

from ..auth.decorators import build_guards, current_principal
from ..common.query_args import date_arg, enum_arg, int_arg, json_body
from ..common.responses import ok
from ..container import Container
from ..core.enums import LeaveStatus
from ..employees.serializers import balance_to_json
from .serializers import history_summary_to_json, leave_row_to_json, leave_to_json, overview_summary_to_json


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    service = container.leave_service

    @app.route("/leaves/apply", methods=["POST"], endpoint="leaves_apply")
    @guards.login_required
    def apply_leave():
        body = json_body()
        leave = service.apply(
            current_principal(),
            leave_type=body.get("type"),
            start=body.get("startDate"),
            end=body.get("endDate"),
            reason=body.get("reason"),
        )
        return ok("Leave application submitted", 201, leave=leave_to_json(leave))

    @app.route("/leaves/me", methods=["GET"], endpoint="leaves_me")
    @guards.login_required
    def my_leaves():
        history = service.list_mine(
            current_principal(),
            status=enum_arg(LeaveStatus, "status"),
            year=int_arg("year"),
        )
        return ok(
            count=len(history.requests),
            summary=history_summary_to_json(history),
            balance=balance_to_json(history.balance),
            leaves=[leave_to_json(r) for r in history.requests],
        )

    @app.route("/leaves/all", methods=["GET"], endpoint="leaves_all")
    @guards.admin_required
    def all_leaves():
        overview = service.list_all(
            current_principal(),
            status=enum_arg(LeaveStatus, "status"),
            employee_id=int_arg("employeeId"),
            start=date_arg("startDate"),
            end=date_arg("endDate"),
        )
        return ok(
            summary=overview_summary_to_json(overview),
            leaves=[leave_row_to_json(r) for r in overview.rows],
        )

    @app.route("/leaves/<int:request_id>/approve", methods=["PUT"], endpoint="leaves_approve")
    @guards.admin_required
    def approve(request_id: int):
        body = json_body()
        leave = service.approve(current_principal(), request_id, comment=body.get("comment"))
        return ok("Leave approved successfully", leave=leave_to_json(leave))

    @app.route("/leaves/<int:request_id>/reject", methods=["PUT"], endpoint="leaves_reject")
    @guards.admin_required
    def reject(request_id: int):
        body = json_body()
        leave = service.reject(current_principal(), request_id, comment=body.get("comment"))
        return ok("Leave rejected", leave=leave_to_json(leave))
