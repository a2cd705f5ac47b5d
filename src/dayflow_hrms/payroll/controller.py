from __future__ import annotations

from flask import Flask

from ..auth.decorators import build_guards, current_principal
from ..common.query_args import enum_arg, int_arg, json_body
from ..common.responses import ok
from ..container import Container
from ..core.constants import DEFAULT_PAYROLL_LIMIT
from ..core.enums import PayrollStatus
from .serializers import history_totals_to_json, overview_summary_to_json, payroll_row_to_json, payroll_to_json


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    service = container.payroll_service

    @app.route("/payroll/me", methods=["GET"], endpoint="payroll_me")
    @guards.login_required
    def my_payroll():
        history = service.list_mine(
            current_principal(),
            year=int_arg("year"),
            limit=int_arg("limit") or DEFAULT_PAYROLL_LIMIT,
        )
        return ok(
            count=len(history.records),
            totals=history_totals_to_json(history),
            payroll=[payroll_to_json(p) for p in history.records],
        )

    @app.route("/payroll/all", methods=["GET"], endpoint="payroll_all")
    @guards.admin_required
    def all_payroll():
        overview = service.list_all(
            current_principal(),
            month=int_arg("month"),
            year=int_arg("year"),
            status=enum_arg(PayrollStatus, "status"),
            employee_id=int_arg("employeeId"),
        )
        return ok(
            summary=overview_summary_to_json(overview),
            payroll=[payroll_row_to_json(r) for r in overview.rows],
        )

    @app.route("/payroll", methods=["POST"], endpoint="payroll_create")
    @guards.admin_required
    def create_payroll():
        record = service.create(current_principal(), json_body())
        return ok("Payroll created successfully", 201, payroll=payroll_to_json(record))

    @app.route("/payroll/<int:payroll_id>", methods=["PUT"], endpoint="payroll_update")
    @guards.admin_required
    def update_payroll(payroll_id: int):
        record = service.update(current_principal(), payroll_id, json_body())
        return ok("Payroll updated successfully", payroll=payroll_to_json(record))

    @app.route("/payroll/<int:payroll_id>/pay", methods=["PUT"], endpoint="payroll_pay")
    @guards.admin_required
    def mark_paid(payroll_id: int):
        record = service.mark_paid(current_principal(), payroll_id)
        return ok("Payroll marked as paid", payroll=payroll_to_json(record))
