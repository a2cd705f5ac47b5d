from __future__ import annotations

from flask import Flask, request

from ..auth.decorators import build_guards, current_principal
from ..common.query_args import json_body
from ..common.responses import ok
from ..container import Container
from .serializers import employee_to_json


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)
    service = container.employee_service

    def _with_balance(employee):
        return employee_to_json(employee, service.balance(employee.employee_id))

    @app.route("/employees", methods=["GET"], endpoint="employees_list")
    @guards.admin_required
    def list_employees():
        employees = service.list(
            current_principal(),
            status=request.args.get("status"),
            department=request.args.get("department"),
            search=request.args.get("search"),
        )
        return ok(count=len(employees), data=[employee_to_json(e) for e in employees])

    @app.route("/employees/me", methods=["GET"], endpoint="employees_me")
    @guards.login_required
    def my_profile():
        principal = current_principal()
        return ok(data=_with_balance(service.get(principal, principal.employee_id)))

    @app.route("/employees/<int:employee_id>", methods=["GET"], endpoint="employees_get")
    @guards.login_required
    def get_employee(employee_id: int):
        return ok(data=_with_balance(service.get(current_principal(), employee_id)))

    @app.route("/employees", methods=["POST"], endpoint="employees_create")
    @guards.admin_required
    def create_employee():
        body = json_body()
        principal = current_principal()
        employee_id = service.create(
            principal,
            name=body.get("name"),
            email=body.get("email"),
            password=body.get("password"),
            department=body.get("department"),
            position=body.get("position"),
            joining_date=body.get("joiningDate"),
            employment_type=body.get("employmentType"),
            salary=body.get("salary"),
            image=body.get("image"),
            role=body.get("role"),
        )
        employee = service.get(principal, employee_id)
        return ok("Employee created successfully", 201, data=_with_balance(employee))

    @app.route("/employees/<int:employee_id>", methods=["PUT"], endpoint="employees_update")
    @guards.login_required
    def update_employee(employee_id: int):
        body = json_body()
        employee = service.update(current_principal(), employee_id, body)
        return ok("Profile updated successfully", data=_with_balance(employee))

    @app.route("/employees/<int:employee_id>", methods=["DELETE"], endpoint="employees_delete")
    @guards.admin_required
    def delete_employee(employee_id: int):
        service.delete(current_principal(), employee_id)
        return ok("Employee deleted successfully")
