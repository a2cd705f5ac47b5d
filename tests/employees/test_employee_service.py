from __future__ import annotations

from datetime import date

import pytest
from werkzeug.security import check_password_hash

from dayflow_hrms.core.enums import EmployeeStatus, EmploymentType, LeaveType, Role
from dayflow_hrms.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from dayflow_hrms.employees.service import EmployeeService


@pytest.fixture
def service(container) -> EmployeeService:
    return container.employee_service


def test_list_is_admin_only(service, employee_principal):
    with pytest.raises(AuthorizationError):
        service.list(employee_principal)


def test_list_filters(service, admin_principal, employee, employees_repo):
    employees_repo.add(name="Dana Designer", email="dana@example.com", department="Design", status="inactive")

    assert {e.full_name for e in service.list(admin_principal)} == {"Alice Admin", "Bob Builder", "Dana Designer"}
    assert [e.full_name for e in service.list(admin_principal, department="Design")] == ["Dana Designer"]
    assert [e.full_name for e in service.list(admin_principal, status="inactive")] == ["Dana Designer"]
    assert [e.full_name for e in service.list(admin_principal, search="emp0002")] == ["Bob Builder"]


def test_list_rejects_unknown_status(service, admin_principal):
    with pytest.raises(ValidationError):
        service.list(admin_principal, status="retired")


def test_employee_can_only_view_self(service, employee, employee_principal, admin):
    assert service.get(employee_principal, employee.employee_id).email == "bob@example.com"

    with pytest.raises(AuthorizationError):
        service.get(employee_principal, admin.employee_id)


def test_admin_gets_404_for_unknown_employee(service, admin_principal):
    with pytest.raises(NotFoundError):
        service.get(admin_principal, 999)


def test_create_assigns_code_and_defaults(service, admin_principal, employee, employees_repo):
    employee_id = service.create(
        admin_principal,
        name="Erin Engineer",
        email="Erin@Example.com",
        password="abcdef",
        department="Engineering",
        joining_date="2026-01-05",
        salary={"basic": "50000", "hra": 10000},
    )

    created = employees_repo.get_by_id(employee_id)
    assert created.employee_code == "EMP0003"
    assert created.email == "erin@example.com"
    assert created.role == Role.EMPLOYEE
    assert created.is_verified
    assert created.status == EmployeeStatus.ACTIVE
    assert created.employment_type == EmploymentType.FULL_TIME
    assert created.joining_date == date(2026, 1, 5)
    assert created.salary.basic == 50000.0
    assert created.salary.hra == 10000.0
    assert check_password_hash(created.password_hash, "abcdef")
    assert employees_repo.get_balance(employee_id) == {LeaveType.PAID: 12, LeaveType.SICK: 6, LeaveType.UNPAID: 0}


def test_create_validation(service, admin_principal, employee):
    with pytest.raises(ValidationError, match="Name, email, and password are required"):
        service.create(admin_principal, name="", email="x@example.com", password="abcdef")
    with pytest.raises(ValidationError, match="at least 6"):
        service.create(admin_principal, name="X", email="x@example.com", password="abc")
    with pytest.raises(ConflictError, match="already exists"):
        service.create(admin_principal, name="Bob", email=employee.email, password="abcdef")
    with pytest.raises(ValidationError):
        service.create(admin_principal, name="X", email="x@example.com", password="abcdef", salary={"basic": "lots"})


def test_create_rejects_malformed_input(service, admin_principal):
    with pytest.raises(ValidationError, match="joiningDate must be a YYYY-MM-DD date"):
        service.create(admin_principal, name="X", email="x@example.com", password="abcdef", joining_date="03/10/2026")
    with pytest.raises(ValidationError, match="at least 6"):
        service.create(admin_principal, name="X", email="x@example.com", password=123456)


def test_create_requires_admin(service, employee_principal):
    with pytest.raises(AuthorizationError):
        service.create(employee_principal, name="X", email="x@example.com", password="abcdef")


def test_employee_updates_only_personal_fields(service, employee, employee_principal):
    updated = service.update(
        employee_principal,
        employee.employee_id,
        {"phone": "555-0100", "emergencyContact": "Mum", "department": "Sales", "salary": {"basic": 1}},
    )

    assert updated.phone == "555-0100"
    assert updated.emergency_contact == "Mum"
    assert updated.department == "Engineering"
    assert updated.salary.basic == 0.0


def test_employee_update_without_editable_fields(service, employee, employee_principal):
    with pytest.raises(ValidationError, match="No valid fields to update"):
        service.update(employee_principal, employee.employee_id, {"role": "admin"})


def test_employee_cannot_update_others(service, admin, employee_principal):
    with pytest.raises(AuthorizationError):
        service.update(employee_principal, admin.employee_id, {"phone": "1"})


def test_admin_updates_work_fields_and_balance(service, admin_principal, employee, employees_repo):
    updated = service.update(
        admin_principal,
        employee.employee_id,
        {
            "position": "Lead",
            "status": "inactive",
            "employmentType": "contract",
            "salary": {"basic": 70000},
            "leaveBalance": {"paid": 20},
        },
    )

    assert updated.position == "Lead"
    assert updated.status == EmployeeStatus.INACTIVE
    assert updated.employment_type == EmploymentType.CONTRACT
    assert updated.salary.basic == 70000.0
    assert employees_repo.get_balance(employee.employee_id)[LeaveType.PAID] == 20
    assert employees_repo.get_balance(employee.employee_id)[LeaveType.SICK] == 6


def test_admin_update_unknown_employee(service, admin_principal):
    with pytest.raises(NotFoundError):
        service.update(admin_principal, 999, {"position": "Lead"})


def test_delete(service, admin_principal, employee, employee_principal, employees_repo):
    with pytest.raises(AuthorizationError):
        service.delete(employee_principal, employee.employee_id)

    service.delete(admin_principal, employee.employee_id)

    assert employees_repo.get_by_id(employee.employee_id) is None
    with pytest.raises(NotFoundError):
        service.delete(admin_principal, employee.employee_id)


def test_admin_update_rejects_malformed_joining_date(service, admin_principal, employee):
    with pytest.raises(ValidationError, match="joiningDate"):
        service.update(admin_principal, employee.employee_id, {"joiningDate": "bad"})


def test_admin_can_clear_joining_date(service, admin_principal, employee):
    updated = service.update(admin_principal, employee.employee_id, {"joiningDate": ""})

    assert updated.joining_date is None


def test_delete_refuses_employee_with_history(
    container, service, admin_principal, employee, employee_principal, employees_repo
):
    container.attendance_service.check_in(employee_principal, ip="10.0.0.5")

    with pytest.raises(ConflictError, match="set status to inactive"):
        service.delete(admin_principal, employee.employee_id)

    assert employees_repo.get_by_id(employee.employee_id) is not None

    service.update(admin_principal, employee.employee_id, {"status": "inactive"})
    assert employees_repo.get_by_id(employee.employee_id).status == EmployeeStatus.INACTIVE


def test_delete_refuses_employee_with_leave_history(container, service, admin_principal, employee, employee_principal):
    container.leave_service.apply(
        employee_principal, leave_type="unpaid", start="2026-03-16", end="2026-03-16", reason="Errand"
    )

    with pytest.raises(ConflictError):
        service.delete(admin_principal, employee.employee_id)
