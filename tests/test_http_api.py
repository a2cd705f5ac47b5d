from __future__ import annotations


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.get_json()["success"] is True
    assert res.get_json()["status"] == "ok"


def test_protected_route_without_token(client):
    res = client.get("/attendance/today")

    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Not authorized, token missing"}


def test_protected_route_with_bad_token(client):
    res = client.get("/attendance/today", headers={"Authorization": "Bearer nope"})

    assert res.status_code == 401
    assert res.get_json()["message"] == "Invalid token"


def test_admin_route_rejects_employee(client, employee, auth_header):
    res = client.get("/attendance/all", headers=auth_header(employee))

    assert res.status_code == 403
    assert res.get_json()["success"] is False


def test_login_and_me(client, employee):
    res = client.post("/auth/login", json={"email": employee.email, "password": "Secret123"})

    assert res.status_code == 200
    body = res.get_json()
    assert body["user"]["employeeId"] == "EMP0002"
    assert "password" not in str(body["user"]).lower()

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.get_json()["user"]["email"] == employee.email


def test_login_with_wrong_password(client, employee):
    res = client.post("/auth/login", json={"email": employee.email, "password": "nope"})

    assert res.status_code == 401
    assert res.get_json() == {"success": False, "message": "Invalid credentials"}


def test_check_in_twice_returns_conflict_envelope(client, employee, auth_header):
    first = client.post("/attendance/check-in", headers=auth_header(employee))
    assert first.status_code == 200
    assert first.get_json()["attendance"]["status"] == "present"

    second = client.post("/attendance/check-in", headers=auth_header(employee))
    assert second.status_code == 400
    assert second.get_json() == {"success": False, "message": "You have already checked in today"}


def test_check_out_reports_minutes(client, employee, auth_header, clock):
    client.post("/attendance/check-in", headers=auth_header(employee))
    clock.advance(hours=4)

    res = client.post("/attendance/check-out", headers=auth_header(employee))

    assert res.get_json()["attendance"]["workHours"] == 240
    assert res.get_json()["attendance"]["status"] == "half-day"


def test_leave_apply_and_approve(client, admin, employee, auth_header):
    res = client.post(
        "/leaves/apply",
        headers=auth_header(employee),
        json={"type": "paid", "startDate": "2026-03-16", "endDate": "2026-03-17", "reason": "Wedding"},
    )
    assert res.status_code == 201
    leave_id = res.get_json()["leave"]["id"]

    approved = client.put(f"/leaves/{leave_id}/approve", headers=auth_header(admin), json={})
    assert approved.status_code == 200
    assert approved.get_json()["leave"]["status"] == "approved"

    mine = client.get("/leaves/me", headers=auth_header(employee)).get_json()
    assert mine["balance"]["paid"] == 10
    assert mine["count"] == 1


def test_leave_approve_unknown_request(client, admin, auth_header):
    res = client.put("/leaves/999/approve", headers=auth_header(admin), json={})

    assert res.status_code == 404
    assert res.get_json()["message"] == "Leave request not found"


def test_invalid_query_arg_is_a_validation_error(client, admin, auth_header):
    res = client.get("/attendance/all?status=sleeping", headers=auth_header(admin))

    assert res.status_code == 400
    assert res.get_json()["success"] is False


def test_unknown_route_uses_envelope(client):
    res = client.get("/nowhere")

    assert res.status_code == 404
    assert res.get_json()["success"] is False


def test_dashboard_stats(client, admin, employee, auth_header):
    res = client.get("/admin/dashboard/stats", headers=auth_header(admin))

    assert res.status_code == 200
    assert res.get_json()["stats"]["totalEmployees"] == 2


def test_register_ignores_requested_role(client, employees_repo):
    res = client.post(
        "/auth/register",
        json={"name": "Mallory", "email": "mallory@example.com", "password": "Passw0rdX", "role": "admin"},
    )

    assert res.status_code == 201
    assert employees_repo.get_by_email("mallory@example.com").role.value == "employee"


def test_non_object_json_body_is_rejected(client, employee, auth_header):
    res = client.post("/leaves/apply", headers=auth_header(employee), json=["paid", "2026-03-16"])

    assert res.status_code == 400
    assert res.get_json() == {"success": False, "message": "Request body must be a JSON object"}


def test_create_employee_with_malformed_joining_date(client, admin, auth_header):
    res = client.post(
        "/employees",
        headers=auth_header(admin),
        json={
            "name": "Dan",
            "email": "dan@example.com",
            "password": "Passw0rdX",
            "joiningDate": "03/10/2026",
        },
    )

    assert res.status_code == 400
    assert res.get_json() == {"success": False, "message": "joiningDate must be a YYYY-MM-DD date"}


def test_login_with_numeric_password_is_a_validation_error(client, employee):
    res = client.post("/auth/login", json={"email": employee.email, "password": 123456})

    assert res.status_code == 400
    assert res.get_json()["success"] is False
