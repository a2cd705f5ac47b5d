from __future__ import annotations

from datetime import timedelta

import pytest

from dayflow_hrms.core.enums import AttendanceStatus
from dayflow_hrms.core.exceptions import AuthorizationError
from dayflow_hrms.dashboard.service import DashboardStats


def test_stats_require_admin(container, employee_principal):
    with pytest.raises(AuthorizationError):
        container.dashboard_service.stats(employee_principal)


def test_stats_count_today(container, admin, admin_principal, employee, employee_principal, attendance_repo, clock):
    today = clock.now.date()
    attendance_repo.add(employee_id=employee.employee_id, work_date=today, status=AttendanceStatus.PRESENT)
    attendance_repo.add(employee_id=admin.employee_id, work_date=today, status=AttendanceStatus.HALF_DAY)
    attendance_repo.add(employee_id=admin.employee_id, work_date=today - timedelta(days=1), status=AttendanceStatus.PRESENT)

    leaves = container.leave_service
    tomorrow = leaves.apply(employee_principal, leave_type="paid", start="2026-03-11", end="2026-03-12", reason="Trip")
    leaves.apply(employee_principal, leave_type="sick", start="2026-03-20", end="2026-03-20", reason="Checkup")
    leaves.approve(admin_principal, tomorrow.request_id)

    stats = container.dashboard_service.stats(admin_principal)
    assert stats == DashboardStats(total_employees=2, present_today=1, pending_leaves=1, on_leave_today=0)

    clock.now = clock.now.replace(day=11)
    assert container.dashboard_service.stats(admin_principal).on_leave_today == 1
