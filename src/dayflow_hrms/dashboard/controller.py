from __future__ import annotations

from flask import Flask

from ..auth.decorators import build_guards, current_principal
from ..common.responses import ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guards = build_guards(container.auth_service)

    @app.route("/admin/dashboard/stats", methods=["GET"], endpoint="admin_dashboard_stats")
    @guards.admin_required
    def dashboard_stats():
        stats = container.dashboard_service.stats(current_principal())
        return ok(
            stats={
                "totalEmployees": stats.total_employees,
                "presentToday": stats.present_today,
                "pendingLeaves": stats.pending_leaves,
                "onLeaveToday": stats.on_leave_today,
            }
        )
