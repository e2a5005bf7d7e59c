from __future__ import annotations

from flask import Flask, jsonify

from ..auth.guard import auth_required, current_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/dashboard/summary", methods=["GET"], endpoint="dashboard_summary")
    @auth_required
    def dashboard_summary():
        return jsonify(container.dashboard_service.get_summary(current_user().user_id))

    @app.route("/dashboard/statistics", methods=["GET"], endpoint="dashboard_statistics")
    @auth_required
    def dashboard_statistics():
        return jsonify(container.dashboard_service.get_statistics(current_user().user_id))
