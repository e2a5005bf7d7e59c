from __future__ import annotations

from flask import Flask, jsonify

from ..auth.guard import auth_required, current_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/notifications", methods=["GET"], endpoint="notifications")
    @auth_required
    def notifications():
        feed = container.notification_service.get_notifications(current_user().user_id)
        return jsonify(feed.to_dict())
