from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.validators import require_non_empty
from ..container import Container
from .guard import auth_required, current_user


def register(app: Flask, container: Container) -> None:
    @app.route("/authentication/login", methods=["POST"], endpoint="login")
    def login():
        payload = request.get_json(silent=True) or {}
        password = payload.get("password")
        require_non_empty(password, "password")
        result = container.auth_service.login(require_non_empty(payload.get("email"), "email"), str(password))
        return jsonify(result)

    @app.route("/authentication/refresh", methods=["POST"], endpoint="refresh_token")
    def refresh_token():
        payload = request.get_json(silent=True) or {}
        result = container.auth_service.refresh(require_non_empty(payload.get("refreshToken"), "refreshToken"))
        return jsonify(result)

    @app.route("/authentication/logout", methods=["POST"], endpoint="logout")
    @auth_required
    def logout():
        payload = request.get_json(silent=True) or {}
        return jsonify(container.auth_service.logout(current_user().user_id, payload.get("refreshToken") or ""))
