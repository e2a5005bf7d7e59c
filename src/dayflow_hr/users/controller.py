from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guard import admin_required, auth_required, current_user
from ..common.validators import require_enum
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    @app.route("/users", methods=["POST"], endpoint="create_user")
    @admin_required
    def create_user():
        payload = request.get_json(silent=True) or {}
        created = container.user_service.create_user(
            current_role=current_user().role,
            email=payload.get("email"),
            password=payload.get("password"),
            first_name=payload.get("firstName"),
            last_name=payload.get("lastName"),
            role=require_enum(payload.get("role", Role.EMPLOYEE.value), Role, "role"),
        )
        return jsonify(created), 201

    @app.route("/users", methods=["GET"], endpoint="list_users")
    @admin_required
    def list_users():
        return jsonify(container.user_service.list_users(current_role=current_user().role))

    @app.route("/users/<user_id>", methods=["GET"], endpoint="get_user")
    @auth_required
    def get_user(user_id: str):
        user = current_user()
        return jsonify(
            container.user_service.get_user(user_id=user.user_id, current_role=user.role, target_user_id=user_id)
        )
