from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guard import admin_required, auth_required, current_user
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/employees/me", methods=["GET"], endpoint="my_profile")
    @auth_required
    def my_profile():
        return jsonify(container.employee_service.get_profile(current_user().user_id))

    @app.route("/employees/me", methods=["PUT"], endpoint="update_my_profile")
    @auth_required
    def update_my_profile():
        payload = request.get_json(silent=True) or {}
        return jsonify(container.employee_service.update_my_profile(current_user().user_id, payload))

    @app.route("/employees", methods=["GET"], endpoint="list_employees")
    @admin_required
    def list_employees():
        return jsonify(container.employee_service.list_employees(current_role=current_user().role))

    @app.route("/employees/<employee_id>", methods=["GET"], endpoint="get_employee")
    @auth_required
    def get_employee(employee_id: str):
        user = current_user()
        return jsonify(
            container.employee_service.get_employee(
                user_id=user.user_id,
                current_role=user.role,
                employee_id=employee_id,
            )
        )

    @app.route("/employees/<employee_id>", methods=["PUT"], endpoint="update_employee")
    @auth_required
    def update_employee(employee_id: str):
        payload = request.get_json(silent=True) or {}
        user = current_user()
        return jsonify(
            container.employee_service.update_employee(
                user_id=user.user_id,
                current_role=user.role,
                employee_id=employee_id,
                payload=payload,
            )
        )
