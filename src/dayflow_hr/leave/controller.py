from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guard import admin_required, auth_required, current_user
from ..common.validators import require_date, require_enum
from ..container import Container
from ..core.enums import LeaveType


def register(app: Flask, container: Container) -> None:
    @app.route("/leave/apply", methods=["POST"], endpoint="apply_leave")
    @auth_required
    def apply_leave():
        payload = request.get_json(silent=True) or {}
        leave = container.leave_service.apply_leave(
            user_id=current_user().user_id,
            leave_type=require_enum(payload.get("leaveType"), LeaveType, "leaveType"),
            start_date=require_date(payload, "startDate"),
            end_date=require_date(payload, "endDate"),
            reason=payload.get("reason"),
        )
        return jsonify(leave.to_dict()), 201

    @app.route("/leave/my-requests", methods=["GET"], endpoint="my_leaves")
    @auth_required
    def my_leaves():
        leaves = container.leave_service.get_my_leaves(current_user().user_id)
        return jsonify([leave.to_dict() for leave in leaves])

    @app.route("/leave/pending", methods=["GET"], endpoint="pending_leaves")
    @admin_required
    def pending_leaves():
        return jsonify(container.leave_service.get_pending_leaves(current_role=current_user().role))

    @app.route("/leave/<leave_id>", methods=["GET"], endpoint="get_leave")
    @auth_required
    def get_leave(leave_id: str):
        user = current_user()
        return jsonify(container.leave_service.get_leave(user_id=user.user_id, current_role=user.role, leave_id=leave_id))

    @app.route("/leave/<leave_id>/approve", methods=["PUT"], endpoint="approve_leave")
    @admin_required
    def approve_leave(leave_id: str):
        payload = request.get_json(silent=True) or {}
        user = current_user()
        leave = container.leave_service.approve_leave(
            current_role=user.role,
            admin_user_id=user.user_id,
            leave_id=leave_id,
            comments=payload.get("comments", ""),
        )
        return jsonify(leave.to_dict())

    @app.route("/leave/<leave_id>/reject", methods=["PUT"], endpoint="reject_leave")
    @admin_required
    def reject_leave(leave_id: str):
        payload = request.get_json(silent=True) or {}
        user = current_user()
        leave = container.leave_service.reject_leave(
            current_role=user.role,
            admin_user_id=user.user_id,
            leave_id=leave_id,
            comments=payload.get("reason") or payload.get("comments", ""),
        )
        return jsonify(leave.to_dict())
