from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guard import admin_required, auth_required, current_user
from ..common.validators import optional_date, parse_date_value, require_date, require_enum, require_month, require_non_empty
from ..container import Container
from ..core.enums import AttendanceStatus


def register(app: Flask, container: Container) -> None:
    @app.route("/attendance/check-in", methods=["POST"], endpoint="check_in")
    @auth_required
    def check_in():
        record = container.attendance_service.check_in(current_user().user_id)
        return jsonify(record.to_dict()), 201

    @app.route("/attendance/check-out", methods=["POST"], endpoint="check_out")
    @auth_required
    def check_out():
        record = container.attendance_service.check_out(current_user().user_id)
        return jsonify(record.to_dict())

    @app.route("/attendance/today", methods=["GET"], endpoint="today_attendance")
    @auth_required
    def today_attendance():
        record = container.attendance_service.get_today(current_user().user_id)
        if record is None:
            return jsonify({"message": "No attendance record for today"})
        return jsonify(record.to_dict())

    @app.route("/attendance/history", methods=["GET"], endpoint="attendance_history")
    @auth_required
    def attendance_history():
        records = container.attendance_service.get_history(
            current_user().user_id,
            start_date=optional_date(request.args, "startDate"),
            end_date=optional_date(request.args, "endDate"),
        )
        return jsonify([r.to_dict() for r in records])

    @app.route("/attendance/stats/<month>", methods=["GET"], endpoint="attendance_stats")
    @auth_required
    def attendance_stats(month: str):
        stats = container.attendance_service.get_stats(current_user().user_id, require_month(month))
        return jsonify(stats)

    @app.route("/attendance/<work_date>", methods=["GET"], endpoint="attendance_by_date")
    @auth_required
    def attendance_by_date(work_date: str):
        record = container.attendance_service.get_by_date(
            current_user().user_id,
            parse_date_value(work_date, "date"),
        )
        return jsonify(record.to_dict())

    @app.route("/attendance/override", methods=["POST"], endpoint="override_attendance")
    @admin_required
    def override_attendance():
        payload = request.get_json(silent=True) or {}
        user = current_user()
        record = container.attendance_service.override_attendance(
            current_role=user.role,
            admin_user_id=user.user_id,
            employee_id=require_non_empty(payload.get("employeeId"), "employeeId"),
            work_date=require_date(payload, "date"),
            status=require_enum(payload.get("status"), AttendanceStatus, "status"),
            reason=payload.get("reason"),
        )
        return jsonify(record.to_dict())
