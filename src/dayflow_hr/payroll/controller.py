from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.guard import admin_required, auth_required, current_user
from ..common.validators import optional_amount, optional_date, require_amount, require_date, require_month
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/payroll/me", methods=["GET"], endpoint="my_payroll")
    @auth_required
    def my_payroll():
        payrolls = container.payroll_service.get_my_payroll(current_user().user_id)
        return jsonify([p.to_dict() for p in payrolls])

    @app.route("/payroll/me/<month>", methods=["GET"], endpoint="my_payroll_for_month")
    @auth_required
    def my_payroll_for_month(month: str):
        payroll = container.payroll_service.get_payroll_by_month(current_user().user_id, require_month(month))
        return jsonify(payroll.to_dict())

    @app.route("/payroll", methods=["GET"], endpoint="list_payrolls")
    @admin_required
    def list_payrolls():
        month = request.args.get("month")
        return jsonify(
            container.payroll_service.list_payrolls(
                current_role=current_user().role,
                month=require_month(month) if month else None,
            )
        )

    @app.route("/payroll/employee/<employee_id>", methods=["GET"], endpoint="employee_payroll")
    @admin_required
    def employee_payroll(employee_id: str):
        payrolls = container.payroll_service.get_employee_payroll(
            current_role=current_user().role,
            employee_id=employee_id,
        )
        return jsonify([p.to_dict() for p in payrolls])

    @app.route("/payroll/<employee_id>", methods=["POST"], endpoint="create_payroll")
    @admin_required
    def create_payroll(employee_id: str):
        payload = request.get_json(silent=True) or {}
        user = current_user()
        payroll = container.payroll_service.create_payroll(
            current_role=user.role,
            admin_user_id=user.user_id,
            employee_id=employee_id,
            base_salary=require_amount(payload.get("baseSalary"), "baseSalary"),
            allowances=require_amount(payload.get("allowances"), "allowances", default=0),
            deductions=require_amount(payload.get("deductions"), "deductions", default=0),
            effective_date=require_date(payload, "effectiveDate"),
        )
        return jsonify(payroll.to_dict()), 201

    @app.route("/payroll/<payroll_id>", methods=["PUT"], endpoint="update_payroll")
    @admin_required
    def update_payroll(payroll_id: str):
        payload = request.get_json(silent=True) or {}
        user = current_user()
        payroll = container.payroll_service.update_payroll(
            current_role=user.role,
            admin_user_id=user.user_id,
            payroll_id=payroll_id,
            base_salary=optional_amount(payload, "baseSalary"),
            allowances=optional_amount(payload, "allowances"),
            deductions=optional_amount(payload, "deductions"),
            effective_date=optional_date(payload, "effectiveDate"),
        )
        return jsonify(payroll.to_dict())
