from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local
from ..common.formatting import format_minutes
from ..common.web import (
    admin_required,
    current_org_id,
    current_role,
    current_user_id,
    json_body,
    login_required,
    ok,
    query_month,
    to_json,
)
from ..container import Container
from .balance_service import closing_period


def register(app: Flask, container: Container) -> None:
    @app.route("/api/payroll-settings", methods=["GET"], endpoint="payroll_settings_get")
    @admin_required
    def payroll_settings_get():
        return ok(to_json(container.payroll_settings_service.get(current_org_id())))

    @app.route("/api/payroll-settings", methods=["PUT"], endpoint="payroll_settings_save")
    @admin_required
    def payroll_settings_save():
        settings = container.payroll_settings_service.save(
            current_role=current_role(), organization_id=current_org_id(), changes=json_body()
        )
        return ok(to_json(settings), "Configurações salvas")

    @app.route("/api/balance/me", methods=["GET"], endpoint="balance_me")
    @login_required
    def balance_me():
        balance = container.balance_service.get_balance(current_user_id())
        return ok({**to_json(balance), "formatted": format_minutes(balance.balance_minutes, signed=True)})

    @app.route("/api/balance/<int:user_id>", methods=["GET"], endpoint="balance_breakdown")
    @admin_required
    def balance_breakdown(user_id: int):
        user = container.employee_service.get(organization_id=current_org_id(), user_id=user_id)
        month = query_month(default=now_local().date())
        settings = container.payroll_settings_service.get(current_org_id())
        start, end = closing_period(month, settings.cycle_start_day)
        result = container.balance_service.breakdown(user, start, end)
        return ok({"start": start.isoformat(), "end": end.isoformat(), **to_json(result)})

    @app.route("/api/balance/recalculate", methods=["POST"], endpoint="balance_recalculate")
    @admin_required
    def balance_recalculate():
        month = query_month(default=now_local().date())
        results = container.balance_service.recalculate_month(
            organization_id=current_org_id(), reference_month=month, now=now_local()
        )
        return ok({"recalculated": len(results)}, "Saldos recalculados")
