from __future__ import annotations

from datetime import date

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import admin_required, body_date, current_org_id, current_role, json_body, login_required, ok, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/holidays", methods=["GET"], endpoint="holidays_list")
    @login_required
    def holidays_list():
        year = request.args.get("year", type=int) or now_local().year
        items = container.holiday_service.list_between(current_org_id(), date(year, 1, 1), date(year, 12, 31))
        return ok(to_json(items))

    @app.route("/api/holidays", methods=["POST"], endpoint="holidays_create")
    @admin_required
    def holidays_create():
        data = json_body()
        holiday_id = container.holiday_service.add(
            current_role=current_role(),
            organization_id=current_org_id(),
            holiday_date=body_date(data, "holiday_date"),
            name=data.get("name") or "",
            holiday_type=data.get("holiday_type") or "custom",
        )
        return ok({"holiday_id": holiday_id}, "Feriado cadastrado"), 201

    @app.route("/api/holidays/<int:holiday_id>", methods=["DELETE"], endpoint="holidays_delete")
    @admin_required
    def holidays_delete(holiday_id: int):
        container.holiday_service.delete(current_role=current_role(), organization_id=current_org_id(), holiday_id=holiday_id)
        return ok(message="Feriado excluído")
