from __future__ import annotations

from datetime import timedelta

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import (
    admin_required,
    current_org_id,
    current_role,
    current_user_id,
    json_body,
    login_required,
    ok,
    query_date,
    to_json,
)
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .service import RECORD_LABELS


def _coordinate(data: dict, key: str):
    value = data.get(key)
    if value in (None, ""):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError("Coordenadas inválidas")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/time-records/punch", methods=["POST"], endpoint="time_records_punch")
    @login_required
    def time_records_punch():
        data = json_body()
        record = container.time_record_service.punch(
            user_id=current_user_id(),
            now=now_local(),
            latitude=_coordinate(data, "latitude"),
            longitude=_coordinate(data, "longitude"),
        )
        label = RECORD_LABELS[record.record_type]
        return ok(to_json(record), f"{label} registrada às {record.recorded_at.strftime('%H:%M')}"), 201

    @app.route("/api/time-records/today", methods=["GET"], endpoint="time_records_today")
    @login_required
    def time_records_today():
        today = now_local().date()
        records = container.time_record_service.records_on(current_user_id(), today)
        next_type = container.time_record_service.next_type_for(current_user_id(), today)
        return ok(
            {
                "records": to_json(records),
                "next_type": next_type.value,
                "next_label": RECORD_LABELS[next_type],
            }
        )

    @app.route("/api/time-records/timesheet", methods=["GET"], endpoint="time_records_timesheet")
    @login_required
    def time_records_timesheet():
        today = now_local().date()
        start = query_date("start", today.replace(day=1))
        end = query_date("end", today)
        if end < start:
            raise ValidationError("A data final deve ser igual ou posterior à inicial")
        if (end - start) > timedelta(days=366):
            raise ValidationError("Período máximo de um ano")

        user_id = current_user_id()
        requested = request.args.get("user_id", type=int)
        if requested and requested != user_id:
            if current_role() != Role.ADMIN:
                raise AuthorizationError("Sem permissão para ver o espelho de outro colaborador")
            container.employee_service.get(organization_id=current_org_id(), user_id=requested)
            user_id = requested

        rows = container.time_record_service.timesheet(user_id, start, end)
        return ok({"start": start.isoformat(), "end": end.isoformat(), "rows": rows})

    @app.route("/api/dashboard/working-now", methods=["GET"], endpoint="dashboard_working_now")
    @admin_required
    def dashboard_working_now():
        return ok(container.time_record_service.working_now(current_org_id(), now_local()))

    @app.route("/api/dashboard/alerts", methods=["GET"], endpoint="dashboard_alerts")
    @admin_required
    def dashboard_alerts():
        return ok(container.time_record_service.daily_alerts(current_org_id(), now_local()))
