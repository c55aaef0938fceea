from __future__ import annotations

from datetime import time
from typing import Optional

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_hhmm
from ..common.web import (
    admin_required,
    body_date,
    current_org_id,
    current_role,
    current_user_id,
    json_body,
    ok,
    to_json,
)
from ..container import Container
from ..core.enums import ScheduleAdjustmentType, ScheduleType
from ..core.exceptions import ValidationError
from .model import WorkSchedule


def _time_field(data: dict, key: str) -> Optional[time]:
    value = (data.get(key) or "").strip()
    if not value:
        return None
    try:
        return parse_hhmm(value)
    except ValueError:
        raise ValidationError(f"Horário inválido em {key} (HH:MM)")


def _optional_int(data: dict, key: str) -> Optional[int]:
    value = data.get(key)
    if value in (None, ""):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Valor inválido em {key}")


def _schedule_from(data: dict, *, organization_id: int, schedule_id: int = 0) -> WorkSchedule:
    try:
        schedule_type = ScheduleType(data.get("schedule_type") or ScheduleType.FIXED.value)
        weekday_hours = tuple(float(h or 0) for h in (data.get("weekday_hours") or [0] * 7))
    except (TypeError, ValueError):
        raise ValidationError("Dados da jornada inválidos")
    return WorkSchedule(
        schedule_id=schedule_id,
        organization_id=organization_id,
        name=data.get("name") or "",
        schedule_type=schedule_type,
        start_time=_time_field(data, "start_time"),
        end_time=_time_field(data, "end_time"),
        break_start=_time_field(data, "break_start"),
        break_end=_time_field(data, "break_end"),
        break_duration_minutes=_optional_int(data, "break_duration_minutes") or 0,
        weekday_hours=weekday_hours,
        shift_work_hours=_optional_int(data, "shift_work_hours"),
        shift_rest_hours=_optional_int(data, "shift_rest_hours"),
    )


def register(app: Flask, container: Container) -> None:
    @app.route("/api/schedules", methods=["GET"], endpoint="schedules_list")
    @admin_required
    def schedules_list():
        items = container.schedule_service.list_with_employee_counts(current_org_id())
        return ok([{**to_json(i["schedule"]), "employee_count": i["employee_count"]} for i in items])

    @app.route("/api/schedules", methods=["POST"], endpoint="schedules_create")
    @admin_required
    def schedules_create():
        schedule = _schedule_from(json_body(), organization_id=current_org_id())
        schedule_id = container.schedule_service.save(current_role=current_role(), schedule=schedule)
        return ok({"schedule_id": schedule_id}, "Jornada cadastrada"), 201

    @app.route("/api/schedules/<int:schedule_id>", methods=["PUT"], endpoint="schedules_update")
    @admin_required
    def schedules_update(schedule_id: int):
        schedule = _schedule_from(json_body(), organization_id=current_org_id(), schedule_id=schedule_id)
        container.schedule_service.save(current_role=current_role(), schedule=schedule)
        return ok(message="Jornada atualizada")

    @app.route("/api/schedules/<int:schedule_id>", methods=["DELETE"], endpoint="schedules_delete")
    @admin_required
    def schedules_delete(schedule_id: int):
        container.schedule_service.delete(
            current_role=current_role(), organization_id=current_org_id(), schedule_id=schedule_id
        )
        return ok(message="Jornada excluída")

    @app.route("/api/schedule-adjustments", methods=["GET"], endpoint="schedule_adjustments_list")
    @admin_required
    def schedule_adjustments_list():
        active_only = request.args.get("active") == "1"
        items = container.schedule_adjustment_service.list_for_organization(
            current_org_id(), active_on=now_local().date() if active_only else None
        )
        return ok(to_json(list(items)))

    @app.route("/api/schedule-adjustments", methods=["POST"], endpoint="schedule_adjustments_create")
    @admin_required
    def schedule_adjustments_create():
        data = json_body()
        try:
            adjustment_type = ScheduleAdjustmentType(data.get("adjustment_type"))
        except ValueError:
            raise ValidationError("Tipo de ajuste inválido")
        user_id = _optional_int(data, "user_id")
        if user_id is None:
            raise ValidationError("Selecione o colaborador")
        adjustment_id = container.schedule_adjustment_service.create(
            current_role=current_role(),
            organization_id=current_org_id(),
            admin_user_id=current_user_id(),
            user_id=user_id,
            adjustment_type=adjustment_type,
            start_date=body_date(data, "start_date"),
            end_date=body_date(data, "end_date"),
            custom_start_time=_time_field(data, "custom_start_time"),
            custom_end_time=_time_field(data, "custom_end_time"),
            custom_break_start=_time_field(data, "custom_break_start"),
            custom_break_end=_time_field(data, "custom_break_end"),
            overtime_max_minutes=_optional_int(data, "overtime_max_minutes"),
            reason=data.get("reason"),
        )
        return ok({"adjustment_id": adjustment_id}, "Ajuste de jornada cadastrado"), 201

    @app.route("/api/schedule-adjustments/<int:adjustment_id>", methods=["DELETE"], endpoint="schedule_adjustments_delete")
    @admin_required
    def schedule_adjustments_delete(adjustment_id: int):
        container.schedule_adjustment_service.delete(
            current_role=current_role(), organization_id=current_org_id(), adjustment_id=adjustment_id
        )
        return ok(message="Ajuste excluído")
