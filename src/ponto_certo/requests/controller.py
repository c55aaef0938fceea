from __future__ import annotations

from datetime import datetime

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.web import (
    admin_required,
    body_date,
    current_org_id,
    current_role,
    current_user_id,
    json_body,
    login_required,
    ok,
    optional_body_date,
    to_json,
)
from ..container import Container
from ..core.enums import AdjustmentRequestType, RequestStatus, TimeRecordType, VacationType
from ..core.exceptions import ValidationError


def _status_arg():
    value = request.args.get("status")
    if not value:
        return None
    try:
        return RequestStatus(value)
    except ValueError:
        raise ValidationError("Status inválido")


def _requested_time(data: dict):
    value = (data.get("requested_time") or "").strip()
    if not value:
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError("Horário solicitado inválido (AAAA-MM-DDTHH:MM)")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/adjustment-requests", methods=["POST"], endpoint="adjustment_requests_create")
    @login_required
    def adjustment_requests_create():
        data = json_body()
        try:
            request_type = AdjustmentRequestType(data.get("request_type") or AdjustmentRequestType.ADJUSTMENT.value)
            record_type = TimeRecordType(data["record_type"]) if data.get("record_type") else None
        except ValueError:
            raise ValidationError("Tipo de solicitação inválido")
        request_id = container.adjustment_request_service.create(
            user_id=current_user_id(),
            request_type=request_type,
            reason=data.get("reason") or "",
            now=now_local(),
            record_type=record_type,
            requested_time=_requested_time(data),
            absence_type=data.get("absence_type"),
            absence_start=optional_body_date(data, "absence_start"),
            absence_end=optional_body_date(data, "absence_end"),
            attachment_url=data.get("attachment_url"),
        )
        return ok({"request_id": request_id}, "Solicitação enviada"), 201

    @app.route("/api/adjustment-requests/mine", methods=["GET"], endpoint="adjustment_requests_mine")
    @login_required
    def adjustment_requests_mine():
        items = container.adjustment_request_service.list_mine(organization_id=current_org_id(), user_id=current_user_id())
        return ok(to_json(list(items)))

    @app.route("/api/adjustment-requests", methods=["GET"], endpoint="adjustment_requests_list")
    @admin_required
    def adjustment_requests_list():
        items = container.adjustment_request_service.list_for_organization(
            current_role=current_role(), organization_id=current_org_id(), status=_status_arg()
        )
        return ok(to_json(list(items)))

    @app.route("/api/adjustment-requests/<int:request_id>/approve", methods=["POST"], endpoint="adjustment_requests_approve")
    @admin_required
    def adjustment_requests_approve(request_id: int):
        container.adjustment_request_service.approve(
            current_role=current_role(),
            organization_id=current_org_id(),
            admin_user_id=current_user_id(),
            request_id=request_id,
            now=now_local(),
        )
        return ok(message="Solicitação aprovada")

    @app.route("/api/adjustment-requests/<int:request_id>/reject", methods=["POST"], endpoint="adjustment_requests_reject")
    @admin_required
    def adjustment_requests_reject(request_id: int):
        container.adjustment_request_service.reject(
            current_role=current_role(),
            organization_id=current_org_id(),
            admin_user_id=current_user_id(),
            request_id=request_id,
            now=now_local(),
        )
        return ok(message="Solicitação rejeitada")

    @app.route("/api/vacations", methods=["POST"], endpoint="vacations_request")
    @login_required
    def vacations_request():
        data = json_body()
        request_id = container.vacation_service.request(
            user_id=current_user_id(),
            start_date=body_date(data, "start_date"),
            end_date=body_date(data, "end_date"),
            today=now_local().date(),
            sell_days=int(data.get("sell_days") or 0),
            reason=data.get("reason"),
        )
        return ok({"request_id": request_id}, "Solicitação de férias enviada"), 201

    @app.route("/api/vacations/mine", methods=["GET"], endpoint="vacations_mine")
    @login_required
    def vacations_mine():
        today = now_local().date()
        periods = container.vacation_service.periods_for(current_user_id(), today)
        return ok(
            {
                "requests": to_json(list(container.vacation_service.list_mine(current_user_id()))),
                "periods": [
                    {
                        "number": p.number,
                        "start": p.start.isoformat(),
                        "end": p.end.isoformat(),
                        "concessive_end": p.concessive_end.isoformat(),
                        "used_days": p.used_days,
                        "sold_days": p.sold_days,
                        "remaining_days": p.remaining_days,
                        "complete": p.is_complete(today),
                        "overdue": p.is_overdue(today),
                    }
                    for p in periods
                ],
            }
        )

    @app.route("/api/vacations", methods=["GET"], endpoint="vacations_list")
    @admin_required
    def vacations_list():
        items = container.vacation_service.list_for_organization(
            current_role=current_role(), organization_id=current_org_id(), status=_status_arg()
        )
        return ok(to_json(list(items)))

    @app.route("/api/vacations/register", methods=["POST"], endpoint="vacations_register")
    @admin_required
    def vacations_register():
        data = json_body()
        try:
            vacation_type = VacationType(data.get("vacation_type") or VacationType.INDIVIDUAL.value)
        except ValueError:
            raise ValidationError("Tipo de férias inválido")
        ids = container.vacation_service.register(
            current_role=current_role(),
            organization_id=current_org_id(),
            admin_user_id=current_user_id(),
            vacation_type=vacation_type,
            start_date=body_date(data, "start_date"),
            end_date=body_date(data, "end_date"),
            now=now_local(),
            user_id=int(data["user_id"]) if data.get("user_id") else None,
            reason=data.get("reason"),
        )
        return ok({"request_ids": ids}, f"Férias lançadas para {len(ids)} colaborador(es)"), 201

    @app.route("/api/vacations/<int:request_id>/<action>", methods=["POST"], endpoint="vacations_decide")
    @admin_required
    def vacations_decide(request_id: int, action: str):
        handlers = {
            "approve": (container.vacation_service.approve, "Férias aprovadas"),
            "reject": (container.vacation_service.reject, "Férias rejeitadas"),
            "cancel": (container.vacation_service.cancel, "Férias canceladas"),
        }
        if action not in handlers:
            raise ValidationError("Ação inválida")
        handler, message = handlers[action]
        handler(
            current_role=current_role(),
            organization_id=current_org_id(),
            admin_user_id=current_user_id(),
            request_id=request_id,
            now=now_local(),
        )
        return ok(message=message)
