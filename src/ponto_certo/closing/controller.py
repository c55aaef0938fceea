from __future__ import annotations

from flask import Flask

from ..common.datetime_utils import now_local, parse_month
from ..common.formatting import format_minutes
from ..common.web import admin_required, current_org_id, current_role, current_user_id, json_body, ok, query_month, to_json
from ..container import Container
from ..core.enums import OvertimeDestination
from ..core.exceptions import ValidationError
from .model import ClosingRow


def _row_json(row: ClosingRow) -> dict:
    d = row.decision
    return {
        "user_id": row.user_id,
        "full_name": row.full_name,
        "sector": row.sector,
        "balance_minutes": row.balance_minutes,
        "balance": format_minutes(row.balance_minutes, signed=True),
        "persisted": row.persisted,
        **to_json(d),
    }


def _body_month(data: dict):
    value = (data.get("reference_month") or "").strip()
    if not value:
        raise ValidationError("Informe o mês de referência")
    try:
        return parse_month(value)
    except ValueError:
        raise ValidationError("Mês inválido (AAAA-MM)")


def _body_destination(data: dict) -> OvertimeDestination:
    try:
        return OvertimeDestination(data.get("destination"))
    except ValueError:
        raise ValidationError("Destino inválido")


def _body_user_ids(data: dict) -> list[int]:
    try:
        return [int(u) for u in data.get("user_ids") or []]
    except (TypeError, ValueError):
        raise ValidationError("Lista de colaboradores inválida")


def register(app: Flask, container: Container) -> None:
    @app.route("/api/closing", methods=["GET"], endpoint="closing_get")
    @admin_required
    def closing_get():
        month = query_month(default=now_local().date())
        summary = container.closing_service.build_closing(organization_id=current_org_id(), reference_month=month)
        return ok(
            {
                "reference_month": month.isoformat(),
                "rows": [_row_json(r) for r in summary.rows],
                "total_bank_minutes": summary.total_bank_minutes,
                "total_payment_minutes": summary.total_payment_minutes,
                "finalized_count": summary.finalized_count,
            }
        )

    @app.route("/api/closing/<int:user_id>/destination", methods=["PUT"], endpoint="closing_set_destination")
    @admin_required
    def closing_set_destination(user_id: int):
        data = json_body()
        decision = container.closing_service.set_destination(
            current_role=current_role(),
            organization_id=current_org_id(),
            user_id=user_id,
            reference_month=_body_month(data),
            destination=_body_destination(data),
        )
        return ok(to_json(decision), "Destino atualizado")

    @app.route("/api/closing/bulk-destination", methods=["POST"], endpoint="closing_bulk_destination")
    @admin_required
    def closing_bulk_destination():
        data = json_body()
        updated = container.closing_service.bulk_set_destination(
            current_role=current_role(),
            organization_id=current_org_id(),
            user_ids=_body_user_ids(data),
            reference_month=_body_month(data),
            destination=_body_destination(data),
        )
        return ok({"updated": len(updated)}, f"{len(updated)} colaborador(es) atualizado(s)")

    @app.route("/api/closing/finalize", methods=["POST"], endpoint="closing_finalize")
    @admin_required
    def closing_finalize():
        data = json_body()
        count = container.closing_service.finalize(
            current_role=current_role(),
            organization_id=current_org_id(),
            admin_user_id=current_user_id(),
            user_ids=_body_user_ids(data),
            reference_month=_body_month(data),
            now=now_local(),
        )
        return ok({"finalized": count}, f"{count} fechamento(s) finalizado(s)")
