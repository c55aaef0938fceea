from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import parse_month
from ..common.web import admin_required, current_org_id, current_role, ok, to_json
from ..container import Container
from ..core.exceptions import ValidationError
from .service import report_csv


def _month_arg(key: str):
    value = (request.args.get(key) or "").strip()
    if not value:
        return None
    try:
        return parse_month(value)
    except ValueError:
        raise ValidationError(f"Mês inválido em {key} (AAAA-MM)")


def register(app: Flask, container: Container) -> None:
    def _build():
        return container.overtime_report_service.build(
            current_role=current_role(),
            organization_id=current_org_id(),
            start_month=_month_arg("start"),
            end_month=_month_arg("end"),
        )

    @app.route("/api/reports/overtime", methods=["GET"], endpoint="reports_overtime")
    @admin_required
    def reports_overtime():
        return ok(to_json(_build()))

    @app.route("/api/reports/overtime.csv", methods=["GET"], endpoint="reports_overtime_csv")
    @admin_required
    def reports_overtime_csv():
        return app.response_class(
            report_csv(_build()),
            mimetype="text/csv",
            headers={"Content-Disposition": "attachment; filename=relatorio_horas_extras.csv"},
        )
