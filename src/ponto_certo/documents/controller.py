from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local, parse_month
from ..common.web import (
    admin_required,
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
from ..core.enums import DocumentStatus
from ..core.exceptions import ValidationError
from .service import expiration_info


def _with_expiration(doc, today) -> dict:
    return {**to_json(doc), "expiration_info": expiration_info(doc.expires_at, today)}


def register(app: Flask, container: Container) -> None:
    @app.route("/api/documents", methods=["GET"], endpoint="documents_list")
    @admin_required
    def documents_list():
        today = now_local().date()
        status_s = request.args.get("status")
        try:
            status = DocumentStatus(status_s) if status_s else None
        except ValueError:
            raise ValidationError("Status inválido")
        docs = container.document_service.list_for_organization(
            current_role=current_role(), organization_id=current_org_id(), today=today, status=status
        )
        return ok([_with_expiration(d, today) for d in docs])

    @app.route("/api/documents/summary", methods=["GET"], endpoint="documents_summary")
    @admin_required
    def documents_summary():
        summary = container.document_service.summary(organization_id=current_org_id(), today=now_local().date())
        return ok(to_json(summary))

    @app.route("/api/documents", methods=["POST"], endpoint="documents_create")
    @admin_required
    def documents_create():
        data = json_body()
        month_s = (data.get("reference_month") or "").strip()
        try:
            month = parse_month(month_s) if month_s else None
        except ValueError:
            raise ValidationError("Mês inválido (AAAA-MM)")
        if not data.get("user_id"):
            raise ValidationError("Selecione o colaborador")
        document_id = container.document_service.create(
            current_role=current_role(),
            organization_id=current_org_id(),
            user_id=int(data["user_id"]),
            title=data.get("title") or "",
            document_type=data.get("document_type") or "timesheet",
            reference_month=month,
            file_url=data.get("file_url"),
            expires_at=optional_body_date(data, "expires_at"),
        )
        return ok({"document_id": document_id}, "Documento enviado"), 201

    @app.route("/api/documents/expired", methods=["DELETE"], endpoint="documents_delete_expired")
    @admin_required
    def documents_delete_expired():
        data = json_body()
        try:
            ids = [int(i) for i in data.get("document_ids") or []]
        except (TypeError, ValueError):
            raise ValidationError("Lista de documentos inválida")
        count = container.document_service.delete_expired(
            current_role=current_role(), organization_id=current_org_id(), document_ids=ids
        )
        return ok({"deleted": count}, f"{count} documento(s) excluído(s)")

    @app.route("/api/documents/mine", methods=["GET"], endpoint="documents_mine")
    @login_required
    def documents_mine():
        today = now_local().date()
        return ok([_with_expiration(d, today) for d in container.document_service.list_mine(current_user_id())])

    @app.route("/api/documents/<int:document_id>/sign", methods=["POST"], endpoint="documents_sign")
    @login_required
    def documents_sign(document_id: int):
        data = json_body()
        container.document_service.sign(
            user_id=current_user_id(),
            document_id=document_id,
            signature_data=data.get("signature_data") or "",
            now=now_local(),
        )
        return ok(message="Documento assinado")
