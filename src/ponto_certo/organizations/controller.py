from __future__ import annotations

from flask import Flask

from ..common.web import admin_required, current_org_id, current_role, json_body, login_required, ok, to_json
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/organization", methods=["GET"], endpoint="organization_get")
    @login_required
    def organization_get():
        org = container.organization_service.get(current_org_id())
        return ok(to_json(org))

    @app.route("/api/company-info", methods=["GET"], endpoint="company_info_get")
    @admin_required
    def company_info_get():
        info = container.organization_service.get_company_info(current_org_id())
        return ok(to_json(info) if info else None)

    @app.route("/api/company-info", methods=["PUT"], endpoint="company_info_save")
    @admin_required
    def company_info_save():
        info = container.organization_service.save_company_info(
            current_role=current_role(), organization_id=current_org_id(), data=json_body()
        )
        org = container.organization_service.get(current_org_id())
        return ok({"company_info": to_json(info), "org_code": org.org_code}, "Dados da empresa salvos")
