from __future__ import annotations

from flask import Flask, request, session

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
from ..core.enums import EmployeeStatus
from ..core.exceptions import ValidationError
from .model import Profile


def profile_json(user: Profile) -> dict:
    data = to_json(user)
    data.pop("password_hash", None)
    return data


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        user = container.auth_service.authenticate(
            (data.get("org_code") or "").strip(),
            (data.get("email") or "").strip(),
            data.get("password") or "",
        )
        session.clear()
        session["user_id"] = user.user_id
        session["organization_id"] = user.organization_id
        session["role"] = user.role.value
        session["name"] = user.full_name
        return ok(to_json(user), "Login realizado com sucesso")

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Sessão encerrada")

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        user = container.employee_service.get(organization_id=current_org_id(), user_id=current_user_id())
        return ok(profile_json(user))

    @app.route("/api/me/password", methods=["PUT"], endpoint="me_password")
    @login_required
    def me_password():
        data = json_body()
        container.employee_service.update_password(
            requester_id=current_user_id(),
            requester_role=current_role(),
            requester_organization_id=current_org_id(),
            target_user_id=current_user_id(),
            new_password=data.get("new_password") or "",
        )
        return ok(message="Senha alterada com sucesso")

    @app.route("/api/users/<int:user_id>/password", methods=["PUT"], endpoint="user_password")
    @login_required
    def user_password(user_id: int):
        data = json_body()
        container.employee_service.update_password(
            requester_id=current_user_id(),
            requester_role=current_role(),
            requester_organization_id=current_org_id(),
            target_user_id=user_id,
            new_password=data.get("new_password") or "",
        )
        return ok(message="Senha alterada com sucesso")

    @app.route("/api/employees", methods=["GET"], endpoint="employees_list")
    @admin_required
    def employees_list():
        status_s = request.args.get("status")
        try:
            status = EmployeeStatus(status_s) if status_s else None
        except ValueError:
            raise ValidationError("Status inválido")
        users = container.employee_service.list_employees(current_org_id(), status=status)
        return ok([profile_json(u) for u in users])

    @app.route("/api/employees", methods=["POST"], endpoint="employees_create")
    @admin_required
    def employees_create():
        data = json_body()
        schedule_id = data.get("work_schedule_id")
        user_id = container.employee_service.create_employee(
            current_role=current_role(),
            organization_id=current_org_id(),
            email=data.get("email") or "",
            password=data.get("password") or "",
            full_name=data.get("full_name") or "",
            cpf=data.get("cpf"),
            phone=data.get("phone"),
            sector=data.get("sector"),
            position=data.get("position"),
            hire_date=optional_body_date(data, "hire_date"),
            work_schedule_id=int(schedule_id) if schedule_id else None,
            address=data.get("address") or {},
        )
        return ok({"user_id": user_id}, "Colaborador cadastrado com sucesso"), 201

    @app.route("/api/employees/<int:user_id>", methods=["GET"], endpoint="employees_get")
    @admin_required
    def employees_get(user_id: int):
        return ok(profile_json(container.employee_service.get(organization_id=current_org_id(), user_id=user_id)))

    @app.route("/api/employees/<int:user_id>", methods=["PUT"], endpoint="employees_update")
    @admin_required
    def employees_update(user_id: int):
        changes = dict(json_body())
        if "hire_date" in changes:
            changes["hire_date"] = optional_body_date(changes, "hire_date")
        container.employee_service.update_profile(
            current_role=current_role(), organization_id=current_org_id(), user_id=user_id, changes=changes
        )
        return ok(message="Colaborador atualizado")

    @app.route("/api/employees/<int:user_id>", methods=["DELETE"], endpoint="employees_delete")
    @admin_required
    def employees_delete(user_id: int):
        container.employee_service.delete_employee(
            current_role=current_role(), organization_id=current_org_id(), user_id=user_id
        )
        return ok(message="Colaborador excluído")

    @app.route("/api/employees/<int:user_id>/status", methods=["PUT"], endpoint="employees_status")
    @admin_required
    def employees_status(user_id: int):
        data = json_body()
        try:
            status = EmployeeStatus(data.get("status"))
        except ValueError:
            raise ValidationError("Status inválido")
        container.employee_service.change_status(
            current_role=current_role(),
            organization_id=current_org_id(),
            admin_user_id=current_user_id(),
            user_id=user_id,
            status=status,
            specification=data.get("specification"),
            reason=data.get("reason"),
        )
        return ok(message="Status atualizado")

    @app.route("/api/employees/<int:user_id>/status-history", methods=["GET"], endpoint="employees_status_history")
    @admin_required
    def employees_status_history(user_id: int):
        history = container.employee_service.status_history(organization_id=current_org_id(), user_id=user_id)
        return ok(to_json(list(history)))
