from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import only_digits, require_cpf, require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..organizations.service import OrganizationService
from ..schedules.repository import WorkScheduleRepository
from .model import Address, NewEmployee, Profile, StatusChange
from .repository import UserRepository

logger = logging.getLogger(__name__)

_INVALID_LOGIN = "E-mail ou senha inválidos"


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    organization_id: int
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate a user inside the workspace chosen by org code."""

    def __init__(self, users: UserRepository, organizations: OrganizationService):
        self._users = users
        self._organizations = organizations

    def authenticate(self, org_code: str, email: str, password: str) -> SessionUser:
        org = self._organizations.resolve_by_org_code(org_code)

        user = self._users.get_by_email((email or "").strip().lower())
        if not user or user.organization_id != org.organization_id:
            raise AuthenticationError(_INVALID_LOGIN)
        if user.status == EmployeeStatus.INATIVO:
            raise AuthenticationError("Usuário inativo")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # unknown hash method stored in the row
            ok = False
        if not ok:
            raise AuthenticationError(_INVALID_LOGIN)

        logger.info("User %s logged in to organization %s", user.user_id, org.organization_id)
        return SessionUser(
            user_id=user.user_id,
            organization_id=user.organization_id,
            full_name=user.full_name,
            role=user.role,
        )


def _address_from(data: dict) -> Address:
    return Address(
        cep=only_digits(data.get("cep")) or None,
        street=(data.get("street") or "").strip() or None,
        number=(data.get("number") or "").strip() or None,
        complement=(data.get("complement") or "").strip() or None,
        neighborhood=(data.get("neighborhood") or "").strip() or None,
        city=(data.get("city") or "").strip() or None,
        state=(data.get("state") or "").strip().upper() or None,
    )


class EmployeeService:
    """Use case: manage employees (admin) and passwords."""

    def __init__(self, users: UserRepository, schedules: WorkScheduleRepository):
        self._users = users
        self._schedules = schedules

    def _get_in_org(self, organization_id: int, user_id: int) -> Profile:
        user = self._users.get_by_id(int(user_id))
        if not user or user.organization_id != int(organization_id):
            raise NotFoundError("Colaborador não encontrado")
        return user

    def _check_schedule(self, organization_id: int, schedule_id: Optional[int]) -> Optional[int]:
        if schedule_id in (None, ""):
            return None
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule or schedule.organization_id != int(organization_id):
            raise ValidationError("Jornada de trabalho inválida")
        return schedule.schedule_id

    def get(self, *, organization_id: int, user_id: int) -> Profile:
        return self._get_in_org(organization_id, user_id)

    def list_employees(self, organization_id: int, *, status: Optional[EmployeeStatus] = None) -> Sequence[Profile]:
        return self._users.list_for_organization(int(organization_id), status=status)

    def create_employee(
        self,
        *,
        current_role: Role,
        organization_id: int,
        email: str,
        password: str,
        full_name: str,
        cpf: Optional[str] = None,
        phone: Optional[str] = None,
        sector: Optional[str] = None,
        position: Optional[str] = None,
        hire_date: Optional[date] = None,
        work_schedule_id: Optional[int] = None,
        address: Optional[dict] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem cadastrar colaboradores")

        email = require_email(email)
        require_min_length(password, "Senha", MIN_PASSWORD_LENGTH)
        full_name = require_non_empty(full_name, "Nome completo")
        cpf_digits = require_cpf(cpf) if cpf else None

        if self._users.get_by_email(email):
            raise ValidationError("Já existe um usuário com este e-mail")

        user_id = self._users.create(
            NewEmployee(
                organization_id=int(organization_id),
                full_name=full_name,
                email=email,
                password_hash=generate_password_hash(password),
                role=Role.EMPLOYEE,
                cpf=cpf_digits,
                phone=only_digits(phone) or None,
                sector=(sector or "").strip() or None,
                position=(position or "").strip() or None,
                hire_date=hire_date,
                work_schedule_id=self._check_schedule(organization_id, work_schedule_id),
                address=_address_from(address or {}),
            )
        )
        logger.info("Employee %s created in organization %s", user_id, organization_id)
        return user_id

    def update_password(
        self,
        *,
        requester_id: int,
        requester_role: Role,
        requester_organization_id: int,
        target_user_id: int,
        new_password: str,
    ) -> None:
        require_min_length(new_password, "Senha", MIN_PASSWORD_LENGTH)

        target = self._users.get_by_id(int(target_user_id))
        if not target:
            raise NotFoundError("Usuário não encontrado")

        if int(target_user_id) != int(requester_id):
            if requester_role not in (Role.ADMIN, Role.SUPORTE):
                raise AuthorizationError("Sem permissão para alterar a senha de outro usuário")
            if requester_role == Role.ADMIN and target.organization_id != int(requester_organization_id):
                raise AuthorizationError("Usuário pertence a outra organização")

        if not self._users.update_password(target.user_id, generate_password_hash(new_password)):
            raise ValidationError("Falha ao atualizar a senha")
        logger.info("Password updated for user %s by %s", target.user_id, requester_id)

    def update_profile(self, *, current_role: Role, organization_id: int, user_id: int, changes: dict) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem editar colaboradores")
        self._get_in_org(organization_id, user_id)

        changes = dict(changes)
        if "full_name" in changes:
            changes["full_name"] = require_non_empty(changes["full_name"], "Nome completo")
        if changes.get("cpf"):
            changes["cpf"] = require_cpf(changes["cpf"])
        if "phone" in changes:
            changes["phone"] = only_digits(changes["phone"]) or None
        if "cep" in changes:
            changes["cep"] = only_digits(changes["cep"]) or None
        if "work_schedule_id" in changes:
            changes["work_schedule_id"] = self._check_schedule(organization_id, changes["work_schedule_id"])

        if not self._users.update_profile(int(user_id), changes):
            raise ValidationError("Nenhuma alteração aplicada")

    def change_status(
        self,
        *,
        current_role: Role,
        organization_id: int,
        admin_user_id: int,
        user_id: int,
        status: EmployeeStatus,
        specification: Optional[str] = None,
        reason: Optional[str] = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem alterar o status")

        user = self._get_in_org(organization_id, user_id)
        status = EmployeeStatus(status)
        specification = (specification or "").strip() or None
        if status == EmployeeStatus.AFASTADO and not specification:
            raise ValidationError("Informe a especificação do afastamento")
        if status == user.status and specification == user.status_specification:
            raise ValidationError("O status informado é igual ao atual")

        self._users.update_status(user.user_id, status, specification)
        self._users.add_status_history(
            organization_id=int(organization_id),
            user_id=user.user_id,
            previous_status=user.status.value,
            new_status=status.value,
            previous_specification=user.status_specification,
            new_specification=specification,
            reason=(reason or "").strip() or None,
            changed_by=int(admin_user_id),
        )
        logger.info("Status of user %s changed %s -> %s", user.user_id, user.status.value, status.value)

    def status_history(self, *, organization_id: int, user_id: int) -> Sequence[StatusChange]:
        self._get_in_org(organization_id, user_id)
        return self._users.list_status_history(int(user_id))

    def delete_employee(self, *, current_role: Role, organization_id: int, user_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem excluir colaboradores")

        user = self._get_in_org(organization_id, user_id)
        if user.role == Role.ADMIN:
            raise ValidationError("Não é possível excluir um administrador")

        if not self._users.delete_by_id(user.user_id):
            raise ValidationError("Falha ao excluir colaborador")
