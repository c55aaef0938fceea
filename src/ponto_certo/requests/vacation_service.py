from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.constants import (
    VACATION_DAYS_PER_PERIOD,
    VACATION_MAX_FRACTIONS,
    VACATION_MAX_SELL_DAYS,
    VACATION_MIN_DAYS,
    VACATION_MIN_LONG_FRACTION,
)
from ..core.enums import EmployeeStatus, RequestStatus, Role, VacationType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import Profile
from ..users.repository import UserRepository
from .model import VacationRequest
from .repository import VacationRequestRepository
from .vacation_periods import AcquisitivePeriod, build_periods

logger = logging.getLogger(__name__)


def _days_count(start_date: date, end_date: date) -> int:
    if end_date < start_date:
        raise ValidationError("A data final deve ser igual ou posterior à inicial")
    return (end_date - start_date).days + 1


def _overlaps(vacations: Sequence[VacationRequest], start_date: date, end_date: date) -> bool:
    return any(
        v.status != RequestStatus.REJECTED and v.start_date <= end_date and start_date <= v.end_date
        for v in vacations
    )


class VacationService:
    """Vacation requests by employees and vacations registered by admins."""

    def __init__(self, vacations: VacationRequestRepository, users: UserRepository):
        self._vacations = vacations
        self._users = users

    def _get_user(self, user_id: int) -> Profile:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Colaborador não encontrado")
        return user

    def periods_for(self, user_id: int, today: date) -> list[AcquisitivePeriod]:
        user = self._get_user(user_id)
        if not user.hire_date:
            return []
        return build_periods(user.hire_date, self._vacations.list_for_user(user_id), today)

    def request(
        self,
        *,
        user_id: int,
        start_date: date,
        end_date: date,
        today: date,
        sell_days: int = 0,
        reason: Optional[str] = None,
    ) -> int:
        user = self._get_user(user_id)
        if not user.hire_date:
            raise ValidationError("Data de admissão não cadastrada. Procure o RH.")

        days = _days_count(start_date, end_date)
        if start_date < today:
            raise ValidationError("A data de início não pode estar no passado")
        if days < VACATION_MIN_DAYS:
            raise ValidationError(f"O período mínimo de férias é de {VACATION_MIN_DAYS} dias")
        sell_days = int(sell_days or 0)
        if sell_days < 0 or sell_days > VACATION_MAX_SELL_DAYS:
            raise ValidationError(f"É possível vender no máximo {VACATION_MAX_SELL_DAYS} dias")

        existing = self._vacations.list_for_user(user_id)
        if _overlaps(existing, start_date, end_date):
            raise ValidationError("Já existe uma solicitação de férias neste período")

        periods = build_periods(user.hire_date, existing, today)
        target = next((p for p in periods if p.start <= start_date < p.concessive_end), None)
        if target is None or not target.is_complete(today):
            raise ValidationError("Você ainda não completou o período aquisitivo de 12 meses")

        if len(target.vacations) >= VACATION_MAX_FRACTIONS:
            raise ValidationError(f"Limite de {VACATION_MAX_FRACTIONS} períodos de férias atingido")
        if target.used_days + target.sold_days + days + sell_days > VACATION_DAYS_PER_PERIOD:
            raise ValidationError(f"Saldo insuficiente: restam {target.remaining_days} dias neste período")

        # once no more fractions fit, one of them must be long
        longest = max([v.days_count for v in target.vacations] + [days])
        remaining_after = target.remaining_days - days - sell_days
        fractions_after = len(target.vacations) + 1
        if longest < VACATION_MIN_LONG_FRACTION and (
            fractions_after >= VACATION_MAX_FRACTIONS or remaining_after < VACATION_MIN_LONG_FRACTION
        ):
            raise ValidationError(f"Um dos períodos deve ter no mínimo {VACATION_MIN_LONG_FRACTION} dias corridos")

        request_id = self._vacations.create(
            VacationRequest(
                request_id=0,
                organization_id=user.organization_id,
                user_id=user.user_id,
                vacation_type=VacationType.INDIVIDUAL,
                start_date=start_date,
                end_date=end_date,
                days_count=days,
                status=RequestStatus.PENDING,
                sell_days=sell_days,
                reason=reason,
            )
        )
        logger.info("User %s requested vacation %s (%s days)", user.user_id, request_id, days)
        return request_id

    def register(
        self,
        *,
        current_role: Role,
        organization_id: int,
        admin_user_id: int,
        vacation_type: VacationType,
        start_date: date,
        end_date: date,
        now: datetime,
        user_id: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> list[int]:
        """Admin-created vacation, approved on creation.

        A collective vacation creates one row for every active employee.
        """
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem lançar férias")
        vacation_type = VacationType(vacation_type)
        days = _days_count(start_date, end_date)

        if vacation_type == VacationType.COLLECTIVE:
            targets = list(self._users.list_for_organization(organization_id, status=EmployeeStatus.ATIVO))
            if not targets:
                raise ValidationError("Nenhum colaborador ativo para férias coletivas")
        else:
            if user_id is None:
                raise ValidationError("Selecione o colaborador")
            user = self._get_user(user_id)
            if user.organization_id != organization_id:
                raise NotFoundError("Colaborador não encontrado")
            targets = [user]

        ids: list[int] = []
        for user in targets:
            ids.append(
                self._vacations.create(
                    VacationRequest(
                        request_id=0,
                        organization_id=organization_id,
                        user_id=user.user_id,
                        vacation_type=vacation_type,
                        start_date=start_date,
                        end_date=end_date,
                        days_count=days,
                        status=RequestStatus.APPROVED,
                        reason=reason,
                        is_admin_created=True,
                        reviewed_by=admin_user_id,
                        reviewed_at=now,
                    )
                )
            )
        logger.info(
            "Admin %s registered %s vacation for %s employee(s)", admin_user_id, vacation_type.value, len(ids)
        )
        return ids

    def _in_org(self, *, current_role: Role, organization_id: int, request_id: int) -> VacationRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem revisar férias")
        vac = self._vacations.get(request_id)
        if not vac or vac.organization_id != organization_id:
            raise NotFoundError("Solicitação de férias não encontrada")
        return vac

    def _decide(
        self,
        *,
        current_role: Role,
        organization_id: int,
        admin_user_id: int,
        request_id: int,
        now: datetime,
        status: RequestStatus,
    ) -> None:
        vac = self._in_org(current_role=current_role, organization_id=organization_id, request_id=request_id)
        if vac.status != RequestStatus.PENDING or not self._vacations.decide(
            request_id=vac.request_id, status=status, reviewed_by=admin_user_id, reviewed_at=now
        ):
            raise ValidationError("Esta solicitação já foi analisada")
        logger.info("Vacation %s %s by %s", vac.request_id, status.value, admin_user_id)

    def approve(self, *, current_role: Role, organization_id: int, admin_user_id: int, request_id: int, now: datetime) -> None:
        self._decide(
            current_role=current_role,
            organization_id=organization_id,
            admin_user_id=admin_user_id,
            request_id=request_id,
            now=now,
            status=RequestStatus.APPROVED,
        )

    def reject(self, *, current_role: Role, organization_id: int, admin_user_id: int, request_id: int, now: datetime) -> None:
        self._decide(
            current_role=current_role,
            organization_id=organization_id,
            admin_user_id=admin_user_id,
            request_id=request_id,
            now=now,
            status=RequestStatus.REJECTED,
        )

    def cancel(self, *, current_role: Role, organization_id: int, admin_user_id: int, request_id: int, now: datetime) -> None:
        """Cancel a vacation that has not started yet. Cancelled rows are stored as rejected."""
        vac = self._in_org(current_role=current_role, organization_id=organization_id, request_id=request_id)
        if vac.status == RequestStatus.REJECTED:
            raise ValidationError("Esta solicitação já foi cancelada ou rejeitada")
        if now.date() >= vac.start_date:
            raise ValidationError("Não é possível cancelar férias já iniciadas")
        self._vacations.decide(
            request_id=vac.request_id,
            status=RequestStatus.REJECTED,
            reviewed_by=admin_user_id,
            reviewed_at=now,
            only_pending=False,
        )
        logger.info("Vacation %s cancelled by %s", vac.request_id, admin_user_id)

    def list_for_organization(
        self, *, current_role: Role, organization_id: int, status: Optional[RequestStatus] = None
    ) -> Sequence[VacationRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem listar as férias")
        return self._vacations.list_for_organization(organization_id=organization_id, status=status)

    def list_mine(self, user_id: int) -> Sequence[VacationRequest]:
        return self._vacations.list_for_user(user_id)
