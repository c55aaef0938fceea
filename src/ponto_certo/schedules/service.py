from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, time
from typing import Optional, Sequence

from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_OVERTIME_MAX_MINUTES
from ..core.enums import Role, ScheduleAdjustmentType, ScheduleType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import ScheduleAdjustment, WorkSchedule
from .repository import ScheduleAdjustmentRepository, WorkScheduleRepository

logger = logging.getLogger(__name__)


def _require_admin(current_role: Role) -> None:
    if current_role != Role.ADMIN:
        raise AuthorizationError("Apenas administradores podem gerenciar jornadas")


class WorkScheduleService:
    def __init__(self, schedules: WorkScheduleRepository, users: UserRepository):
        self._schedules = schedules
        self._users = users

    def get(self, *, organization_id: int, schedule_id: int) -> WorkSchedule:
        schedule = self._schedules.get_by_id(int(schedule_id))
        if not schedule or schedule.organization_id != int(organization_id):
            raise NotFoundError("Jornada não encontrada")
        return schedule

    def list_with_employee_counts(self, organization_id: int) -> list[dict]:
        counts = self._schedules.employee_counts(int(organization_id))
        return [
            {"schedule": s, "employee_count": counts.get(s.schedule_id, 0)}
            for s in self._schedules.list_for_organization(int(organization_id))
        ]

    @staticmethod
    def _validate(schedule: WorkSchedule) -> WorkSchedule:
        name = require_non_empty(schedule.name, "Nome da jornada")
        if schedule.schedule_type == ScheduleType.SHIFT:
            if not (schedule.shift_work_hours and schedule.shift_work_hours > 0):
                raise ValidationError("Informe as horas de trabalho da escala")
            if not (schedule.shift_rest_hours and schedule.shift_rest_hours > 0):
                raise ValidationError("Informe as horas de descanso da escala")
        else:
            if len(schedule.weekday_hours) != 7:
                raise ValidationError("Informe as horas dos 7 dias da semana")
            if any(not 0 <= float(h) <= 24 for h in schedule.weekday_hours):
                raise ValidationError("Horas por dia devem estar entre 0 e 24")
        if schedule.start_time and schedule.end_time and schedule.start_time == schedule.end_time:
            raise ValidationError("Horário de entrada e saída não podem ser iguais")
        if schedule.break_duration_minutes < 0:
            raise ValidationError("Intervalo não pode ser negativo")
        return replace(schedule, name=name)

    def save(self, *, current_role: Role, schedule: WorkSchedule) -> int:
        _require_admin(current_role)
        if schedule.schedule_id:
            self.get(organization_id=schedule.organization_id, schedule_id=schedule.schedule_id)
        return self._schedules.save(self._validate(schedule))

    def delete(self, *, current_role: Role, organization_id: int, schedule_id: int) -> None:
        _require_admin(current_role)
        schedule = self.get(organization_id=organization_id, schedule_id=schedule_id)

        dependents = self._users.count_by_schedule(schedule.schedule_id)
        if dependents:
            raise ValidationError(
                f"Não é possível excluir: {dependents} colaborador(es) vinculado(s) a esta jornada"
            )

        if not self._schedules.delete(schedule.schedule_id):
            raise ValidationError("Falha ao excluir jornada")
        logger.info("Work schedule %s deleted", schedule.schedule_id)


class ScheduleAdjustmentService:
    """Temporary schedule changes and overtime authorizations."""

    def __init__(self, adjustments: ScheduleAdjustmentRepository, users: UserRepository):
        self._adjustments = adjustments
        self._users = users

    def create(
        self,
        *,
        current_role: Role,
        organization_id: int,
        admin_user_id: int,
        user_id: int,
        adjustment_type: ScheduleAdjustmentType,
        start_date: date,
        end_date: date,
        custom_start_time: Optional[time] = None,
        custom_end_time: Optional[time] = None,
        custom_break_start: Optional[time] = None,
        custom_break_end: Optional[time] = None,
        overtime_max_minutes: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> int:
        _require_admin(current_role)

        user = self._users.get_by_id(int(user_id))
        if not user or user.organization_id != int(organization_id):
            raise NotFoundError("Colaborador não encontrado")
        if end_date < start_date:
            raise ValidationError("Data final deve ser igual ou posterior à data inicial")

        adjustment_type = ScheduleAdjustmentType(adjustment_type)
        overtime = adjustment_type == ScheduleAdjustmentType.OVERTIME_AUTHORIZATION
        if not overtime and not (custom_start_time or custom_end_time):
            raise ValidationError("Informe o novo horário de entrada ou saída")

        max_minutes = DEFAULT_OVERTIME_MAX_MINUTES if overtime_max_minutes is None else int(overtime_max_minutes)
        if overtime and max_minutes <= 0:
            raise ValidationError("Limite de horas extras deve ser positivo")

        adjustment_id = self._adjustments.create(
            ScheduleAdjustment(
                adjustment_id=0,
                organization_id=int(organization_id),
                user_id=user.user_id,
                adjustment_type=adjustment_type,
                start_date=start_date,
                end_date=end_date,
                custom_start_time=custom_start_time,
                custom_end_time=custom_end_time,
                custom_break_start=custom_break_start,
                custom_break_end=custom_break_end,
                overtime_authorized=overtime,
                overtime_max_minutes=max_minutes,
                reason=(reason or "").strip() or None,
                created_by=int(admin_user_id),
            )
        )
        logger.info("Schedule adjustment %s (%s) created for user %s", adjustment_id, adjustment_type.value, user.user_id)
        return adjustment_id

    def active_for(self, user_id: int, day: date) -> Optional[ScheduleAdjustment]:
        """The most recently created adjustment covering ``day``."""
        found = self._adjustments.list_for_user_between(int(user_id), day, day)
        return found[0] if found else None

    def overtime_authorization_for(self, user_id: int, day: date) -> Optional[ScheduleAdjustment]:
        """The most recent adjustment covering ``day`` that authorizes overtime.

        A newer temporary change on the same day does not hide it.
        """
        found = self._adjustments.list_for_user_between(int(user_id), day, day)
        return next((a for a in found if a.overtime_authorized), None)

    def list_for_organization(self, organization_id: int, *, active_on: Optional[date] = None) -> Sequence[ScheduleAdjustment]:
        return self._adjustments.list_for_organization(int(organization_id), active_on=active_on)

    def delete(self, *, current_role: Role, organization_id: int, adjustment_id: int) -> None:
        _require_admin(current_role)
        adjustment = self._adjustments.get_by_id(int(adjustment_id))
        if not adjustment or adjustment.organization_id != int(organization_id):
            raise NotFoundError("Ajuste não encontrado")
        if not self._adjustments.delete(adjustment.adjustment_id):
            raise ValidationError("Falha ao excluir ajuste")
