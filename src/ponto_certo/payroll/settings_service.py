from __future__ import annotations

import logging
from dataclasses import fields, replace
from typing import Any

from ..core.constants import ALLOWED_CYCLE_START_DAYS
from ..core.enums import DayType, FlexibilityMode, LocationMode, OvertimeDestination, Role
from ..core.exceptions import AuthorizationError, ValidationError
from .model import PayrollSettings
from .repository import PayrollSettingsRepository

logger = logging.getLogger(__name__)

_BANK_VALIDITY = {"3_months", "6_months", "1_year", "custom"}
_MIXED_RULE_TYPES = {"hours_threshold", "day_type"}

_ENUM_FIELDS = {
    "schedule_flexibility_mode": FlexibilityMode,
    "overtime_strategy": OvertimeDestination,
    "location_mode": LocationMode,
}


class PayrollSettingsService:
    """Settings resolver: one configuration row per organization."""

    def __init__(self, settings: PayrollSettingsRepository):
        self._settings = settings

    def get(self, organization_id: int) -> PayrollSettings:
        return self._settings.get(int(organization_id)) or PayrollSettings(organization_id=int(organization_id))

    def default_destination(self, organization_id: int) -> OvertimeDestination:
        """Destination pre-selected for every employee in the monthly closing."""
        return self.get(organization_id).overtime_strategy or OvertimeDestination.BANK

    def save(self, *, current_role: Role, organization_id: int, changes: dict[str, Any]) -> PayrollSettings:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem alterar as configurações")

        known = {f.name for f in fields(PayrollSettings)} - {"organization_id"}
        unknown = set(changes) - known
        if unknown:
            raise ValidationError(f"Campos desconhecidos: {', '.join(sorted(unknown))}")

        coerced = {k: self._coerce(k, v) for k, v in changes.items()}
        settings = replace(self.get(organization_id), **coerced)
        self._validate(settings)

        self._settings.save(settings)
        logger.info("Payroll settings updated for organization %s (%s)", organization_id, ", ".join(sorted(changes)))
        return settings

    @staticmethod
    def _coerce(name: str, value: Any) -> Any:
        try:
            if name in _ENUM_FIELDS:
                return _ENUM_FIELDS[name](value) if value is not None else None
            if name in ("mixed_bank_days", "mixed_payment_days"):
                return tuple(DayType(v) for v in value)
        except ValueError:
            raise ValidationError(f"Valor inválido para {name}")
        return value

    @staticmethod
    def _validate(s: PayrollSettings) -> None:
        if s.cycle_start_day not in ALLOWED_CYCLE_START_DAYS:
            raise ValidationError("Dia de início do ciclo deve ser 1, 16, 21 ou 26")
        if s.tolerance_minutes < 0 or s.tolerance_entry_minutes < 0:
            raise ValidationError("Tolerância não pode ser negativa")
        if s.bank_validity not in _BANK_VALIDITY:
            raise ValidationError("Validade do banco de horas inválida")
        if s.bank_validity == "custom" and not (s.bank_custom_months and s.bank_custom_months > 0):
            raise ValidationError("Informe a quantidade de meses da validade personalizada")
        for day_type in DayType:
            if not 0 <= s.payment_percent(day_type) <= 200:
                raise ValidationError("Percentual de pagamento deve estar entre 0 e 200")
        if s.mixed_rule_type not in _MIXED_RULE_TYPES:
            raise ValidationError("Regra do modo misto inválida")
        if not 1 <= s.mixed_hours_threshold <= 100 or not 1 <= s.auto_decision_threshold_hours <= 100:
            raise ValidationError("Limite de horas deve estar entre 1 e 100")
        if set(s.mixed_bank_days) & set(s.mixed_payment_days):
            raise ValidationError("Um tipo de dia não pode ir para o banco e para o pagamento")
        if s.allowed_radius_meters <= 0:
            raise ValidationError("Raio permitido deve ser positivo")
