from __future__ import annotations

import logging
from datetime import date
from functools import lru_cache
from typing import Optional

import holidays

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..organizations.repository import OrganizationRepository
from .model import Holiday
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


@lru_cache(maxsize=64)
def _official_holidays(year: int, state: Optional[str]) -> tuple[Holiday, ...]:
    national = holidays.Brazil(years=year)
    regional = holidays.Brazil(subdiv=state, years=year) if state else national

    out = [Holiday(holiday_date=d, name=name, holiday_type="national") for d, name in sorted(national.items())]
    out.extend(
        Holiday(holiday_date=d, name=name, holiday_type="state")
        for d, name in sorted(regional.items())
        if d not in national
    )
    return tuple(out)


class HolidayCalendarService:
    """National/state holidays from the ``holidays`` package plus organization holidays."""

    def __init__(self, custom: HolidayRepository, organizations: OrganizationRepository):
        self._custom = custom
        self._organizations = organizations

    def _state_of(self, organization_id: int) -> Optional[str]:
        info = self._organizations.get_company_info(int(organization_id))
        state = info.address.state if info else None
        if state and state.upper() not in holidays.Brazil.subdivisions:
            logger.warning("Unknown state %r for organization %s; using national holidays only", state, organization_id)
            return None
        return state.upper() if state else None

    def list_between(self, organization_id: int, start: date, end: date) -> list[Holiday]:
        state = self._state_of(organization_id)
        official = [
            h
            for year in range(start.year, end.year + 1)
            for h in _official_holidays(year, state)
            if start <= h.holiday_date <= end
        ]
        combined = official + list(self._custom.list_between(int(organization_id), start, end))
        return sorted(combined, key=lambda h: (h.holiday_date, h.name))

    def holiday_dates(self, organization_id: int, start: date, end: date) -> set[date]:
        return {h.holiday_date for h in self.list_between(organization_id, start, end)}

    def is_holiday(self, organization_id: int, day: date) -> bool:
        return day in self.holiday_dates(organization_id, day, day)

    def add(self, *, current_role: Role, organization_id: int, holiday_date: date, name: str, holiday_type: str = "custom") -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem cadastrar feriados")
        if holiday_type not in ("municipal", "custom"):
            raise ValidationError("Somente feriados municipais ou personalizados podem ser cadastrados")

        holiday = Holiday(holiday_date=holiday_date, name=require_non_empty(name, "Nome do feriado"), holiday_type=holiday_type)
        return self._custom.create(int(organization_id), holiday)

    def delete(self, *, current_role: Role, organization_id: int, holiday_id: int) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem excluir feriados")
        found = self._custom.get_by_id(int(holiday_id))
        if not found or found[0] != int(organization_id):
            raise NotFoundError("Feriado não encontrado")
        self._custom.delete(int(holiday_id))
