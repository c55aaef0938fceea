from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from .model import HoursBalance, PayrollSettings


class PayrollSettingsRepository(Protocol):
    def get(self, organization_id: int) -> Optional[PayrollSettings]:
        raise NotImplementedError

    def save(self, settings: PayrollSettings) -> None:
        """Insert or replace the single settings row of the organization."""

        raise NotImplementedError


class HoursBalanceRepository(Protocol):
    def get(self, user_id: int) -> Optional[HoursBalance]:
        raise NotImplementedError

    def list_for_organization(self, organization_id: int) -> Sequence[HoursBalance]:
        raise NotImplementedError

    def set_balance(self, *, user_id: int, organization_id: int, balance_minutes: int, calculated_at: datetime) -> None:
        raise NotImplementedError
