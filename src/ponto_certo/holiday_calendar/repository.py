from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    """Organization-specific holidays (municipal and custom)."""

    def list_between(self, organization_id: int, start: date, end: date) -> Sequence[Holiday]:
        raise NotImplementedError

    def get_by_id(self, holiday_id: int) -> Optional[tuple[int, Holiday]]:
        """Return (organization_id, holiday)."""

        raise NotImplementedError

    def create(self, organization_id: int, holiday: Holiday) -> int:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError
