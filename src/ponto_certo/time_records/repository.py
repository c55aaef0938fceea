from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import TimeRecordType
from .model import TimeRecord


class TimeRecordRepository(Protocol):
    def create(
        self,
        *,
        organization_id: int,
        user_id: int,
        record_type: TimeRecordType,
        recorded_at: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start: datetime, end: datetime) -> Sequence[TimeRecord]:
        """Records with start <= recorded_at < end, oldest first."""

        raise NotImplementedError

    def list_for_organization_between(self, organization_id: int, start: datetime, end: datetime) -> Sequence[TimeRecord]:
        raise NotImplementedError

    def find_by_type_on_day(self, user_id: int, day: date, record_type: TimeRecordType) -> Optional[TimeRecord]:
        raise NotImplementedError

    def update_recorded_at(self, record_id: int, recorded_at: datetime) -> bool:
        raise NotImplementedError
