from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ScheduleAdjustment, WorkSchedule


class WorkScheduleRepository(Protocol):
    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        raise NotImplementedError

    def list_for_organization(self, organization_id: int) -> Sequence[WorkSchedule]:
        raise NotImplementedError

    def employee_counts(self, organization_id: int) -> dict[int, int]:
        """Number of employees assigned to each schedule of the organization."""

        raise NotImplementedError

    def save(self, schedule: WorkSchedule) -> int:
        """Insert when schedule_id is 0, update otherwise. Returns schedule_id."""

        raise NotImplementedError

    def delete(self, schedule_id: int) -> bool:
        raise NotImplementedError


class ScheduleAdjustmentRepository(Protocol):
    def get_by_id(self, adjustment_id: int) -> Optional[ScheduleAdjustment]:
        raise NotImplementedError

    def create(self, adjustment: ScheduleAdjustment) -> int:
        raise NotImplementedError

    def list_for_organization(self, organization_id: int, *, active_on: Optional[date] = None) -> Sequence[ScheduleAdjustment]:
        raise NotImplementedError

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[ScheduleAdjustment]:
        """Adjustments overlapping [start, end], newest first."""

        raise NotImplementedError

    def delete(self, adjustment_id: int) -> bool:
        raise NotImplementedError
