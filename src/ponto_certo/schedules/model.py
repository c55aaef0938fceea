from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import ScheduleAdjustmentType, ScheduleType

# Shift cycles are counted from this day when the employee has no hire date.
SHIFT_EPOCH = date(1970, 1, 1)


@dataclass(frozen=True)
class WorkSchedule:
    """Jornada de trabalho: fixed hours per weekday, or a work x rest shift pattern."""

    schedule_id: int
    organization_id: int
    name: str
    schedule_type: ScheduleType = ScheduleType.FIXED
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    break_start: Optional[time] = None
    break_end: Optional[time] = None
    break_duration_minutes: int = 0
    # Monday .. Sunday
    weekday_hours: tuple[float, ...] = (0, 0, 0, 0, 0, 0, 0)
    shift_work_hours: Optional[int] = None
    shift_rest_hours: Optional[int] = None

    def is_shift_work_day(self, day: date, anchor: Optional[date] = None) -> bool:
        work = int(self.shift_work_hours or 0)
        cycle = work + int(self.shift_rest_hours or 0)
        if work <= 0 or cycle <= 0:
            return False
        elapsed_hours = (day - (anchor or SHIFT_EPOCH)).days * 24
        return elapsed_hours % cycle < work

    def expected_minutes(self, day: date, anchor: Optional[date] = None) -> int:
        if self.schedule_type == ScheduleType.SHIFT:
            return int(self.shift_work_hours or 0) * 60 if self.is_shift_work_day(day, anchor) else 0
        return int(round(float(self.weekday_hours[day.weekday()]) * 60))


@dataclass(frozen=True)
class ScheduleAdjustment:
    """Temporary per-employee schedule override between two dates (inclusive)."""

    adjustment_id: int
    organization_id: int
    user_id: int
    adjustment_type: ScheduleAdjustmentType
    start_date: date
    end_date: date
    custom_start_time: Optional[time] = None
    custom_end_time: Optional[time] = None
    custom_break_start: Optional[time] = None
    custom_break_end: Optional[time] = None
    overtime_authorized: bool = False
    overtime_max_minutes: int = 120
    reason: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date
