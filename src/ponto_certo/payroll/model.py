from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..core.constants import (
    DEFAULT_ALLOWED_RADIUS_METERS,
    DEFAULT_MIXED_HOURS_THRESHOLD,
    DEFAULT_PAYMENT_HOLIDAY_PERCENT,
    DEFAULT_PAYMENT_SATURDAY_PERCENT,
    DEFAULT_PAYMENT_SUNDAY_PERCENT,
    DEFAULT_PAYMENT_WEEKDAY_PERCENT,
    DEFAULT_TOLERANCE_ENTRY_MINUTES,
    DEFAULT_TOLERANCE_MINUTES,
)
from ..core.enums import DayType, FlexibilityMode, LocationMode, OvertimeDestination


@dataclass(frozen=True)
class PayrollSettings:
    """Organization-level payroll, punch window and location configuration."""

    organization_id: int
    cycle_start_day: int = 1
    tolerance_minutes: int = DEFAULT_TOLERANCE_MINUTES
    tolerance_entry_minutes: int = DEFAULT_TOLERANCE_ENTRY_MINUTES
    schedule_flexibility_mode: FlexibilityMode = FlexibilityMode.TOLERANCE
    overtime_strategy: Optional[OvertimeDestination] = None

    bank_validity: str = "6_months"
    bank_custom_months: Optional[int] = None
    bank_daily_limit_hours: float = 2.0
    bank_compensation_ratio: float = 1.0
    bank_sunday_multiplier: float = 1.0
    bank_holiday_multiplier: float = 1.0

    payment_weekday_percent: int = DEFAULT_PAYMENT_WEEKDAY_PERCENT
    payment_saturday_percent: int = DEFAULT_PAYMENT_SATURDAY_PERCENT
    payment_sunday_percent: int = DEFAULT_PAYMENT_SUNDAY_PERCENT
    payment_holiday_percent: int = DEFAULT_PAYMENT_HOLIDAY_PERCENT

    mixed_rule_type: str = "hours_threshold"
    mixed_hours_threshold: int = DEFAULT_MIXED_HOURS_THRESHOLD
    mixed_bank_days: tuple[DayType, ...] = (DayType.WEEKDAY, DayType.SATURDAY)
    mixed_payment_days: tuple[DayType, ...] = (DayType.SUNDAY, DayType.HOLIDAY)

    auto_decision_enabled: bool = False
    auto_decision_threshold_hours: int = 20

    location_mode: LocationMode = LocationMode.DISABLED
    allowed_radius_meters: int = DEFAULT_ALLOWED_RADIUS_METERS
    company_latitude: Optional[float] = None
    company_longitude: Optional[float] = None

    def payment_percent(self, day_type: DayType) -> int:
        return {
            DayType.WEEKDAY: self.payment_weekday_percent,
            DayType.SATURDAY: self.payment_saturday_percent,
            DayType.SUNDAY: self.payment_sunday_percent,
            DayType.HOLIDAY: self.payment_holiday_percent,
        }[day_type]


@dataclass(frozen=True)
class HoursBalance:
    user_id: int
    organization_id: int
    balance_minutes: int = 0
    last_calculated_at: Optional[datetime] = None


@dataclass(frozen=True)
class BalanceBreakdown:
    """Result of recalculating one employee's balance over a closing period."""

    user_id: int
    balance_minutes: int
    worked_minutes: int
    expected_minutes: int
    overtime_by_day_type: dict[DayType, int] = field(default_factory=dict)
    bank_credit_minutes: int = 0
