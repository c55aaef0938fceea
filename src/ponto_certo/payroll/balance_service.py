from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Iterable, Optional

from ..common.datetime_utils import reference_month as month_of, shift_month
from ..core.enums import AdjustmentRequestType, DayType, EmployeeStatus, RequestStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..holiday_calendar.service import HolidayCalendarService
from ..requests.repository import AdjustmentRequestRepository, VacationRequestRepository
from ..schedules.repository import WorkScheduleRepository
from ..time_records.repository import TimeRecordRepository
from ..time_records.worked_time import worked_minutes
from ..users.model import Profile
from ..users.repository import UserRepository
from .model import BalanceBreakdown, HoursBalance, PayrollSettings
from .repository import HoursBalanceRepository
from .settings_service import PayrollSettingsService

logger = logging.getLogger(__name__)


def day_type(day: date, holiday_dates: Iterable[date] = ()) -> DayType:
    if day in set(holiday_dates):
        return DayType.HOLIDAY
    if day.weekday() == 5:
        return DayType.SATURDAY
    if day.weekday() == 6:
        return DayType.SUNDAY
    return DayType.WEEKDAY


def daily_balance(worked: int, expected: int, tolerance_minutes: int) -> int:
    """Signed difference for one day; differences inside the tolerance count as zero.

    A day with nothing expected (rest day, holiday) turns all worked time into overtime.
    """
    if expected <= 0:
        return max(int(worked), 0)
    diff = int(worked) - int(expected)
    return 0 if abs(diff) <= int(tolerance_minutes) else diff


def closing_period(reference_month: date, cycle_start_day: int) -> tuple[date, date]:
    """Dates covered by a monthly closing.

    With ``cycle_start_day`` 1 it is the calendar month; otherwise it runs from
    that day of the previous month to the day before it in the reference month.
    """
    month = month_of(reference_month)
    if cycle_start_day <= 1:
        return month, shift_month(month, 1) - timedelta(days=1)
    start = shift_month(month, -1).replace(day=cycle_start_day)
    return start, month.replace(day=cycle_start_day) - timedelta(days=1)


def bank_credit_minutes(settings: PayrollSettings, days_by_type: dict[DayType, list[int]]) -> int:
    """Minutes credited to the bank after the daily limit, multipliers and compensation ratio."""
    daily_limit = int(round(settings.bank_daily_limit_hours * 60))
    multiplier = {
        DayType.SUNDAY: settings.bank_sunday_multiplier,
        DayType.HOLIDAY: settings.bank_holiday_multiplier,
    }
    total = 0.0
    for kind, per_day in days_by_type.items():
        capped = sum(min(m, daily_limit) if daily_limit > 0 else m for m in per_day)
        total += capped * multiplier.get(kind, 1.0)
    return int(round(total * settings.bank_compensation_ratio))


class HoursBalanceService:
    """Recalculates each employee's hours balance from punches over a closing period."""

    def __init__(
        self,
        balances: HoursBalanceRepository,
        records: TimeRecordRepository,
        users: UserRepository,
        schedules: WorkScheduleRepository,
        holidays: HolidayCalendarService,
        settings: PayrollSettingsService,
        vacations: VacationRequestRepository,
        adjustments: AdjustmentRequestRepository,
    ):
        self._balances = balances
        self._records = records
        self._users = users
        self._schedules = schedules
        self._holidays = holidays
        self._settings = settings
        self._vacations = vacations
        self._adjustments = adjustments

    def get_balance(self, user_id: int) -> HoursBalance:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Colaborador não encontrado")
        return self._balances.get(user.user_id) or HoursBalance(user_id=user.user_id, organization_id=user.organization_id)

    def _excused_days(self, user: Profile, start: date, end: date) -> set[date]:
        days: set[date] = set()
        for v in self._vacations.list_for_user(user.user_id):
            if v.status == RequestStatus.APPROVED:
                days.update(d for d in v.days() if start <= d <= end)

        certificates = self._adjustments.list_for_organization(
            organization_id=user.organization_id, user_id=user.user_id, status=RequestStatus.APPROVED
        )
        for req in certificates:
            if req.request_type != AdjustmentRequestType.MEDICAL_CERTIFICATE or not req.absence_start:
                continue
            day = req.absence_start
            last = req.absence_end or req.absence_start
            while day <= last:
                if start <= day <= end:
                    days.add(day)
                day += timedelta(days=1)
        return days

    def breakdown(self, user: Profile, start: date, end: date) -> BalanceBreakdown:
        settings = self._settings.get(user.organization_id)
        schedule = self._schedules.get_by_id(user.work_schedule_id) if user.work_schedule_id else None
        holiday_dates = self._holidays.holiday_dates(user.organization_id, start, end)
        excused = self._excused_days(user, start, end)

        records = self._records.list_for_user_between(
            user.user_id, datetime.combine(start, time.min), datetime.combine(end + timedelta(days=1), time.min)
        )
        by_day: dict[date, list] = defaultdict(list)
        for r in records:
            by_day[r.work_date].append(r)

        balance = worked_total = expected_total = 0
        overtime: dict[DayType, int] = defaultdict(int)
        per_day: dict[DayType, list[int]] = defaultdict(list)

        day = max(start, user.hire_date) if user.hire_date else start
        while day <= end:
            worked = worked_minutes(by_day.get(day, []))
            kind = day_type(day, holiday_dates)
            if schedule is None:
                # no schedule to compare against
                expected = worked
            elif kind == DayType.HOLIDAY or day in excused:
                expected = 0
            else:
                expected = schedule.expected_minutes(day, anchor=user.hire_date)

            diff = daily_balance(worked, expected, settings.tolerance_minutes)
            if day in excused and worked == 0:
                diff = 0

            balance += diff
            worked_total += worked
            expected_total += expected
            if diff > 0:
                overtime[kind] += diff
                per_day[kind].append(diff)
            day += timedelta(days=1)

        return BalanceBreakdown(
            user_id=user.user_id,
            balance_minutes=balance,
            worked_minutes=worked_total,
            expected_minutes=expected_total,
            overtime_by_day_type=dict(overtime),
            bank_credit_minutes=bank_credit_minutes(settings, dict(per_day)),
        )

    def recalculate(self, *, user_id: int, start: date, end: date, now: Optional[datetime] = None) -> BalanceBreakdown:
        now = now or datetime.now()
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Colaborador não encontrado")

        end = min(end, now.date())
        if start > end:
            raise ValidationError("Período ainda não iniciado")

        result = self.breakdown(user, start, end)
        self._balances.set_balance(
            user_id=user.user_id,
            organization_id=user.organization_id,
            balance_minutes=result.balance_minutes,
            calculated_at=now,
        )
        return result

    def recalculate_month(self, *, organization_id: int, reference_month: date, now: Optional[datetime] = None) -> list[BalanceBreakdown]:
        now = now or datetime.now()
        settings = self._settings.get(organization_id)
        start, end = closing_period(reference_month, settings.cycle_start_day)
        if start > now.date():
            raise ValidationError("Período ainda não iniciado")

        results = [
            self.recalculate(user_id=u.user_id, start=start, end=end, now=now)
            for u in self._users.list_for_organization(int(organization_id), status=EmployeeStatus.ATIVO)
        ]
        logger.info(
            "Recalculated %d balances for organization %s (%s..%s)", len(results), organization_id, start, end
        )
        return results
