"""Acquisitive/concessive vacation periods counted from the hire date."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Iterable

from ..common.datetime_utils import shift_month
from ..core.constants import VACATION_DAYS_PER_PERIOD, VACATION_OVERDUE_AFTER_MONTHS
from ..core.enums import RequestStatus
from .model import VacationRequest


@dataclass
class AcquisitivePeriod:
    number: int
    start: date
    end: date
    vacations: list[VacationRequest] = field(default_factory=list)

    @property
    def concessive_start(self) -> date:
        return self.end + timedelta(days=1)

    @property
    def concessive_end(self) -> date:
        return shift_month(self.concessive_start, 12)

    @property
    def used_days(self) -> int:
        return sum(v.days_count for v in self.vacations)

    @property
    def sold_days(self) -> int:
        return sum(v.sell_days for v in self.vacations)

    @property
    def remaining_days(self) -> int:
        return max(0, VACATION_DAYS_PER_PERIOD - self.used_days - self.sold_days)

    def is_complete(self, today: date) -> bool:
        return today >= self.concessive_start

    def is_overdue(self, today: date) -> bool:
        return (
            self.is_complete(today)
            and today > shift_month(self.concessive_start, VACATION_OVERDUE_AFTER_MONTHS)
            and self.used_days == 0
            and self.sold_days == 0
        )


def build_periods(hire_date: date, vacations: Iterable[VacationRequest], today: date) -> list[AcquisitivePeriod]:
    """Yearly periods up to the one containing ``today``, each holding its vacations.

    A vacation belongs to the earliest period whose [start, concessive_end)
    window contains its start date. Rejected requests are ignored.
    """
    periods: list[AcquisitivePeriod] = []
    start = hire_date
    number = 1
    while start <= today:
        next_start = shift_month(hire_date, 12 * number)
        periods.append(AcquisitivePeriod(number=number, start=start, end=next_start - timedelta(days=1)))
        start = next_start
        number += 1

    for vac in sorted(vacations, key=lambda v: v.start_date):
        if vac.status == RequestStatus.REJECTED:
            continue
        for period in periods:
            if period.start <= vac.start_date < period.concessive_end:
                period.vacations.append(vac)
                break
    return periods
