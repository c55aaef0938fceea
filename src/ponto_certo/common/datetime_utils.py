from __future__ import annotations

from calendar import monthrange
from datetime import date, datetime, time


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (or HH:MM:SS) string into time."""
    value = value.strip()
    fmt = "%H:%M:%S" if value.count(":") == 2 else "%H:%M"
    return datetime.strptime(value, fmt).time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def reference_month(day: date) -> date:
    """First day of the month containing ``day`` (stored as yyyy-MM-01)."""
    return day.replace(day=1)


def shift_month(day: date, months: int) -> date:
    """Move ``day`` by ``months`` months, clamping to the last day of the target month."""
    index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    return date(year, month, min(day.day, monthrange(year, month)[1]))


def month_bounds(month: date) -> tuple[date, date]:
    first = month.replace(day=1)
    return first, first.replace(day=monthrange(first.year, first.month)[1])


def minutes_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds() // 60)


def parse_month(value: str) -> date:
    """Parse YYYY-MM (or a full YYYY-MM-DD) into the first day of that month."""
    value = value.strip()
    fmt = "%Y-%m-%d" if value.count("-") == 2 else "%Y-%m"
    return datetime.strptime(value, fmt).date().replace(day=1)
