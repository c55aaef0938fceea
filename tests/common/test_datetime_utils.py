from datetime import date, datetime, time

import pytest

from ponto_certo.common.datetime_utils import (
    minutes_between,
    month_bounds,
    parse_hhmm,
    parse_month,
    reference_month,
    shift_month,
)


def test_reference_month_is_first_day():
    assert reference_month(date(2025, 3, 17)) == date(2025, 3, 1)


def test_shift_month_clamps_day():
    assert shift_month(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert shift_month(date(2024, 3, 31), -1) == date(2024, 2, 29)
    assert shift_month(date(2025, 11, 15), 3) == date(2026, 2, 15)


def test_month_bounds():
    assert month_bounds(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))


def test_parse_helpers():
    assert parse_hhmm("08:30") == time(8, 30)
    assert parse_hhmm("08:30:15") == time(8, 30, 15)
    assert parse_month("2025-03") == date(2025, 3, 1)
    assert parse_month("2025-03-20") == date(2025, 3, 1)
    with pytest.raises(ValueError):
        parse_month("03/2025")


def test_minutes_between():
    assert minutes_between(datetime(2025, 1, 1, 8, 0), datetime(2025, 1, 1, 12, 30)) == 270
