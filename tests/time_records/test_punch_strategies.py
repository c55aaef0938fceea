from datetime import date, datetime, time

from ponto_certo.core.enums import FlexibilityMode
from ponto_certo.time_records.factory import PunchStrategyFactory
from ponto_certo.time_records.strategies.base import PunchWindow
from ponto_certo.time_records.strategies.fixed_strategy import FixedStrategy
from ponto_certo.time_records.strategies.hours_only_strategy import HoursOnlyStrategy
from ponto_certo.time_records.strategies.tolerance_strategy import ToleranceStrategy

DAY = date(2025, 3, 12)
WINDOW = PunchWindow(day=DAY, start_time=time(8, 0), end_time=time(17, 0))


def at(h, m=0):
    return datetime.combine(DAY, time(h, m))


def test_factory_picks_strategy_by_mode():
    factory = PunchStrategyFactory()
    assert isinstance(factory.for_mode(FlexibilityMode.TOLERANCE), ToleranceStrategy)
    assert isinstance(factory.for_mode(FlexibilityMode.FIXED), FixedStrategy)
    assert isinstance(factory.for_mode("hours_only"), HoursOnlyStrategy)


def test_tolerance_allows_early_entry_within_tolerance():
    strategy = ToleranceStrategy()
    assert strategy.decide(now=at(7, 50), window=WINDOW, tolerance_minutes=10).allowed
    decision = strategy.decide(now=at(7, 49), window=WINDOW, tolerance_minutes=10)
    assert not decision.allowed
    assert "07:50" in decision.message


def test_tolerance_closes_after_end_plus_tolerance():
    strategy = ToleranceStrategy()
    assert strategy.decide(now=at(17, 10), window=WINDOW, tolerance_minutes=10).allowed
    assert not strategy.decide(now=at(17, 11), window=WINDOW, tolerance_minutes=10).allowed


def test_authorized_overtime_extends_the_end():
    window = PunchWindow(
        day=DAY, start_time=time(8, 0), end_time=time(17, 0), overtime_authorized=True, overtime_max_minutes=120
    )
    strategy = ToleranceStrategy()
    assert strategy.decide(now=at(19, 0), window=window, tolerance_minutes=10).allowed
    assert not strategy.decide(now=at(19, 1), window=window, tolerance_minutes=10).allowed


def test_fixed_mode_uses_small_buffer():
    strategy = FixedStrategy()
    assert strategy.decide(now=at(7, 58), window=WINDOW, tolerance_minutes=30).allowed
    assert not strategy.decide(now=at(7, 57), window=WINDOW, tolerance_minutes=30).allowed


def test_hours_only_always_allows():
    assert HoursOnlyStrategy().decide(now=at(3, 0), window=WINDOW, tolerance_minutes=0).allowed


def test_overnight_window_ends_next_day():
    window = PunchWindow(day=DAY, start_time=time(19, 0), end_time=time(7, 0))
    assert window.ends_at == datetime(2025, 3, 13, 7, 0)
