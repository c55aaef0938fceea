from datetime import datetime

from ponto_certo.core.enums import TimeRecordType as T
from ponto_certo.time_records.model import TimeRecord
from ponto_certo.time_records.worked_time import next_record_type, worked_minutes


def rec(record_type, h, m=0):
    return TimeRecord(
        record_id=0, organization_id=1, user_id=1, record_type=record_type, recorded_at=datetime(2025, 3, 12, h, m)
    )


def test_next_type_cycles():
    assert next_record_type([]) == T.ENTRY
    assert next_record_type([rec(T.ENTRY, 8)]) == T.LUNCH_OUT
    assert next_record_type([rec(T.ENTRY, 8), rec(T.LUNCH_OUT, 12)]) == T.LUNCH_IN
    assert next_record_type([rec(T.ENTRY, 8), rec(T.LUNCH_OUT, 12), rec(T.LUNCH_IN, 13)]) == T.EXIT
    assert next_record_type([rec(T.ENTRY, 8), rec(T.LUNCH_OUT, 12), rec(T.LUNCH_IN, 13), rec(T.EXIT, 17)]) == T.ENTRY


def test_full_day():
    day = [rec(T.ENTRY, 8), rec(T.LUNCH_OUT, 12), rec(T.LUNCH_IN, 13), rec(T.EXIT, 17, 30)]
    assert worked_minutes(day) == 8 * 60 + 30


def test_open_interval_ignored_unless_until_given():
    day = [rec(T.ENTRY, 8)]
    assert worked_minutes(day) == 0
    assert worked_minutes(day, until=datetime(2025, 3, 12, 10, 15)) == 135


def test_lunch_break_not_counted_while_open():
    day = [rec(T.ENTRY, 8), rec(T.LUNCH_OUT, 12)]
    assert worked_minutes(day, until=datetime(2025, 3, 12, 12, 45)) == 240
