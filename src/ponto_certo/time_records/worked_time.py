from __future__ import annotations

from datetime import datetime
from typing import Iterable, Optional, Sequence

from ..core.enums import TimeRecordType
from .model import TimeRecord

_NEXT_TYPE = {
    TimeRecordType.ENTRY: TimeRecordType.LUNCH_OUT,
    TimeRecordType.LUNCH_OUT: TimeRecordType.LUNCH_IN,
    TimeRecordType.LUNCH_IN: TimeRecordType.EXIT,
    TimeRecordType.EXIT: TimeRecordType.ENTRY,
}

_OPENS = (TimeRecordType.ENTRY, TimeRecordType.LUNCH_IN)


def next_record_type(day_records: Sequence[TimeRecord]) -> TimeRecordType:
    """entry -> lunch_out -> lunch_in -> exit, then a new entry."""
    if not day_records:
        return TimeRecordType.ENTRY
    last = max(day_records, key=lambda r: r.recorded_at)
    return _NEXT_TYPE[last.record_type]


def worked_minutes(day_records: Iterable[TimeRecord], *, until: Optional[datetime] = None) -> int:
    """(lunch_out - entry) + (exit - lunch_in) over a day's records.

    An interval still open at the end is ignored, or counted up to ``until``
    when given.
    """
    total = 0
    opened: Optional[datetime] = None
    for rec in sorted(day_records, key=lambda r: r.recorded_at):
        if rec.record_type in _OPENS:
            opened = rec.recorded_at
        elif opened is not None:
            total += int((rec.recorded_at - opened).total_seconds() // 60)
            opened = None

    if opened is not None and until is not None and until > opened:
        total += int((until - opened).total_seconds() // 60)
    return max(total, 0)
