from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..core.enums import TimeRecordType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import TimeRecord
from .repository import TimeRecordRepository

_SELECT = """
    SELECT record_id, organization_id, user_id, record_type, recorded_at, latitude, longitude
    FROM time_records
"""


def _to_record(r: dict) -> TimeRecord:
    return TimeRecord(
        record_id=int(r["record_id"]),
        organization_id=int(r["organization_id"]),
        user_id=int(r["user_id"]),
        record_type=TimeRecordType(r["record_type"]),
        recorded_at=r["recorded_at"],
        latitude=float(r["latitude"]) if r.get("latitude") is not None else None,
        longitude=float(r["longitude"]) if r.get("longitude") is not None else None,
    )


class MySQLTimeRecordRepository(TimeRecordRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        organization_id: int,
        user_id: int,
        record_type: TimeRecordType,
        recorded_at: datetime,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records(organization_id, user_id, record_type, recorded_at, latitude, longitude)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(organization_id), int(user_id), record_type.value, recorded_at, latitude, longitude),
            )
            return int(cur.lastrowid)

    def list_for_user_between(self, user_id: int, start: datetime, end: datetime) -> Sequence[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE user_id=%s AND recorded_at >= %s AND recorded_at < %s ORDER BY recorded_at",
                (int(user_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def list_for_organization_between(self, organization_id: int, start: datetime, end: datetime) -> Sequence[TimeRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + " WHERE organization_id=%s AND recorded_at >= %s AND recorded_at < %s ORDER BY user_id, recorded_at",
                (int(organization_id), start, end),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def find_by_type_on_day(self, user_id: int, day: date, record_type: TimeRecordType) -> Optional[TimeRecord]:
        start = datetime.combine(day, datetime.min.time())
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT
                + " WHERE user_id=%s AND record_type=%s AND recorded_at >= %s AND recorded_at < %s"
                + " ORDER BY recorded_at LIMIT 1",
                (int(user_id), record_type.value, start, start + timedelta(days=1)),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def update_recorded_at(self, record_id: int, recorded_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE time_records SET recorded_at=%s WHERE record_id=%s", (recorded_at, int(record_id)))
            return cur.rowcount > 0
