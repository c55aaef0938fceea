from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> Holiday:
        return Holiday(
            holiday_id=int(r["holiday_id"]),
            holiday_date=r["holiday_date"],
            name=r["name"],
            holiday_type=r["holiday_type"],
        )

    def list_between(self, organization_id: int, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT holiday_id, holiday_date, name, holiday_type
                FROM holidays
                WHERE organization_id=%s AND holiday_date BETWEEN %s AND %s
                ORDER BY holiday_date
                """,
                (int(organization_id), start, end),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def get_by_id(self, holiday_id: int) -> Optional[tuple[int, Holiday]]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT holiday_id, organization_id, holiday_date, name, holiday_type FROM holidays WHERE holiday_id=%s",
                (int(holiday_id),),
            )
            r = fetchone(cur)
            return (int(r["organization_id"]), self._to_model(r)) if r else None

    def create(self, organization_id: int, holiday: Holiday) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO holidays(organization_id, holiday_date, name, holiday_type) VALUES(%s,%s,%s,%s)",
                (int(organization_id), holiday.holiday_date, holiday.name, holiday.holiday_type),
            )
            return int(cur.lastrowid)

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0
