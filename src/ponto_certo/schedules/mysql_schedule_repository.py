from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ScheduleAdjustmentType, ScheduleType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone, normalize_mysql_time
from .model import ScheduleAdjustment, WorkSchedule
from .repository import ScheduleAdjustmentRepository, WorkScheduleRepository

_WEEKDAY_COLUMNS = (
    "monday_hours",
    "tuesday_hours",
    "wednesday_hours",
    "thursday_hours",
    "friday_hours",
    "saturday_hours",
    "sunday_hours",
)

_SCHEDULE_SELECT = f"""
    SELECT schedule_id, organization_id, name, schedule_type, start_time, end_time,
           break_start, break_end, break_duration_minutes, {', '.join(_WEEKDAY_COLUMNS)},
           shift_work_hours, shift_rest_hours
    FROM work_schedules
"""


def _to_schedule(r: dict) -> WorkSchedule:
    return WorkSchedule(
        schedule_id=int(r["schedule_id"]),
        organization_id=int(r["organization_id"]),
        name=r["name"],
        schedule_type=ScheduleType(r["schedule_type"]),
        start_time=normalize_mysql_time(r.get("start_time")),
        end_time=normalize_mysql_time(r.get("end_time")),
        break_start=normalize_mysql_time(r.get("break_start")),
        break_end=normalize_mysql_time(r.get("break_end")),
        break_duration_minutes=int(r.get("break_duration_minutes") or 0),
        weekday_hours=tuple(float(r[c] or 0) for c in _WEEKDAY_COLUMNS),
        shift_work_hours=r.get("shift_work_hours"),
        shift_rest_hours=r.get("shift_rest_hours"),
    )


class MySQLWorkScheduleRepository(WorkScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, schedule_id: int) -> Optional[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SCHEDULE_SELECT + " WHERE schedule_id=%s", (int(schedule_id),))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def list_for_organization(self, organization_id: int) -> Sequence[WorkSchedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SCHEDULE_SELECT + " WHERE organization_id=%s ORDER BY name", (int(organization_id),))
            return [_to_schedule(r) for r in fetchall(cur)]

    def employee_counts(self, organization_id: int) -> dict[int, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT work_schedule_id, COUNT(*) AS total
                FROM profiles
                WHERE organization_id=%s AND work_schedule_id IS NOT NULL
                GROUP BY work_schedule_id
                """,
                (int(organization_id),),
            )
            return {int(r["work_schedule_id"]): int(r["total"]) for r in fetchall(cur)}

    def save(self, schedule: WorkSchedule) -> int:
        values = (
            schedule.name,
            schedule.schedule_type.value,
            schedule.start_time,
            schedule.end_time,
            schedule.break_start,
            schedule.break_end,
            int(schedule.break_duration_minutes),
            *[float(h) for h in schedule.weekday_hours],
            schedule.shift_work_hours,
            schedule.shift_rest_hours,
        )
        with db_cursor(self._conn_factory) as (_, cur):
            if schedule.schedule_id:
                assignments = ", ".join(
                    f"{c}=%s"
                    for c in (
                        "name",
                        "schedule_type",
                        "start_time",
                        "end_time",
                        "break_start",
                        "break_end",
                        "break_duration_minutes",
                        *_WEEKDAY_COLUMNS,
                        "shift_work_hours",
                        "shift_rest_hours",
                    )
                )
                cur.execute(
                    f"UPDATE work_schedules SET {assignments} WHERE schedule_id=%s AND organization_id=%s",
                    values + (int(schedule.schedule_id), int(schedule.organization_id)),
                )
                return int(schedule.schedule_id)

            cur.execute(
                f"""
                INSERT INTO work_schedules(
                    organization_id, name, schedule_type, start_time, end_time, break_start, break_end,
                    break_duration_minutes, {', '.join(_WEEKDAY_COLUMNS)}, shift_work_hours, shift_rest_hours
                )
                VALUES(%s, {', '.join(['%s'] * len(values))})
                """,
                (int(schedule.organization_id),) + values,
            )
            return int(cur.lastrowid)

    def delete(self, schedule_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM work_schedules WHERE schedule_id=%s", (int(schedule_id),))
            return cur.rowcount > 0


_ADJUSTMENT_SELECT = """
    SELECT adjustment_id, organization_id, user_id, adjustment_type, start_date, end_date,
           custom_start_time, custom_end_time, custom_break_start, custom_break_end,
           overtime_authorized, overtime_max_minutes, reason, created_by, created_at
    FROM schedule_adjustments
"""


def _to_adjustment(r: dict) -> ScheduleAdjustment:
    return ScheduleAdjustment(
        adjustment_id=int(r["adjustment_id"]),
        organization_id=int(r["organization_id"]),
        user_id=int(r["user_id"]),
        adjustment_type=ScheduleAdjustmentType(r["adjustment_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        custom_start_time=normalize_mysql_time(r.get("custom_start_time")),
        custom_end_time=normalize_mysql_time(r.get("custom_end_time")),
        custom_break_start=normalize_mysql_time(r.get("custom_break_start")),
        custom_break_end=normalize_mysql_time(r.get("custom_break_end")),
        overtime_authorized=as_bool(r.get("overtime_authorized")),
        overtime_max_minutes=int(r.get("overtime_max_minutes") or 0),
        reason=r.get("reason"),
        created_by=r.get("created_by"),
        created_at=r.get("created_at"),
    )


class MySQLScheduleAdjustmentRepository(ScheduleAdjustmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, adjustment_id: int) -> Optional[ScheduleAdjustment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_ADJUSTMENT_SELECT + " WHERE adjustment_id=%s", (int(adjustment_id),))
            r = fetchone(cur)
            return _to_adjustment(r) if r else None

    def create(self, adjustment: ScheduleAdjustment) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO schedule_adjustments(
                    organization_id, user_id, adjustment_type, start_date, end_date,
                    custom_start_time, custom_end_time, custom_break_start, custom_break_end,
                    overtime_authorized, overtime_max_minutes, reason, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(adjustment.organization_id),
                    int(adjustment.user_id),
                    adjustment.adjustment_type.value,
                    adjustment.start_date,
                    adjustment.end_date,
                    adjustment.custom_start_time,
                    adjustment.custom_end_time,
                    adjustment.custom_break_start,
                    adjustment.custom_break_end,
                    int(adjustment.overtime_authorized),
                    int(adjustment.overtime_max_minutes),
                    adjustment.reason,
                    adjustment.created_by,
                ),
            )
            return int(cur.lastrowid)

    def list_for_organization(self, organization_id: int, *, active_on: Optional[date] = None) -> Sequence[ScheduleAdjustment]:
        clauses = ["organization_id=%s"]
        params: list[object] = [int(organization_id)]
        if active_on is not None:
            clauses.append("start_date <= %s AND end_date >= %s")
            params.extend([active_on, active_on])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _ADJUSTMENT_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY start_date DESC",
                tuple(params),
            )
            return [_to_adjustment(r) for r in fetchall(cur)]

    def list_for_user_between(self, user_id: int, start: date, end: date) -> Sequence[ScheduleAdjustment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _ADJUSTMENT_SELECT
                + " WHERE user_id=%s AND start_date <= %s AND end_date >= %s ORDER BY created_at DESC, adjustment_id DESC",
                (int(user_id), end, start),
            )
            return [_to_adjustment(r) for r in fetchall(cur)]

    def delete(self, adjustment_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM schedule_adjustments WHERE adjustment_id=%s", (int(adjustment_id),))
            return cur.rowcount > 0
