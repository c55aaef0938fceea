from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import DayType, FlexibilityMode, LocationMode, OvertimeDestination
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import HoursBalance, PayrollSettings
from .repository import HoursBalanceRepository, PayrollSettingsRepository

_SETTINGS_COLUMNS = (
    "cycle_start_day",
    "tolerance_minutes",
    "tolerance_entry_minutes",
    "schedule_flexibility_mode",
    "overtime_strategy",
    "bank_validity",
    "bank_custom_months",
    "bank_daily_limit_hours",
    "bank_compensation_ratio",
    "bank_sunday_multiplier",
    "bank_holiday_multiplier",
    "payment_weekday_percent",
    "payment_saturday_percent",
    "payment_sunday_percent",
    "payment_holiday_percent",
    "mixed_rule_type",
    "mixed_hours_threshold",
    "mixed_bank_days",
    "mixed_payment_days",
    "auto_decision_enabled",
    "auto_decision_threshold_hours",
    "location_mode",
    "allowed_radius_meters",
    "company_latitude",
    "company_longitude",
)


def _day_types(value: Optional[str]) -> tuple[DayType, ...]:
    return tuple(DayType(v.strip()) for v in (value or "").split(",") if v.strip())


def _optional_float(value) -> Optional[float]:
    return float(value) if value is not None else None


class MySQLPayrollSettingsRepository(PayrollSettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, organization_id: int) -> Optional[PayrollSettings]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT organization_id, {', '.join(_SETTINGS_COLUMNS)} FROM payroll_settings WHERE organization_id=%s",
                (int(organization_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return PayrollSettings(
                organization_id=int(r["organization_id"]),
                cycle_start_day=int(r["cycle_start_day"]),
                tolerance_minutes=int(r["tolerance_minutes"]),
                tolerance_entry_minutes=int(r["tolerance_entry_minutes"]),
                schedule_flexibility_mode=FlexibilityMode(r["schedule_flexibility_mode"]),
                overtime_strategy=OvertimeDestination(r["overtime_strategy"]) if r.get("overtime_strategy") else None,
                bank_validity=r["bank_validity"],
                bank_custom_months=r.get("bank_custom_months"),
                bank_daily_limit_hours=float(r["bank_daily_limit_hours"]),
                bank_compensation_ratio=float(r["bank_compensation_ratio"]),
                bank_sunday_multiplier=float(r["bank_sunday_multiplier"]),
                bank_holiday_multiplier=float(r["bank_holiday_multiplier"]),
                payment_weekday_percent=int(r["payment_weekday_percent"]),
                payment_saturday_percent=int(r["payment_saturday_percent"]),
                payment_sunday_percent=int(r["payment_sunday_percent"]),
                payment_holiday_percent=int(r["payment_holiday_percent"]),
                mixed_rule_type=r["mixed_rule_type"],
                mixed_hours_threshold=int(r["mixed_hours_threshold"]),
                mixed_bank_days=_day_types(r.get("mixed_bank_days")),
                mixed_payment_days=_day_types(r.get("mixed_payment_days")),
                auto_decision_enabled=as_bool(r["auto_decision_enabled"]),
                auto_decision_threshold_hours=int(r["auto_decision_threshold_hours"]),
                location_mode=LocationMode(r["location_mode"]),
                allowed_radius_meters=int(r["allowed_radius_meters"]),
                company_latitude=_optional_float(r.get("company_latitude")),
                company_longitude=_optional_float(r.get("company_longitude")),
            )

    def save(self, settings: PayrollSettings) -> None:
        values = {
            "cycle_start_day": settings.cycle_start_day,
            "tolerance_minutes": settings.tolerance_minutes,
            "tolerance_entry_minutes": settings.tolerance_entry_minutes,
            "schedule_flexibility_mode": settings.schedule_flexibility_mode.value,
            "overtime_strategy": (settings.overtime_strategy or OvertimeDestination.BANK).value,
            "bank_validity": settings.bank_validity,
            "bank_custom_months": settings.bank_custom_months,
            "bank_daily_limit_hours": settings.bank_daily_limit_hours,
            "bank_compensation_ratio": settings.bank_compensation_ratio,
            "bank_sunday_multiplier": settings.bank_sunday_multiplier,
            "bank_holiday_multiplier": settings.bank_holiday_multiplier,
            "payment_weekday_percent": settings.payment_weekday_percent,
            "payment_saturday_percent": settings.payment_saturday_percent,
            "payment_sunday_percent": settings.payment_sunday_percent,
            "payment_holiday_percent": settings.payment_holiday_percent,
            "mixed_rule_type": settings.mixed_rule_type,
            "mixed_hours_threshold": settings.mixed_hours_threshold,
            "mixed_bank_days": ",".join(d.value for d in settings.mixed_bank_days),
            "mixed_payment_days": ",".join(d.value for d in settings.mixed_payment_days),
            "auto_decision_enabled": int(settings.auto_decision_enabled),
            "auto_decision_threshold_hours": settings.auto_decision_threshold_hours,
            "location_mode": settings.location_mode.value,
            "allowed_radius_meters": settings.allowed_radius_meters,
            "company_latitude": settings.company_latitude,
            "company_longitude": settings.company_longitude,
        }
        columns = ", ".join(values)
        placeholders = ", ".join(["%s"] * len(values))
        updates = ", ".join(f"{c}=VALUES({c})" for c in values)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO payroll_settings(organization_id, {columns})
                VALUES(%s, {placeholders})
                ON DUPLICATE KEY UPDATE {updates}
                """,
                (int(settings.organization_id), *values.values()),
            )


class MySQLHoursBalanceRepository(HoursBalanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> HoursBalance:
        return HoursBalance(
            user_id=int(r["user_id"]),
            organization_id=int(r["organization_id"]),
            balance_minutes=int(r["balance_minutes"]),
            last_calculated_at=r.get("last_calculated_at"),
        )

    def get(self, user_id: int) -> Optional[HoursBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT user_id, organization_id, balance_minutes, last_calculated_at FROM hours_balance WHERE user_id=%s",
                (int(user_id),),
            )
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def list_for_organization(self, organization_id: int) -> Sequence[HoursBalance]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, organization_id, balance_minutes, last_calculated_at
                FROM hours_balance
                WHERE organization_id=%s
                """,
                (int(organization_id),),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def set_balance(self, *, user_id: int, organization_id: int, balance_minutes: int, calculated_at: datetime) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO hours_balance(user_id, organization_id, balance_minutes, last_calculated_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE balance_minutes=VALUES(balance_minutes),
                                        last_calculated_at=VALUES(last_calculated_at)
                """,
                (int(user_id), int(organization_id), int(balance_minutes), calculated_at),
            )
