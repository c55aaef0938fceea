from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Optional

from ..core.constants import MISSING_EXIT_ALERT_MINUTES, OVERTIME_ALERT_MINUTES
from ..core.enums import EmployeeStatus, FlexibilityMode, TimeRecordType
from ..core.exceptions import NotFoundError, ValidationError
from ..payroll.model import PayrollSettings
from ..payroll.settings_service import PayrollSettingsService
from ..schedules.model import WorkSchedule
from ..schedules.repository import WorkScheduleRepository
from ..schedules.service import ScheduleAdjustmentService
from ..users.model import Profile
from ..users.repository import UserRepository
from .factory import PunchStrategyFactory
from .location import check_location
from .model import TimeRecord
from .repository import TimeRecordRepository
from .strategies.base import PunchDecision, PunchWindow
from .worked_time import next_record_type, worked_minutes

logger = logging.getLogger(__name__)

RECORD_LABELS = {
    TimeRecordType.ENTRY: "Entrada",
    TimeRecordType.LUNCH_OUT: "Saída almoço",
    TimeRecordType.LUNCH_IN: "Volta almoço",
    TimeRecordType.EXIT: "Saída",
}


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class TimeRecordService:
    def __init__(
        self,
        records: TimeRecordRepository,
        users: UserRepository,
        schedules: WorkScheduleRepository,
        adjustments: ScheduleAdjustmentService,
        settings: PayrollSettingsService,
        *,
        strategy_factory: Optional[PunchStrategyFactory] = None,
    ):
        self._records = records
        self._users = users
        self._schedules = schedules
        self._adjustments = adjustments
        self._settings = settings
        self._factory = strategy_factory or PunchStrategyFactory()

    def records_on(self, user_id: int, day: date) -> list[TimeRecord]:
        start, end = _day_bounds(day)
        return list(self._records.list_for_user_between(int(user_id), start, end))

    def next_type_for(self, user_id: int, day: date) -> TimeRecordType:
        return next_record_type(self.records_on(user_id, day))

    def _next_type_in_shift(self, user_id: int, work_day: date, now: datetime) -> TimeRecordType:
        if work_day == now.date():
            return self.next_type_for(user_id, work_day)
        # overnight shift: continue the sequence started on the previous day
        shift = self._records.list_for_user_between(int(user_id), _day_bounds(work_day)[0], _day_bounds(now.date())[1])
        return next_record_type(list(shift))

    def _window_for(self, user: Profile, schedule: WorkSchedule, day: date) -> Optional[PunchWindow]:
        # start/end come from the latest adjustment, overtime from any authorizing one
        adjustment = self._adjustments.active_for(user.user_id, day)
        authorization = self._adjustments.overtime_authorization_for(user.user_id, day)
        start = (adjustment and adjustment.custom_start_time) or schedule.start_time
        end = (adjustment and adjustment.custom_end_time) or schedule.end_time
        if not start or not end:
            return None
        return PunchWindow(
            day=day,
            start_time=start,
            end_time=end,
            overtime_authorized=authorization is not None,
            overtime_max_minutes=authorization.overtime_max_minutes if authorization else 0,
        )

    def _decide_on(
        self, user: Profile, schedule: WorkSchedule, day: date, now: datetime, settings: PayrollSettings
    ) -> PunchDecision:
        if schedule.expected_minutes(day, anchor=user.hire_date) == 0:
            if self._adjustments.overtime_authorization_for(user.user_id, day):
                return PunchDecision(allowed=True)
            return PunchDecision(allowed=False, message="Hoje está fora da sua jornada de trabalho")

        window = self._window_for(user, schedule, day)
        if window is None:
            return PunchDecision(allowed=True)
        strategy = self._factory.for_mode(settings.schedule_flexibility_mode)
        return strategy.decide(now=now, window=window, tolerance_minutes=settings.tolerance_entry_minutes)

    def _overnight_from_yesterday(
        self, user: Profile, schedule: WorkSchedule, now: datetime, settings: PayrollSettings
    ) -> Optional[date]:
        """Yesterday, when yesterday's shift crosses midnight and still accepts a punch at ``now``."""
        yesterday = now.date() - timedelta(days=1)
        if schedule.expected_minutes(yesterday, anchor=user.hire_date) == 0:
            return None
        window = self._window_for(user, schedule, yesterday)
        if window is None or window.ends_at.date() == yesterday:
            return None
        return yesterday if self._decide_on(user, schedule, yesterday, now, settings).allowed else None

    def punch_day(self, user: Profile, now: datetime, settings: PayrollSettings) -> tuple[date, PunchDecision]:
        """Work day a punch at ``now`` belongs to, and whether it is allowed.

        An after-midnight punch of an overnight shift belongs to the previous day.
        """
        today = now.date()
        if settings.schedule_flexibility_mode == FlexibilityMode.HOURS_ONLY or not user.work_schedule_id:
            return today, PunchDecision(allowed=True)
        schedule = self._schedules.get_by_id(user.work_schedule_id)
        if not schedule:
            return today, PunchDecision(allowed=True)

        decision = self._decide_on(user, schedule, today, now, settings)
        if not decision.allowed:
            yesterday = self._overnight_from_yesterday(user, schedule, now, settings)
            if yesterday is not None:
                return yesterday, PunchDecision(allowed=True)
        return today, decision

    def punch(
        self,
        *,
        user_id: int,
        now: Optional[datetime] = None,
        latitude: Optional[float] = None,
        longitude: Optional[float] = None,
    ) -> TimeRecord:
        now = now or datetime.now()

        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("Colaborador não encontrado")
        if user.status != EmployeeStatus.ATIVO:
            raise ValidationError("Colaborador afastado ou inativo não pode registrar ponto")

        settings = self._settings.get(user.organization_id)

        work_day, decision = self.punch_day(user, now, settings)
        if not decision.allowed:
            raise ValidationError(decision.message or "Registro fora do horário permitido")

        location = check_location(settings, latitude, longitude)
        if not location.allowed:
            raise ValidationError(location.message or "Localização não permitida")

        record_type = self._next_type_in_shift(user.user_id, work_day, now)
        lat = latitude if location.store_coordinates else None
        lon = longitude if location.store_coordinates else None
        record_id = self._records.create(
            organization_id=user.organization_id,
            user_id=user.user_id,
            record_type=record_type,
            recorded_at=now,
            latitude=lat,
            longitude=lon,
        )
        logger.info("Punch %s recorded for user %s at %s", record_type.value, user.user_id, now.isoformat())
        return TimeRecord(
            record_id=record_id,
            organization_id=user.organization_id,
            user_id=user.user_id,
            record_type=record_type,
            recorded_at=now,
            latitude=lat,
            longitude=lon,
        )

    def timesheet(self, user_id: int, start: date, end: date) -> list[dict]:
        """One row per day with punches and worked time (HH:MM)."""
        records = self._records.list_for_user_between(
            int(user_id), _day_bounds(start)[0], _day_bounds(end)[1]
        )
        by_day: dict[date, list[TimeRecord]] = defaultdict(list)
        for r in records:
            by_day[r.work_date].append(r)

        rows = []
        day = start
        while day <= end:
            day_records = by_day.get(day, [])
            first = {}
            for r in day_records:
                first.setdefault(r.record_type, r.recorded_at.strftime("%H:%M"))
            minutes = worked_minutes(day_records)
            rows.append(
                {
                    "date": day.strftime("%Y-%m-%d"),
                    "entry": first.get(TimeRecordType.ENTRY, "-"),
                    "lunch_out": first.get(TimeRecordType.LUNCH_OUT, "-"),
                    "lunch_in": first.get(TimeRecordType.LUNCH_IN, "-"),
                    "exit": first.get(TimeRecordType.EXIT, "-"),
                    "worked_minutes": minutes,
                    "worked_hours": f"{minutes // 60:02d}:{minutes % 60:02d}",
                }
            )
            day += timedelta(days=1)
        return rows

    def _today_by_user(self, organization_id: int, now: datetime) -> dict[int, list[TimeRecord]]:
        start, end = _day_bounds(now.date())
        grouped: dict[int, list[TimeRecord]] = defaultdict(list)
        for r in self._records.list_for_organization_between(int(organization_id), start, end):
            grouped[r.user_id].append(r)
        return grouped

    def working_now(self, organization_id: int, now: Optional[datetime] = None) -> list[dict]:
        """Employees whose last punch today opened a work interval, or who are on lunch break."""
        now = now or datetime.now()
        today = self._today_by_user(organization_id, now)
        out = []
        for user in self._users.list_for_organization(int(organization_id), status=EmployeeStatus.ATIVO):
            records = today.get(user.user_id)
            if not records:
                continue
            last = max(records, key=lambda r: r.recorded_at)
            if last.record_type in (TimeRecordType.ENTRY, TimeRecordType.LUNCH_IN):
                status = "working"
            elif last.record_type == TimeRecordType.LUNCH_OUT:
                status = "break"
            else:
                continue
            out.append(
                {
                    "user_id": user.user_id,
                    "full_name": user.full_name,
                    "sector": user.sector,
                    "status": status,
                    "since": last.recorded_at.strftime("%H:%M"),
                }
            )
        return out

    def daily_alerts(self, organization_id: int, now: Optional[datetime] = None) -> list[dict]:
        now = now or datetime.now()
        today = self._today_by_user(organization_id, now)
        alerts = []
        for user in self._users.list_for_organization(int(organization_id), status=EmployeeStatus.ATIVO):
            records = today.get(user.user_id)
            if not records:
                continue
            types = {r.record_type for r in records}
            minutes = worked_minutes(records, until=now)
            entry = min((r.recorded_at for r in records if r.record_type == TimeRecordType.ENTRY), default=None)
            base = {
                "user_id": user.user_id,
                "full_name": user.full_name,
                "sector": user.sector,
                "entry_time": entry.strftime("%H:%M") if entry else None,
                "today_minutes": minutes,
            }
            if minutes > OVERTIME_ALERT_MINUTES:
                alerts.append({**base, "alert_type": "overtime"})
            if TimeRecordType.ENTRY in types and TimeRecordType.EXIT not in types and minutes > MISSING_EXIT_ALERT_MINUTES:
                alerts.append({**base, "alert_type": "missing_exit"})
        return alerts
