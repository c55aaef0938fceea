from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime, time

import pytest

from ponto_certo.core.enums import EmployeeStatus, RequestStatus, Role, TimeRecordType
from ponto_certo.payroll.model import HoursBalance
from ponto_certo.time_records.model import TimeRecord
from ponto_certo.users.model import Profile, StatusChange


class FakeUserRepo:
    def __init__(self, users=()):
        self.users: dict[int, Profile] = {u.user_id: u for u in users}
        self.history: list[StatusChange] = []
        self.created = []
        self._next_id = max(self.users, default=0) + 1

    def add(self, user: Profile) -> Profile:
        self.users[user.user_id] = user
        self._next_id = max(self._next_id, user.user_id + 1)
        return user

    def get_by_id(self, user_id):
        return self.users.get(int(user_id))

    def get_by_email(self, email):
        return next((u for u in self.users.values() if u.email == email), None)

    def list_for_organization(self, organization_id, *, status=None):
        return [
            u
            for u in self.users.values()
            if u.organization_id == organization_id and (status is None or u.status == status)
        ]

    def count_by_schedule(self, schedule_id):
        return sum(1 for u in self.users.values() if u.work_schedule_id == schedule_id)

    def create(self, employee):
        uid = self._next_id
        self._next_id += 1
        self.created.append(employee)
        self.users[uid] = Profile(
            user_id=uid,
            organization_id=employee.organization_id,
            full_name=employee.full_name,
            email=employee.email,
            password_hash=employee.password_hash,
            role=employee.role,
            cpf=employee.cpf,
            phone=employee.phone,
            sector=employee.sector,
            position=employee.position,
            hire_date=employee.hire_date,
            work_schedule_id=employee.work_schedule_id,
            address=employee.address,
        )
        return uid

    def update_password(self, user_id, password_hash):
        user = self.users.get(int(user_id))
        if not user:
            return False
        self.users[user.user_id] = replace(user, password_hash=password_hash)
        return True

    def update_profile(self, user_id, changes):
        user = self.users.get(int(user_id))
        if not user or not changes:
            return False
        known = {k: v for k, v in changes.items() if hasattr(user, k)}
        self.users[user.user_id] = replace(user, **known)
        return True

    def update_status(self, user_id, status, specification):
        user = self.users[int(user_id)]
        self.users[user.user_id] = replace(user, status=status, status_specification=specification)
        return True

    def add_status_history(self, **kwargs):
        self.history.append(
            StatusChange(
                history_id=len(self.history) + 1,
                user_id=kwargs["user_id"],
                previous_status=kwargs["previous_status"],
                new_status=kwargs["new_status"],
                previous_specification=kwargs["previous_specification"],
                new_specification=kwargs["new_specification"],
                reason=kwargs["reason"],
                changed_by=kwargs["changed_by"],
                changed_at=datetime(2025, 1, 1, 12, 0),
            )
        )
        return len(self.history)

    def list_status_history(self, user_id):
        return [h for h in self.history if h.user_id == user_id]

    def delete_by_id(self, user_id):
        return self.users.pop(int(user_id), None) is not None


class FakeBalanceRepo:
    def __init__(self):
        self.rows: dict[int, HoursBalance] = {}

    def put(self, user_id, organization_id, minutes):
        self.rows[user_id] = HoursBalance(user_id=user_id, organization_id=organization_id, balance_minutes=minutes)

    def get(self, user_id):
        return self.rows.get(int(user_id))

    def list_for_organization(self, organization_id):
        return [b for b in self.rows.values() if b.organization_id == organization_id]

    def set_balance(self, *, user_id, organization_id, balance_minutes, calculated_at):
        self.rows[user_id] = HoursBalance(
            user_id=user_id,
            organization_id=organization_id,
            balance_minutes=balance_minutes,
            last_calculated_at=calculated_at,
        )


class FakeSettingsRepo:
    def __init__(self, settings=None):
        self.rows = {}
        if settings is not None:
            self.rows[settings.organization_id] = settings

    def get(self, organization_id):
        return self.rows.get(organization_id)

    def save(self, settings):
        self.rows[settings.organization_id] = settings


class FakeTimeRecordRepo:
    def __init__(self):
        self.records: list[TimeRecord] = []

    def add(self, user_id, record_type: TimeRecordType, recorded_at: datetime, organization_id=1):
        self.create(organization_id=organization_id, user_id=user_id, record_type=record_type, recorded_at=recorded_at)

    def create(self, *, organization_id, user_id, record_type, recorded_at, latitude=None, longitude=None):
        rid = len(self.records) + 1
        self.records.append(
            TimeRecord(
                record_id=rid,
                organization_id=organization_id,
                user_id=user_id,
                record_type=record_type,
                recorded_at=recorded_at,
                latitude=latitude,
                longitude=longitude,
            )
        )
        return rid

    def list_for_user_between(self, user_id, start, end):
        return sorted(
            (r for r in self.records if r.user_id == user_id and start <= r.recorded_at < end),
            key=lambda r: r.recorded_at,
        )

    def list_for_organization_between(self, organization_id, start, end):
        return sorted(
            (r for r in self.records if r.organization_id == organization_id and start <= r.recorded_at < end),
            key=lambda r: r.recorded_at,
        )

    def find_by_type_on_day(self, user_id, day, record_type):
        return next(
            (r for r in self.records if r.user_id == user_id and r.work_date == day and r.record_type == record_type),
            None,
        )

    def update_recorded_at(self, record_id, recorded_at):
        for i, r in enumerate(self.records):
            if r.record_id == record_id:
                self.records[i] = replace(r, recorded_at=recorded_at)
                return True
        return False


class FakeScheduleRepo:
    def __init__(self, schedules=()):
        self.schedules = {s.schedule_id: s for s in schedules}

    def get_by_id(self, schedule_id):
        return self.schedules.get(int(schedule_id))

    def list_for_organization(self, organization_id):
        return [s for s in self.schedules.values() if s.organization_id == organization_id]

    def employee_counts(self, organization_id):
        return {}

    def save(self, schedule):
        sid = schedule.schedule_id or max(self.schedules, default=0) + 1
        self.schedules[sid] = replace(schedule, schedule_id=sid)
        return sid

    def delete(self, schedule_id):
        return self.schedules.pop(int(schedule_id), None) is not None


class FakeScheduleAdjustmentRepo:
    def __init__(self):
        self.rows = {}

    def get_by_id(self, adjustment_id):
        return self.rows.get(int(adjustment_id))

    def create(self, adjustment):
        aid = len(self.rows) + 1
        self.rows[aid] = replace(adjustment, adjustment_id=aid)
        return aid

    def list_for_organization(self, organization_id, *, active_on=None):
        return [
            a
            for a in self.rows.values()
            if a.organization_id == organization_id and (active_on is None or a.covers(active_on))
        ]

    def list_for_user_between(self, user_id, start, end):
        found = [a for a in self.rows.values() if a.user_id == user_id and a.start_date <= end and start <= a.end_date]
        return sorted(found, key=lambda a: a.adjustment_id, reverse=True)

    def delete(self, adjustment_id):
        return self.rows.pop(int(adjustment_id), None) is not None


class FakeAdjustmentRequestRepo:
    def __init__(self):
        self.rows = {}

    def create(self, request):
        rid = len(self.rows) + 1
        self.rows[rid] = replace(request, request_id=rid)
        return rid

    def get(self, request_id):
        return self.rows.get(int(request_id))

    def list_for_organization(self, *, organization_id, user_id=None, status=None, limit=200):
        return [
            r
            for r in self.rows.values()
            if r.organization_id == organization_id
            and (user_id is None or r.user_id == user_id)
            and (status is None or r.status == status)
        ][:limit]

    def decide(self, *, request_id, status, reviewed_by, reviewed_at):
        row = self.rows.get(int(request_id))
        if not row or row.status != RequestStatus.PENDING:
            return False
        self.rows[row.request_id] = replace(row, status=status, reviewed_by=reviewed_by, reviewed_at=reviewed_at)
        return True


class FakeVacationRepo:
    def __init__(self):
        self.rows = {}

    def create(self, request):
        rid = len(self.rows) + 1
        self.rows[rid] = replace(request, request_id=rid)
        return rid

    def get(self, request_id):
        return self.rows.get(int(request_id))

    def list_for_user(self, user_id):
        return [v for v in self.rows.values() if v.user_id == user_id]

    def list_for_organization(self, *, organization_id, status=None, limit=500):
        return [
            v
            for v in self.rows.values()
            if v.organization_id == organization_id and (status is None or v.status == status)
        ][:limit]

    def decide(self, *, request_id, status, reviewed_by, reviewed_at, only_pending=True):
        row = self.rows.get(int(request_id))
        if not row or (only_pending and row.status != RequestStatus.PENDING):
            return False
        self.rows[row.request_id] = replace(row, status=status, reviewed_by=reviewed_by, reviewed_at=reviewed_at)
        return True


def make_profile(user_id: int, **overrides) -> Profile:
    values = dict(
        user_id=user_id,
        organization_id=1,
        full_name=f"Colaborador {user_id}",
        email=f"user{user_id}@empresa.com",
        password_hash="x",
        role=Role.EMPLOYEE,
        status=EmployeeStatus.ATIVO,
        sector="Operações",
    )
    values.update(overrides)
    return Profile(**values)


@pytest.fixture
def fixed_now() -> datetime:
    # a Wednesday
    return datetime.combine(date(2025, 3, 12), time(9, 0))


@pytest.fixture
def profile_factory():
    return make_profile


@pytest.fixture
def users_repo() -> FakeUserRepo:
    return FakeUserRepo()


@pytest.fixture
def balances_repo() -> FakeBalanceRepo:
    return FakeBalanceRepo()


@pytest.fixture
def settings_repo() -> FakeSettingsRepo:
    return FakeSettingsRepo()


@pytest.fixture
def records_repo() -> FakeTimeRecordRepo:
    return FakeTimeRecordRepo()


@pytest.fixture
def schedules_repo() -> FakeScheduleRepo:
    return FakeScheduleRepo()


@pytest.fixture
def schedule_adjustments_repo() -> FakeScheduleAdjustmentRepo:
    return FakeScheduleAdjustmentRepo()


@pytest.fixture
def adjustment_requests_repo() -> FakeAdjustmentRequestRepo:
    return FakeAdjustmentRequestRepo()


@pytest.fixture
def vacations_repo() -> FakeVacationRepo:
    return FakeVacationRepo()
