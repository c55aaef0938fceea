from __future__ import annotations

from datetime import date, time

import pytest

from ponto_certo.core.enums import Role, ScheduleType
from ponto_certo.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ponto_certo.schedules.model import WorkSchedule
from ponto_certo.schedules.service import WorkScheduleService


def _schedule(**overrides):
    values = dict(
        schedule_id=0,
        organization_id=1,
        name="Comercial",
        start_time=time(8, 0),
        end_time=time(17, 0),
        weekday_hours=(8, 8, 8, 8, 8, 0, 0),
    )
    values.update(overrides)
    return WorkSchedule(**values)


@pytest.fixture
def service(schedules_repo, users_repo):
    return WorkScheduleService(schedules_repo, users_repo)


def test_create_and_update(service, schedules_repo):
    sid = service.save(current_role=Role.ADMIN, schedule=_schedule(name="  Comercial "))
    assert schedules_repo.get_by_id(sid).name == "Comercial"

    service.save(current_role=Role.ADMIN, schedule=_schedule(schedule_id=sid, name="Comercial 44h"))
    assert schedules_repo.get_by_id(sid).name == "Comercial 44h"


@pytest.mark.parametrize(
    "overrides",
    [
        {"name": ""},
        {"weekday_hours": (8, 8, 8)},
        {"weekday_hours": (25, 8, 8, 8, 8, 0, 0)},
        {"start_time": time(8, 0), "end_time": time(8, 0)},
        {"schedule_type": ScheduleType.SHIFT, "shift_work_hours": 12, "shift_rest_hours": None},
    ],
)
def test_invalid_schedules(service, overrides):
    with pytest.raises(ValidationError):
        service.save(current_role=Role.ADMIN, schedule=_schedule(**overrides))


def test_only_admin_manages_schedules(service):
    with pytest.raises(AuthorizationError):
        service.save(current_role=Role.EMPLOYEE, schedule=_schedule())


def test_delete_blocked_while_employees_are_linked(service, schedules_repo, users_repo, profile_factory):
    sid = service.save(current_role=Role.ADMIN, schedule=_schedule())
    users_repo.add(profile_factory(1, work_schedule_id=sid))
    users_repo.add(profile_factory(2, work_schedule_id=sid))

    with pytest.raises(ValidationError, match="2 colaborador"):
        service.delete(current_role=Role.ADMIN, organization_id=1, schedule_id=sid)
    assert schedules_repo.get_by_id(sid) is not None


def test_delete_unused_schedule(service, schedules_repo):
    sid = service.save(current_role=Role.ADMIN, schedule=_schedule())
    service.delete(current_role=Role.ADMIN, organization_id=1, schedule_id=sid)
    assert schedules_repo.get_by_id(sid) is None


def test_schedule_from_other_org_is_not_found(service):
    sid = service.save(current_role=Role.ADMIN, schedule=_schedule(organization_id=2))
    with pytest.raises(NotFoundError):
        service.delete(current_role=Role.ADMIN, organization_id=1, schedule_id=sid)


def test_expected_minutes_fixed_schedule():
    s = _schedule(weekday_hours=(8, 8, 8, 8, 8, 4, 0))
    assert s.expected_minutes(date(2025, 3, 12)) == 480
    assert s.expected_minutes(date(2025, 3, 15)) == 240
    assert s.expected_minutes(date(2025, 3, 16)) == 0


def test_shift_12x36_alternates_days():
    s = _schedule(schedule_type=ScheduleType.SHIFT, shift_work_hours=12, shift_rest_hours=36)
    anchor = date(2025, 3, 1)
    assert s.expected_minutes(date(2025, 3, 1), anchor=anchor) == 720
    assert s.expected_minutes(date(2025, 3, 2), anchor=anchor) == 0
    assert s.expected_minutes(date(2025, 3, 3), anchor=anchor) == 720
