from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from ponto_certo.core.enums import Role
from ponto_certo.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ponto_certo.holiday_calendar.service import HolidayCalendarService
from ponto_certo.organizations.model import CompanyInfo
from ponto_certo.users.model import Address


class FakeHolidayRepo:
    def __init__(self):
        self.rows = {}

    def list_between(self, organization_id, start, end):
        return [h for org, h in self.rows.values() if org == organization_id and start <= h.holiday_date <= end]

    def get_by_id(self, holiday_id):
        return self.rows.get(holiday_id)

    def create(self, organization_id, holiday):
        hid = len(self.rows) + 1
        self.rows[hid] = (organization_id, replace(holiday, holiday_id=hid))
        return hid

    def delete(self, holiday_id):
        return self.rows.pop(holiday_id, None) is not None


class FakeCompanyInfoRepo:
    def __init__(self, states):
        self.states = states

    def get_company_info(self, organization_id):
        state = self.states.get(organization_id)
        if state is None:
            return None
        return CompanyInfo(
            organization_id=organization_id,
            cnpj="11222333000181",
            razao_social="Empresa",
            nome_fantasia="Empresa",
            address=Address(state=state),
        )


@pytest.fixture
def custom():
    return FakeHolidayRepo()


@pytest.fixture
def svc(custom):
    return HolidayCalendarService(custom, FakeCompanyInfoRepo({1: "sp", 2: "XX"}))


def test_national_holidays_without_company_info(svc):
    found = svc.list_between(3, date(2025, 4, 1), date(2025, 4, 30))

    tiradentes = [h for h in found if h.holiday_date == date(2025, 4, 21)]
    assert tiradentes and tiradentes[0].holiday_type == "national"
    assert svc.is_holiday(3, date(2025, 12, 25))
    assert not svc.is_holiday(3, date(2025, 7, 9))


def test_state_holidays_follow_company_address(svc):
    found = svc.list_between(1, date(2025, 7, 1), date(2025, 7, 31))

    assert [(h.holiday_date, h.holiday_type) for h in found] == [(date(2025, 7, 9), "state")]


def test_unknown_state_falls_back_to_national(svc):
    assert not svc.is_holiday(2, date(2025, 7, 9))
    assert svc.is_holiday(2, date(2025, 4, 21))


def test_custom_holidays_are_merged(svc):
    svc.add(current_role=Role.ADMIN, organization_id=1, holiday_date=date(2025, 1, 25), name="Aniversário da cidade",
            holiday_type="municipal")

    assert date(2025, 1, 25) in svc.holiday_dates(1, date(2025, 1, 1), date(2025, 1, 31))
    assert date(2025, 1, 25) not in svc.holiday_dates(3, date(2025, 1, 1), date(2025, 1, 31))


def test_add_rules(svc):
    with pytest.raises(AuthorizationError):
        svc.add(current_role=Role.EMPLOYEE, organization_id=1, holiday_date=date(2025, 1, 25), name="x")
    with pytest.raises(ValidationError):
        svc.add(current_role=Role.ADMIN, organization_id=1, holiday_date=date(2025, 1, 25), name="x",
                holiday_type="national")
    with pytest.raises(ValidationError):
        svc.add(current_role=Role.ADMIN, organization_id=1, holiday_date=date(2025, 1, 25), name="  ")


def test_delete_checks_organization(svc, custom):
    hid = svc.add(current_role=Role.ADMIN, organization_id=1, holiday_date=date(2025, 1, 25), name="Padroeira")

    with pytest.raises(NotFoundError):
        svc.delete(current_role=Role.ADMIN, organization_id=2, holiday_id=hid)

    svc.delete(current_role=Role.ADMIN, organization_id=1, holiday_id=hid)
    assert custom.rows == {}
