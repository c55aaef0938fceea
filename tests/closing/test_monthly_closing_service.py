from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime

import pytest

from ponto_certo.closing.service import MonthlyClosingService, build_decision
from ponto_certo.core.enums import EmployeeStatus, OvertimeDestination, Role
from ponto_certo.core.exceptions import AuthorizationError, ValidationError
from ponto_certo.payroll.model import PayrollSettings
from ponto_certo.payroll.settings_service import PayrollSettingsService

MARCH = date(2025, 3, 1)


class FakeDecisionRepo:
    """Upsert keyed on (user_id, reference_month), never clearing the finalized flag."""

    def __init__(self):
        self.rows = {}
        self.upserts = 0

    def get(self, *, user_id, reference_month):
        return self.rows.get((user_id, reference_month))

    def list_for_month(self, *, organization_id, reference_month):
        return [d for (_, m), d in self.rows.items() if m == reference_month and d.organization_id == organization_id]

    def list_for_organization(self, *, organization_id):
        return [d for d in self.rows.values() if d.organization_id == organization_id]

    def upsert(self, decision):
        self.upserts += 1
        key = (decision.user_id, decision.reference_month)
        current = self.rows.get(key)
        if current and current.finalized and not decision.finalized:
            decision = replace(
                decision,
                finalized=True,
                finalized_at=current.finalized_at,
                finalized_by=current.finalized_by,
            )
        self.rows[key] = replace(decision, decision_id=current.decision_id if current else len(self.rows) + 1)


@pytest.fixture
def decisions():
    return FakeDecisionRepo()


@pytest.fixture
def service(decisions, balances_repo, users_repo, settings_repo, profile_factory):
    users_repo.add(profile_factory(1, full_name="Ana"))
    users_repo.add(profile_factory(2, full_name="Bruno"))
    users_repo.add(profile_factory(3, full_name="Carla"))
    users_repo.add(profile_factory(4, full_name="Davi", status=EmployeeStatus.INATIVO))
    balances_repo.put(1, 1, 100)
    balances_repo.put(2, 1, -30)
    balances_repo.put(3, 1, 0)
    balances_repo.put(4, 1, 600)
    settings_repo.save(PayrollSettings(organization_id=1, overtime_strategy=OvertimeDestination.MIXED))
    return MonthlyClosingService(decisions, balances_repo, users_repo, PayrollSettingsService(settings_repo))


def test_build_decision_uses_split_rules():
    d = build_decision(
        organization_id=1,
        user_id=9,
        reference_month=date(2025, 3, 17),
        overtime_minutes=101,
        destination=OvertimeDestination.MIXED,
    )
    assert d.reference_month == MARCH
    assert (d.bank_minutes, d.payment_minutes) == (50, 51)
    assert d.finalized is False


def test_closing_lists_active_employees_with_balance(service):
    summary = service.build_closing(organization_id=1, reference_month=MARCH)

    assert [r.user_id for r in summary.rows] == [1, 2]
    first = summary.rows[0]
    assert first.decision.destination == OvertimeDestination.MIXED
    assert (first.decision.bank_minutes, first.decision.payment_minutes) == (50, 50)
    assert first.persisted is False


def test_default_destination_is_bank_without_settings(decisions, balances_repo, users_repo, settings_repo, profile_factory):
    users_repo.add(profile_factory(1))
    balances_repo.put(1, 1, 45)
    svc = MonthlyClosingService(decisions, balances_repo, users_repo, PayrollSettingsService(settings_repo))

    row = svc.build_closing(organization_id=1, reference_month=MARCH).rows[0]
    assert row.decision.destination == OvertimeDestination.BANK
    assert (row.decision.bank_minutes, row.decision.payment_minutes) == (45, 0)


def test_set_destination_persists_edited_decision(service, decisions):
    d = service.set_destination(
        current_role=Role.ADMIN,
        organization_id=1,
        user_id=1,
        reference_month=MARCH,
        destination=OvertimeDestination.PAYMENT,
    )

    assert d.is_edited is True
    stored = decisions.get(user_id=1, reference_month=MARCH)
    assert (stored.bank_minutes, stored.payment_minutes) == (0, 100)


def test_negative_balance_passes_through(service, decisions):
    service.set_destination(
        current_role=Role.ADMIN, organization_id=1, user_id=2, reference_month=MARCH, destination=OvertimeDestination.BANK
    )
    stored = decisions.get(user_id=2, reference_month=MARCH)
    assert (stored.overtime_minutes, stored.bank_minutes, stored.payment_minutes) == (-30, -30, 0)


def test_finalize_marks_rows_and_counts(service, decisions):
    now = datetime(2025, 4, 2, 10, 0)
    count = service.finalize(
        current_role=Role.ADMIN,
        organization_id=1,
        admin_user_id=99,
        user_ids=[1, 2],
        reference_month=MARCH,
        now=now,
    )

    assert count == 2
    stored = decisions.get(user_id=1, reference_month=MARCH)
    assert stored.finalized is True
    assert stored.finalized_at == now
    assert stored.finalized_by == 99


def test_finalize_twice_leaves_rows_untouched(service, decisions):
    first = datetime(2025, 4, 2, 10, 0)
    service.finalize(
        current_role=Role.ADMIN, organization_id=1, admin_user_id=99, user_ids=[1], reference_month=MARCH, now=first
    )
    upserts = decisions.upserts

    count = service.finalize(
        current_role=Role.ADMIN,
        organization_id=1,
        admin_user_id=7,
        user_ids=[1],
        reference_month=MARCH,
        now=datetime(2025, 4, 3),
    )

    assert count == 0
    assert decisions.upserts == upserts
    assert decisions.get(user_id=1, reference_month=MARCH).finalized_at == first


def test_finalized_decision_cannot_be_edited(service):
    service.finalize(
        current_role=Role.ADMIN, organization_id=1, admin_user_id=99, user_ids=[1], reference_month=MARCH
    )
    with pytest.raises(ValidationError):
        service.set_destination(
            current_role=Role.ADMIN,
            organization_id=1,
            user_id=1,
            reference_month=MARCH,
            destination=OvertimeDestination.PAYMENT,
        )


def test_bulk_update_skips_finalized_rows(service, decisions):
    service.finalize(
        current_role=Role.ADMIN, organization_id=1, admin_user_id=99, user_ids=[1], reference_month=MARCH
    )

    updated = service.bulk_set_destination(
        current_role=Role.ADMIN,
        organization_id=1,
        user_ids=[1, 2],
        reference_month=MARCH,
        destination=OvertimeDestination.PAYMENT,
    )

    assert [d.user_id for d in updated] == [2]
    row1 = decisions.get(user_id=1, reference_month=MARCH)
    assert row1.finalized is True
    assert row1.destination == OvertimeDestination.MIXED


def test_finalize_empty_selection_is_rejected(service):
    with pytest.raises(ValidationError):
        service.finalize(
            current_role=Role.ADMIN, organization_id=1, admin_user_id=99, user_ids=[], reference_month=MARCH
        )


def test_finalize_unknown_employee_is_rejected(service):
    with pytest.raises(ValidationError):
        service.finalize(
            current_role=Role.ADMIN, organization_id=1, admin_user_id=99, user_ids=[3], reference_month=MARCH
        )


def test_closing_requires_admin(service):
    with pytest.raises(AuthorizationError):
        service.finalize(
            current_role=Role.EMPLOYEE, organization_id=1, admin_user_id=1, user_ids=[1], reference_month=MARCH
        )


def test_summary_totals(service):
    service.set_destination(
        current_role=Role.ADMIN, organization_id=1, user_id=1, reference_month=MARCH, destination=OvertimeDestination.BANK
    )
    summary = service.build_closing(organization_id=1, reference_month=MARCH)

    # Ana 100 to bank, Bruno -30 mixed -> -15 / -15
    assert summary.total_bank_minutes == 85
    assert summary.total_payment_minutes == -15
    assert summary.finalized_count == 0
