from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from ponto_certo.closing.model import MonthlyOvertimeDecision
from ponto_certo.core.enums import OvertimeDestination, Role
from ponto_certo.core.exceptions import AuthorizationError
from ponto_certo.reports.service import CSV_FIELDS, OvertimeReportService, report_csv


class FakeDecisionRepo:
    def __init__(self, rows):
        self.rows = list(rows)

    def list_for_organization(self, *, organization_id):
        return [d for d in self.rows if d.organization_id == organization_id]


def _decision(user_id, month, minutes, destination, *, finalized=False, amount="0"):
    bank = {"bank": minutes, "payment": 0, "mixed": minutes // 2}[destination.value]
    return MonthlyOvertimeDecision(
        organization_id=1,
        user_id=user_id,
        reference_month=month,
        overtime_minutes=minutes,
        destination=destination,
        bank_minutes=bank,
        payment_minutes=minutes - bank,
        payment_amount=Decimal(amount),
        finalized=finalized,
    )


JAN, FEB, MAR = date(2025, 1, 1), date(2025, 2, 1), date(2025, 3, 1)


@pytest.fixture
def svc(users_repo, balances_repo, profile_factory):
    users_repo.add(profile_factory(1, full_name="Ana", sector="Vendas"))
    users_repo.add(profile_factory(2, full_name="Bruno", sector=None))
    balances_repo.put(1, 1, 120)
    balances_repo.put(2, 1, -30)
    decisions = FakeDecisionRepo(
        [
            _decision(1, JAN, 120, OvertimeDestination.BANK, finalized=True),
            _decision(2, JAN, 90, OvertimeDestination.PAYMENT, amount="45.50"),
            _decision(1, FEB, 61, OvertimeDestination.MIXED),
            _decision(2, MAR, 300, OvertimeDestination.BANK),
        ]
    )
    return OvertimeReportService(decisions, balances_repo, users_repo)


def test_totals_and_counts(svc):
    report = svc.build(current_role=Role.ADMIN, organization_id=1)

    assert report.total_overtime_minutes == 571
    assert report.total_bank_minutes == 120 + 30 + 300
    assert report.total_payment_minutes == 90 + 31
    assert report.total_balance_minutes == 90
    assert report.count_by_destination == {"bank": 2, "payment": 1, "mixed": 1}


def test_by_month_and_top_employees(svc):
    report = svc.build(current_role=Role.ADMIN, organization_id=1)

    assert [m["reference_month"] for m in report.by_month] == [JAN, FEB, MAR]
    assert report.by_month[0]["overtime_minutes"] == 210
    assert [(e["full_name"], e["overtime_minutes"]) for e in report.top_employees] == [("Bruno", 390), ("Ana", 181)]


def test_month_range_filter(svc):
    report = svc.build(current_role=Role.ADMIN, organization_id=1, start_month=date(2025, 2, 15), end_month=FEB)

    assert report.total_overtime_minutes == 61
    assert report.count_by_destination == {"bank": 0, "payment": 0, "mixed": 1}


def test_rows_are_formatted(svc):
    report = svc.build(current_role=Role.ADMIN, organization_id=1, end_month=JAN)

    first, second = report.rows
    assert first["reference_month"] == "2025-01"
    assert first["overtime_hours"] == "02:00"
    assert first["finalized"] == "sim"
    assert second["sector"] == "-"
    assert second["payment_amount"] == "45.50"
    assert second["finalized"] == "não"


def test_csv_has_bom_and_header(svc):
    data = report_csv(svc.build(current_role=Role.ADMIN, organization_id=1))

    assert data.startswith(b"\xef\xbb\xbf")
    lines = data.decode("utf-8-sig").splitlines()
    assert lines[0] == ",".join(CSV_FIELDS)
    assert len(lines) == 5
    assert "Bruno" in lines[2]


def test_only_admin(svc):
    with pytest.raises(AuthorizationError):
        svc.build(current_role=Role.EMPLOYEE, organization_id=1)
