from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..closing.repository import DecisionRepository
from ..common.formatting import format_minutes
from ..core.constants import TOP_EMPLOYEES_LIMIT
from ..core.enums import OvertimeDestination, Role
from ..core.exceptions import AuthorizationError
from ..payroll.repository import HoursBalanceRepository
from ..users.repository import UserRepository

CSV_FIELDS = [
    "reference_month",
    "user_id",
    "full_name",
    "sector",
    "overtime_hours",
    "destination",
    "bank_hours",
    "payment_hours",
    "payment_amount",
    "finalized",
]


@dataclass(frozen=True)
class OvertimeReport:
    total_overtime_minutes: int
    total_bank_minutes: int
    total_payment_minutes: int
    total_balance_minutes: int
    count_by_destination: dict[str, int]
    by_month: list[dict]
    top_employees: list[dict]
    rows: list[dict]


class OvertimeReportService:
    """Aggregates monthly overtime decisions and current balances of an organization."""

    def __init__(self, decisions: DecisionRepository, balances: HoursBalanceRepository, users: UserRepository):
        self._decisions = decisions
        self._balances = balances
        self._users = users

    def build(
        self,
        *,
        current_role: Role,
        organization_id: int,
        start_month: Optional[date] = None,
        end_month: Optional[date] = None,
    ) -> OvertimeReport:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem ver relatórios")

        people = {u.user_id: u for u in self._users.list_for_organization(organization_id)}
        decisions = [
            d
            for d in self._decisions.list_for_organization(organization_id=organization_id)
            if (start_month is None or d.reference_month >= start_month.replace(day=1))
            and (end_month is None or d.reference_month <= end_month.replace(day=1))
        ]

        count_by_destination = {d.value: 0 for d in OvertimeDestination}
        month_map: dict[date, dict] = {}
        per_user: dict[int, int] = {}
        rows: list[dict] = []

        for d in decisions:
            count_by_destination[d.destination.value] += 1

            m = month_map.setdefault(
                d.reference_month,
                {"reference_month": d.reference_month, "overtime_minutes": 0, "bank_minutes": 0, "payment_minutes": 0},
            )
            m["overtime_minutes"] += d.overtime_minutes
            m["bank_minutes"] += d.bank_minutes
            m["payment_minutes"] += d.payment_minutes

            per_user[d.user_id] = per_user.get(d.user_id, 0) + d.overtime_minutes

            person = people.get(d.user_id)
            rows.append(
                {
                    "reference_month": d.reference_month.strftime("%Y-%m"),
                    "user_id": d.user_id,
                    "full_name": person.full_name if person else "-",
                    "sector": (person.sector if person else None) or "-",
                    "overtime_hours": format_minutes(d.overtime_minutes),
                    "destination": d.destination.value,
                    "bank_hours": format_minutes(d.bank_minutes),
                    "payment_hours": format_minutes(d.payment_minutes),
                    "payment_amount": f"{d.payment_amount:.2f}",
                    "finalized": "sim" if d.finalized else "não",
                }
            )

        top = sorted(per_user.items(), key=lambda kv: kv[1], reverse=True)[:TOP_EMPLOYEES_LIMIT]
        top_employees = [
            {
                "user_id": uid,
                "full_name": people[uid].full_name if uid in people else "-",
                "overtime_minutes": minutes,
            }
            for uid, minutes in top
        ]

        balances = self._balances.list_for_organization(organization_id)
        return OvertimeReport(
            total_overtime_minutes=sum(d.overtime_minutes for d in decisions),
            total_bank_minutes=sum(d.bank_minutes for d in decisions),
            total_payment_minutes=sum(d.payment_minutes for d in decisions),
            total_balance_minutes=sum(b.balance_minutes for b in balances),
            count_by_destination=count_by_destination,
            by_month=[month_map[k] for k in sorted(month_map)],
            top_employees=top_employees,
            rows=rows,
        )


def report_csv(report: OvertimeReport) -> bytes:
    """CSV of the decision rows, UTF-8 with BOM so spreadsheet tools pick the encoding."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for row in report.rows:
        writer.writerow(row)
    return out.getvalue().encode("utf-8-sig")
