from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Iterable, Optional

from ..common.datetime_utils import reference_month as month_of
from ..core.enums import EmployeeStatus, OvertimeDestination, Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..payroll.calculator.destinations import split_overtime
from ..payroll.repository import HoursBalanceRepository
from ..payroll.settings_service import PayrollSettingsService
from ..users.repository import UserRepository
from .model import ClosingRow, ClosingSummary, MonthlyOvertimeDecision
from .repository import DecisionRepository

logger = logging.getLogger(__name__)


def build_decision(
    *,
    organization_id: int,
    user_id: int,
    reference_month: date,
    overtime_minutes: int,
    destination: OvertimeDestination,
    is_edited: bool = False,
) -> MonthlyOvertimeDecision:
    split = split_overtime(overtime_minutes, destination)
    return MonthlyOvertimeDecision(
        organization_id=int(organization_id),
        user_id=int(user_id),
        reference_month=month_of(reference_month),
        overtime_minutes=int(overtime_minutes),
        destination=OvertimeDestination(destination),
        bank_minutes=split.bank_minutes,
        payment_minutes=split.payment_minutes,
        is_edited=is_edited,
    )


class MonthlyClosingService:
    """Monthly overtime closing: pick a destination per employee, then finalize.

    Finalization is one-way; this service offers no operation that clears it.
    """

    def __init__(
        self,
        decisions: DecisionRepository,
        balances: HoursBalanceRepository,
        users: UserRepository,
        settings: PayrollSettingsService,
    ):
        self._decisions = decisions
        self._balances = balances
        self._users = users
        self._settings = settings

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem realizar o fechamento")

    def build_closing(self, *, organization_id: int, reference_month: date) -> ClosingSummary:
        """Active employees with a non-zero balance and their stored or default decision."""
        month = month_of(reference_month)
        default = self._settings.default_destination(organization_id)
        balances = {b.user_id: b.balance_minutes for b in self._balances.list_for_organization(int(organization_id))}
        stored = {d.user_id: d for d in self._decisions.list_for_month(organization_id=int(organization_id), reference_month=month)}

        rows = []
        for user in self._users.list_for_organization(int(organization_id), status=EmployeeStatus.ATIVO):
            balance = int(balances.get(user.user_id, 0))
            if balance == 0 and user.user_id not in stored:
                continue
            decision = stored.get(user.user_id) or build_decision(
                organization_id=organization_id,
                user_id=user.user_id,
                reference_month=month,
                overtime_minutes=balance,
                destination=default,
            )
            rows.append(
                ClosingRow(
                    user_id=user.user_id,
                    full_name=user.full_name,
                    sector=user.sector,
                    balance_minutes=balance,
                    decision=decision,
                    persisted=user.user_id in stored,
                )
            )
        return ClosingSummary(reference_month=month, rows=rows)

    def _rows_for(self, summary: ClosingSummary, user_ids: Iterable[int]) -> list[ClosingRow]:
        by_user = {r.user_id: r for r in summary.rows}
        selected = []
        for uid in dict.fromkeys(int(u) for u in user_ids):
            row = by_user.get(uid)
            if row is None:
                raise ValidationError(f"Colaborador {uid} não faz parte do fechamento deste mês")
            selected.append(row)
        if not selected:
            raise ValidationError("Selecione ao menos um colaborador")
        return selected

    def set_destination(
        self,
        *,
        current_role: Role,
        organization_id: int,
        user_id: int,
        reference_month: date,
        destination: OvertimeDestination,
    ) -> MonthlyOvertimeDecision:
        self._require_admin(current_role)
        summary = self.build_closing(organization_id=organization_id, reference_month=reference_month)
        row = self._rows_for(summary, [user_id])[0]
        if row.decision.finalized:
            raise ValidationError("Decisão já finalizada não pode ser alterada")
        return self._apply_destination(row, summary.reference_month, OvertimeDestination(destination))

    def bulk_set_destination(
        self,
        *,
        current_role: Role,
        organization_id: int,
        user_ids: Iterable[int],
        reference_month: date,
        destination: OvertimeDestination,
    ) -> list[MonthlyOvertimeDecision]:
        """Apply one destination to many employees; finalized rows are left as they are."""
        self._require_admin(current_role)
        summary = self.build_closing(organization_id=organization_id, reference_month=reference_month)
        destination = OvertimeDestination(destination)
        return [
            self._apply_destination(row, summary.reference_month, destination)
            for row in self._rows_for(summary, user_ids)
            if not row.decision.finalized
        ]

    def _apply_destination(
        self, row: ClosingRow, month: date, destination: OvertimeDestination
    ) -> MonthlyOvertimeDecision:
        decision = build_decision(
            organization_id=row.decision.organization_id,
            user_id=row.user_id,
            reference_month=month,
            overtime_minutes=row.balance_minutes,
            destination=destination,
            is_edited=True,
        )
        decision = replace(decision, decision_id=row.decision.decision_id, payment_amount=row.decision.payment_amount)
        self._decisions.upsert(decision)
        return decision

    def finalize(
        self,
        *,
        current_role: Role,
        organization_id: int,
        admin_user_id: int,
        user_ids: Iterable[int],
        reference_month: date,
        now: Optional[datetime] = None,
    ) -> int:
        """Finalize the selected decisions. Returns how many became finalized."""
        self._require_admin(current_role)
        now = now or datetime.now()
        summary = self.build_closing(organization_id=organization_id, reference_month=reference_month)

        count = 0
        for row in self._rows_for(summary, user_ids):
            if row.decision.finalized:
                continue
            self._decisions.upsert(
                replace(row.decision, finalized=True, finalized_at=now, finalized_by=int(admin_user_id))
            )
            count += 1

        logger.info(
            "Monthly closing %s: %d decision(s) finalized in organization %s by %s",
            summary.reference_month.strftime("%Y-%m"),
            count,
            organization_id,
            admin_user_id,
        )
        return count
