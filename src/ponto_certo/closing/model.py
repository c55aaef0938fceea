from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import OvertimeDestination


@dataclass(frozen=True)
class MonthlyOvertimeDecision:
    """Per employee, per reference month split of the overtime balance.

    At most one row exists per (user_id, reference_month). Once ``finalized`` is
    set the row is immutable.
    """

    organization_id: int
    user_id: int
    reference_month: date
    overtime_minutes: int
    destination: OvertimeDestination
    bank_minutes: int
    payment_minutes: int
    payment_amount: Decimal = Decimal("0")
    is_edited: bool = False
    finalized: bool = False
    finalized_at: Optional[datetime] = None
    finalized_by: Optional[int] = None
    decision_id: Optional[int] = None


@dataclass(frozen=True)
class ClosingRow:
    user_id: int
    full_name: str
    sector: Optional[str]
    balance_minutes: int
    decision: MonthlyOvertimeDecision
    persisted: bool


@dataclass(frozen=True)
class ClosingSummary:
    reference_month: date
    rows: list[ClosingRow] = field(default_factory=list)

    @property
    def total_bank_minutes(self) -> int:
        return sum(r.decision.bank_minutes for r in self.rows)

    @property
    def total_payment_minutes(self) -> int:
        return sum(r.decision.payment_minutes for r in self.rows)

    @property
    def finalized_count(self) -> int:
        return sum(1 for r in self.rows if r.decision.finalized)
