from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import MonthlyOvertimeDecision


class DecisionRepository(Protocol):
    def get(self, *, user_id: int, reference_month: date) -> Optional[MonthlyOvertimeDecision]:
        raise NotImplementedError

    def list_for_month(self, *, organization_id: int, reference_month: date) -> Sequence[MonthlyOvertimeDecision]:
        raise NotImplementedError

    def list_for_organization(self, *, organization_id: int) -> Sequence[MonthlyOvertimeDecision]:
        raise NotImplementedError

    def upsert(self, decision: MonthlyOvertimeDecision) -> None:
        """Insert or overwrite the row keyed by (user_id, reference_month).

        Implementations must never turn a finalized row back into a draft.
        """

        raise NotImplementedError
