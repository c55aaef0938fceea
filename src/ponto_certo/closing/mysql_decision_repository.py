from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import OvertimeDestination
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import MonthlyOvertimeDecision
from .repository import DecisionRepository

_SELECT = """
    SELECT decision_id, organization_id, user_id, reference_month, overtime_minutes,
           destination, bank_minutes, payment_minutes, payment_amount,
           is_edited, finalized, finalized_at, finalized_by
    FROM monthly_overtime_decisions
"""


class MySQLDecisionRepository(DecisionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_model(r: dict) -> MonthlyOvertimeDecision:
        return MonthlyOvertimeDecision(
            decision_id=int(r["decision_id"]),
            organization_id=int(r["organization_id"]),
            user_id=int(r["user_id"]),
            reference_month=r["reference_month"],
            overtime_minutes=int(r["overtime_minutes"]),
            destination=OvertimeDestination(r["destination"]),
            bank_minutes=int(r["bank_minutes"]),
            payment_minutes=int(r["payment_minutes"]),
            payment_amount=Decimal(r["payment_amount"] or 0),
            is_edited=as_bool(r["is_edited"]),
            finalized=as_bool(r["finalized"]),
            finalized_at=r.get("finalized_at"),
            finalized_by=r.get("finalized_by"),
        )

    def get(self, *, user_id: int, reference_month: date) -> Optional[MonthlyOvertimeDecision]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s AND reference_month=%s", (int(user_id), reference_month))
            r = fetchone(cur)
            return self._to_model(r) if r else None

    def list_for_month(self, *, organization_id: int, reference_month: date) -> Sequence[MonthlyOvertimeDecision]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE organization_id=%s AND reference_month=%s",
                (int(organization_id), reference_month),
            )
            return [self._to_model(r) for r in fetchall(cur)]

    def list_for_organization(self, *, organization_id: int) -> Sequence[MonthlyOvertimeDecision]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE organization_id=%s ORDER BY reference_month", (int(organization_id),))
            return [self._to_model(r) for r in fetchall(cur)]

    def upsert(self, decision: MonthlyOvertimeDecision) -> None:
        # finalized only ever moves 0 -> 1, and the first finalization timestamp is kept.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO monthly_overtime_decisions(
                    organization_id, user_id, reference_month, overtime_minutes, destination,
                    bank_minutes, payment_minutes, payment_amount, is_edited,
                    finalized, finalized_at, finalized_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    overtime_minutes=VALUES(overtime_minutes),
                    destination=VALUES(destination),
                    bank_minutes=VALUES(bank_minutes),
                    payment_minutes=VALUES(payment_minutes),
                    payment_amount=VALUES(payment_amount),
                    is_edited=VALUES(is_edited),
                    finalized_at=COALESCE(finalized_at, VALUES(finalized_at)),
                    finalized_by=COALESCE(finalized_by, VALUES(finalized_by)),
                    finalized=GREATEST(finalized, VALUES(finalized))
                """,
                (
                    int(decision.organization_id),
                    int(decision.user_id),
                    decision.reference_month,
                    int(decision.overtime_minutes),
                    decision.destination.value,
                    int(decision.bank_minutes),
                    int(decision.payment_minutes),
                    decision.payment_amount,
                    int(decision.is_edited),
                    int(decision.finalized),
                    decision.finalized_at,
                    decision.finalized_by,
                ),
            )
