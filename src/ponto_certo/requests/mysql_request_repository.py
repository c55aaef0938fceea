from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import AdjustmentRequestType, RequestStatus, TimeRecordType, VacationType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import AdjustmentRequest, VacationRequest
from .repository import AdjustmentRequestRepository, VacationRequestRepository

_ADJUSTMENT_SELECT = """
    SELECT request_id, organization_id, user_id, request_type, record_type, requested_time, reason,
           absence_type, absence_start, absence_end, attachment_url, status, reviewed_by,
           reviewed_at, created_at
    FROM adjustment_requests
"""

_VACATION_SELECT = """
    SELECT request_id, organization_id, user_id, vacation_type, start_date, end_date, days_count,
           sell_days, reason, is_admin_created, status, reviewed_by, reviewed_at, created_at
    FROM vacation_requests
"""


def _to_adjustment(r: dict) -> AdjustmentRequest:
    return AdjustmentRequest(
        request_id=int(r["request_id"]),
        organization_id=int(r["organization_id"]),
        user_id=int(r["user_id"]),
        request_type=AdjustmentRequestType(r["request_type"]),
        record_type=TimeRecordType(r["record_type"]) if r.get("record_type") else None,
        requested_time=r.get("requested_time"),
        reason=r["reason"],
        absence_type=r.get("absence_type"),
        absence_start=r.get("absence_start"),
        absence_end=r.get("absence_end"),
        attachment_url=r.get("attachment_url"),
        status=RequestStatus(r["status"]),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        created_at=r.get("created_at"),
    )


def _to_vacation(r: dict) -> VacationRequest:
    return VacationRequest(
        request_id=int(r["request_id"]),
        organization_id=int(r["organization_id"]),
        user_id=int(r["user_id"]),
        vacation_type=VacationType(r["vacation_type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        days_count=int(r["days_count"]),
        sell_days=int(r.get("sell_days") or 0),
        reason=r.get("reason"),
        is_admin_created=as_bool(r.get("is_admin_created")),
        status=RequestStatus(r["status"]),
        reviewed_by=r.get("reviewed_by"),
        reviewed_at=r.get("reviewed_at"),
        created_at=r.get("created_at"),
    )


class MySQLAdjustmentRequestRepository(AdjustmentRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: AdjustmentRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO adjustment_requests(
                    organization_id, user_id, request_type, record_type, requested_time, reason,
                    absence_type, absence_start, absence_end, attachment_url, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(request.organization_id),
                    int(request.user_id),
                    request.request_type.value,
                    request.record_type.value if request.record_type else None,
                    request.requested_time,
                    request.reason,
                    request.absence_type,
                    request.absence_start,
                    request.absence_end,
                    request.attachment_url,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[AdjustmentRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_ADJUSTMENT_SELECT + " WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_adjustment(r) if r else None

    def list_for_organization(
        self,
        *,
        organization_id: int,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[AdjustmentRequest]:
        clauses = ["organization_id=%s"]
        params: list[object] = [int(organization_id)]
        if user_id is not None:
            clauses.append("user_id=%s")
            params.append(int(user_id))
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _ADJUSTMENT_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY created_at DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_adjustment(r) for r in fetchall(cur)]

    def decide(self, *, request_id: int, status: RequestStatus, reviewed_by: int, reviewed_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE adjustment_requests
                SET status=%s, reviewed_by=%s, reviewed_at=%s
                WHERE request_id=%s AND status='pending'
                """,
                (status.value, int(reviewed_by), reviewed_at, int(request_id)),
            )
            return cur.rowcount > 0


class MySQLVacationRequestRepository(VacationRequestRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, request: VacationRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO vacation_requests(
                    organization_id, user_id, vacation_type, start_date, end_date, days_count,
                    sell_days, reason, is_admin_created, status, reviewed_by, reviewed_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(request.organization_id),
                    int(request.user_id),
                    request.vacation_type.value,
                    request.start_date,
                    request.end_date,
                    int(request.days_count),
                    int(request.sell_days),
                    request.reason,
                    int(request.is_admin_created),
                    request.status.value,
                    request.reviewed_by,
                    request.reviewed_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, request_id: int) -> Optional[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_VACATION_SELECT + " WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_vacation(r) if r else None

    def list_for_user(self, user_id: int) -> Sequence[VacationRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_VACATION_SELECT + " WHERE user_id=%s ORDER BY start_date", (int(user_id),))
            return [_to_vacation(r) for r in fetchall(cur)]

    def list_for_organization(
        self,
        *,
        organization_id: int,
        status: Optional[RequestStatus] = None,
        limit: int = 500,
    ) -> Sequence[VacationRequest]:
        clauses = ["organization_id=%s"]
        params: list[object] = [int(organization_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _VACATION_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY start_date DESC LIMIT %s",
                tuple(params + [int(limit)]),
            )
            return [_to_vacation(r) for r in fetchall(cur)]

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        only_pending: bool = True,
    ) -> bool:
        guard = "status='pending'" if only_pending else "status<>%s"
        params: tuple = (status.value, int(reviewed_by), reviewed_at, int(request_id))
        if not only_pending:
            params += (status.value,)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE vacation_requests SET status=%s, reviewed_by=%s, reviewed_at=%s WHERE request_id=%s AND {guard}",
                params,
            )
            return cur.rowcount > 0
