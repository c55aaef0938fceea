from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import AdjustmentRequestType, RequestStatus, Role, TimeRecordType
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..time_records.repository import TimeRecordRepository
from ..users.repository import UserRepository
from .model import AdjustmentRequest
from .repository import AdjustmentRequestRepository

logger = logging.getLogger(__name__)


class AdjustmentRequestService:
    """Punch corrections and medical certificates, reviewed by an admin.

    Approving a punch correction rewrites (or inserts) the time record of the
    requested type on the requested day. Approved certificates are read by the
    balance calculation to excuse the absence days.
    """

    def __init__(
        self,
        requests: AdjustmentRequestRepository,
        records: TimeRecordRepository,
        users: UserRepository,
    ):
        self._requests = requests
        self._records = records
        self._users = users

    def create(
        self,
        *,
        user_id: int,
        request_type: AdjustmentRequestType,
        reason: str,
        now: datetime,
        record_type: Optional[TimeRecordType] = None,
        requested_time: Optional[datetime] = None,
        absence_type: Optional[str] = None,
        absence_start: Optional[date] = None,
        absence_end: Optional[date] = None,
        attachment_url: Optional[str] = None,
    ) -> int:
        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Colaborador não encontrado")

        request_type = AdjustmentRequestType(request_type)
        reason = (reason or "").strip()
        if not reason:
            raise ValidationError("Informe o motivo da solicitação")

        if request_type == AdjustmentRequestType.ADJUSTMENT:
            if record_type is None or requested_time is None:
                raise ValidationError("Informe o tipo de registro e o horário desejado")
            record_type = TimeRecordType(record_type)
            if requested_time > now:
                raise ValidationError("O horário solicitado não pode estar no futuro")
            absence_start = absence_end = None
        else:
            if absence_start is None:
                raise ValidationError("Informe a data de início do afastamento")
            absence_end = absence_end or absence_start
            if absence_end < absence_start:
                raise ValidationError("A data final deve ser igual ou posterior à inicial")
            record_type = requested_time = None

        request_id = self._requests.create(
            AdjustmentRequest(
                request_id=0,
                organization_id=user.organization_id,
                user_id=user.user_id,
                request_type=request_type,
                reason=reason,
                status=RequestStatus.PENDING,
                record_type=record_type,
                requested_time=requested_time,
                absence_type=absence_type,
                absence_start=absence_start,
                absence_end=absence_end,
                attachment_url=attachment_url,
                created_at=now,
            )
        )
        logger.info("User %s opened %s request %s", user.user_id, request_type.value, request_id)
        return request_id

    def _pending_in_org(self, *, current_role: Role, organization_id: int, request_id: int) -> AdjustmentRequest:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem revisar solicitações")
        req = self._requests.get(request_id)
        if not req or req.organization_id != organization_id:
            raise NotFoundError("Solicitação não encontrada")
        if req.status != RequestStatus.PENDING:
            raise ValidationError("Esta solicitação já foi analisada")
        return req

    def approve(self, *, current_role: Role, organization_id: int, admin_user_id: int, request_id: int, now: datetime) -> None:
        req = self._pending_in_org(current_role=current_role, organization_id=organization_id, request_id=request_id)

        # only the call that moves the request out of pending applies the correction
        if not self._requests.decide(
            request_id=req.request_id, status=RequestStatus.APPROVED, reviewed_by=admin_user_id, reviewed_at=now
        ):
            raise ValidationError("Esta solicitação já foi analisada")

        if req.request_type == AdjustmentRequestType.ADJUSTMENT and req.record_type and req.requested_time:
            existing = self._records.find_by_type_on_day(req.user_id, req.requested_time.date(), req.record_type)
            if existing:
                self._records.update_recorded_at(existing.record_id, req.requested_time)
            else:
                self._records.create(
                    organization_id=req.organization_id,
                    user_id=req.user_id,
                    record_type=req.record_type,
                    recorded_at=req.requested_time,
                )
        logger.info("Request %s approved by %s", req.request_id, admin_user_id)

    def reject(self, *, current_role: Role, organization_id: int, admin_user_id: int, request_id: int, now: datetime) -> None:
        req = self._pending_in_org(current_role=current_role, organization_id=organization_id, request_id=request_id)
        if not self._requests.decide(
            request_id=req.request_id, status=RequestStatus.REJECTED, reviewed_by=admin_user_id, reviewed_at=now
        ):
            raise ValidationError("Esta solicitação já foi analisada")
        logger.info("Request %s rejected by %s", req.request_id, admin_user_id)

    def list_for_organization(
        self, *, current_role: Role, organization_id: int, status: Optional[RequestStatus] = None
    ) -> Sequence[AdjustmentRequest]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem listar as solicitações")
        return self._requests.list_for_organization(organization_id=organization_id, status=status)

    def list_mine(self, *, organization_id: int, user_id: int) -> Sequence[AdjustmentRequest]:
        return self._requests.list_for_organization(organization_id=organization_id, user_id=user_id)
