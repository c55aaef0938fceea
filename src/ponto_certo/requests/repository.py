from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import AdjustmentRequest, VacationRequest


class AdjustmentRequestRepository(Protocol):
    def create(self, request: AdjustmentRequest) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[AdjustmentRequest]:
        raise NotImplementedError

    def list_for_organization(
        self,
        *,
        organization_id: int,
        user_id: Optional[int] = None,
        status: Optional[RequestStatus] = None,
        limit: int = 200,
    ) -> Sequence[AdjustmentRequest]:
        raise NotImplementedError

    def decide(self, *, request_id: int, status: RequestStatus, reviewed_by: int, reviewed_at: datetime) -> bool:
        """Move a pending request to approved/rejected. False when it was not pending."""

        raise NotImplementedError


class VacationRequestRepository(Protocol):
    def create(self, request: VacationRequest) -> int:
        raise NotImplementedError

    def get(self, request_id: int) -> Optional[VacationRequest]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[VacationRequest]:
        raise NotImplementedError

    def list_for_organization(
        self,
        *,
        organization_id: int,
        status: Optional[RequestStatus] = None,
        limit: int = 500,
    ) -> Sequence[VacationRequest]:
        raise NotImplementedError

    def decide(
        self,
        *,
        request_id: int,
        status: RequestStatus,
        reviewed_by: int,
        reviewed_at: datetime,
        only_pending: bool = True,
    ) -> bool:
        raise NotImplementedError
