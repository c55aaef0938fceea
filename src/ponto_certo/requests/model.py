from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.enums import AdjustmentRequestType, RequestStatus, TimeRecordType, VacationType


@dataclass(frozen=True)
class AdjustmentRequest:
    """Employee request to correct a punch, or to justify an absence with a medical certificate."""

    request_id: int
    organization_id: int
    user_id: int
    request_type: AdjustmentRequestType
    reason: str
    status: RequestStatus
    record_type: Optional[TimeRecordType] = None
    requested_time: Optional[datetime] = None
    absence_type: Optional[str] = None
    absence_start: Optional[date] = None
    absence_end: Optional[date] = None
    attachment_url: Optional[str] = None
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class VacationRequest:
    request_id: int
    organization_id: int
    user_id: int
    vacation_type: VacationType
    start_date: date
    end_date: date
    days_count: int
    status: RequestStatus
    sell_days: int = 0
    reason: Optional[str] = None
    is_admin_created: bool = False
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def days(self) -> list[date]:
        return [self.start_date + timedelta(days=i) for i in range((self.end_date - self.start_date).days + 1)]
