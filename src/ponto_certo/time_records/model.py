from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import TimeRecordType


@dataclass(frozen=True)
class TimeRecord:
    record_id: int
    organization_id: int
    user_id: int
    record_type: TimeRecordType
    recorded_at: datetime
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def work_date(self) -> date:
        return self.recorded_at.date()
