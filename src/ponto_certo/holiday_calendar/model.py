from __future__ import annotations

from dataclasses import dataclass
from datetime import date

HOLIDAY_TYPES = ("national", "state", "municipal", "custom")


@dataclass(frozen=True)
class Holiday:
    holiday_date: date
    name: str
    holiday_type: str
    holiday_id: int = 0
