from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional


@dataclass(frozen=True)
class PunchWindow:
    """Scheduled start/end for one day, after temporary adjustments are applied."""

    day: date
    start_time: time
    end_time: time
    overtime_authorized: bool = False
    overtime_max_minutes: int = 0

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.day, self.start_time)

    @property
    def ends_at(self) -> datetime:
        end = datetime.combine(self.day, self.end_time)
        # overnight shifts (e.g. 19:00 - 07:00)
        return end + timedelta(days=1) if end <= self.starts_at else end


@dataclass(frozen=True)
class PunchDecision:
    allowed: bool
    message: Optional[str] = None


class PunchStrategy(ABC):
    """Strategy Pattern: decide whether a punch falls inside the allowed window."""

    @abstractmethod
    def decide(self, *, now: datetime, window: PunchWindow, tolerance_minutes: int) -> PunchDecision:
        raise NotImplementedError

    @staticmethod
    def _within(now: datetime, window: PunchWindow, *, before: int, after: int) -> PunchDecision:
        earliest = window.starts_at - timedelta(minutes=before)
        latest = window.ends_at + timedelta(minutes=after)
        if now < earliest:
            return PunchDecision(
                allowed=False,
                message=f"Registro permitido somente a partir das {earliest.strftime('%H:%M')}",
            )
        if now > latest:
            return PunchDecision(
                allowed=False,
                message=f"Registro permitido somente até as {latest.strftime('%H:%M')}",
            )
        return PunchDecision(allowed=True)
