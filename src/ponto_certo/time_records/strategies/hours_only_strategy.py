from __future__ import annotations

from datetime import datetime

from .base import PunchDecision, PunchStrategy, PunchWindow


class HoursOnlyStrategy(PunchStrategy):
    """Only the daily total matters; any time of day is accepted."""

    def decide(self, *, now: datetime, window: PunchWindow, tolerance_minutes: int) -> PunchDecision:
        return PunchDecision(allowed=True)
