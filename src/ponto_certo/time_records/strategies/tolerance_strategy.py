from __future__ import annotations

from datetime import datetime

from .base import PunchDecision, PunchStrategy, PunchWindow


class ToleranceStrategy(PunchStrategy):
    """Schedule +/- the organization's entry tolerance, extended by authorized overtime."""

    def decide(self, *, now: datetime, window: PunchWindow, tolerance_minutes: int) -> PunchDecision:
        after = window.overtime_max_minutes if window.overtime_authorized else tolerance_minutes
        return self._within(now, window, before=tolerance_minutes, after=after)
