from __future__ import annotations

from datetime import datetime

from ...core.constants import FIXED_MODE_BUFFER_MINUTES
from .base import PunchDecision, PunchStrategy, PunchWindow


class FixedStrategy(PunchStrategy):
    """Strict schedule with a small clock-skew buffer."""

    def decide(self, *, now: datetime, window: PunchWindow, tolerance_minutes: int) -> PunchDecision:
        after = window.overtime_max_minutes if window.overtime_authorized else FIXED_MODE_BUFFER_MINUTES
        return self._within(now, window, before=FIXED_MODE_BUFFER_MINUTES, after=after)
