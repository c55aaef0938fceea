from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import FlexibilityMode
from .strategies.base import PunchStrategy
from .strategies.fixed_strategy import FixedStrategy
from .strategies.hours_only_strategy import HoursOnlyStrategy
from .strategies.tolerance_strategy import ToleranceStrategy


@dataclass
class PunchStrategyFactory:
    """Factory Pattern: choose the punch window rule for the organization's flexibility mode."""

    def for_mode(self, mode: FlexibilityMode) -> PunchStrategy:
        mode = FlexibilityMode(mode)
        if mode == FlexibilityMode.HOURS_ONLY:
            return HoursOnlyStrategy()
        if mode == FlexibilityMode.FIXED:
            return FixedStrategy()
        return ToleranceStrategy()
