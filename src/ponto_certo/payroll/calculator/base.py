from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class OvertimeSplit:
    bank_minutes: int
    payment_minutes: int

    @property
    def total_minutes(self) -> int:
        return self.bank_minutes + self.payment_minutes


class DestinationCalculator(ABC):
    """Calculator interface (Strategy Pattern for overtime destinations)."""

    @abstractmethod
    def split(self, overtime_minutes: int) -> OvertimeSplit:
        raise NotImplementedError
