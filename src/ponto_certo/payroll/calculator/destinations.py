from __future__ import annotations

from ...core.enums import OvertimeDestination
from .base import DestinationCalculator, OvertimeSplit


class BankCalculator(DestinationCalculator):
    """Everything goes to the bank of hours."""

    def split(self, overtime_minutes: int) -> OvertimeSplit:
        return OvertimeSplit(bank_minutes=int(overtime_minutes), payment_minutes=0)


class PaymentCalculator(DestinationCalculator):
    """Everything is paid."""

    def split(self, overtime_minutes: int) -> OvertimeSplit:
        return OvertimeSplit(bank_minutes=0, payment_minutes=int(overtime_minutes))


class MixedCalculator(DestinationCalculator):
    """Half to the bank (rounded down), the rest is paid.

    Floor division keeps bank + payment equal to the input for negative and odd
    totals as well.
    """

    def split(self, overtime_minutes: int) -> OvertimeSplit:
        minutes = int(overtime_minutes)
        bank = minutes // 2
        return OvertimeSplit(bank_minutes=bank, payment_minutes=minutes - bank)


_CALCULATORS: dict[OvertimeDestination, DestinationCalculator] = {
    OvertimeDestination.BANK: BankCalculator(),
    OvertimeDestination.PAYMENT: PaymentCalculator(),
    OvertimeDestination.MIXED: MixedCalculator(),
}


def calculator_for(destination: OvertimeDestination) -> DestinationCalculator:
    return _CALCULATORS[OvertimeDestination(destination)]


def split_overtime(overtime_minutes: int, destination: OvertimeDestination) -> OvertimeSplit:
    return calculator_for(destination).split(overtime_minutes)
