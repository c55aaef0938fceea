import pytest

from ponto_certo.core.enums import OvertimeDestination
from ponto_certo.payroll.calculator.destinations import (
    BankCalculator,
    MixedCalculator,
    PaymentCalculator,
    calculator_for,
    split_overtime,
)


def test_bank_keeps_everything_in_bank():
    split = split_overtime(125, OvertimeDestination.BANK)
    assert (split.bank_minutes, split.payment_minutes) == (125, 0)


def test_payment_pays_everything():
    split = split_overtime(125, OvertimeDestination.PAYMENT)
    assert (split.bank_minutes, split.payment_minutes) == (0, 125)


def test_mixed_even_split():
    split = split_overtime(100, OvertimeDestination.MIXED)
    assert (split.bank_minutes, split.payment_minutes) == (50, 50)


def test_mixed_odd_minute_goes_to_payment():
    split = split_overtime(101, OvertimeDestination.MIXED)
    assert (split.bank_minutes, split.payment_minutes) == (50, 51)


def test_negative_balance_is_not_clamped():
    split = split_overtime(-30, OvertimeDestination.BANK)
    assert (split.bank_minutes, split.payment_minutes) == (-30, 0)

    split = split_overtime(-30, OvertimeDestination.PAYMENT)
    assert (split.bank_minutes, split.payment_minutes) == (0, -30)


@pytest.mark.parametrize("minutes", [-101, -1, 0, 1, 59, 60, 61, 599, 12_345])
@pytest.mark.parametrize("destination", list(OvertimeDestination))
def test_split_always_adds_up(minutes, destination):
    split = split_overtime(minutes, destination)
    assert split.bank_minutes + split.payment_minutes == minutes
    assert split.total_minutes == minutes


def test_calculator_for_accepts_plain_strings():
    assert isinstance(calculator_for("bank"), BankCalculator)
    assert isinstance(calculator_for("payment"), PaymentCalculator)
    assert isinstance(calculator_for("mixed"), MixedCalculator)


def test_unknown_destination_is_rejected():
    with pytest.raises(ValueError):
        calculator_for("vacation")
