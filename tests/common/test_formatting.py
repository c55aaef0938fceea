import pytest

from ponto_certo.common.formatting import format_cep, format_cnpj, format_cpf, format_minutes, format_phone


@pytest.mark.parametrize(
    "minutes, expected",
    [(0, "00:00"), (59, "00:59"), (125, "02:05"), (-90, "-01:30"), (6000, "100:00")],
)
def test_format_minutes(minutes, expected):
    assert format_minutes(minutes) == expected


def test_format_minutes_signed():
    assert format_minutes(125, signed=True) == "+02:05"
    assert format_minutes(-5, signed=True) == "-00:05"
    assert format_minutes(0, signed=True) == "00:00"


def test_document_masks():
    assert format_cpf("52998224725") == "529.982.247-25"
    assert format_cnpj("11222333000181") == "11.222.333/0001-81"
    assert format_cep("01310100") == "01310-100"


def test_masks_are_progressive():
    assert format_cpf("5299") == "529.9"
    assert format_cnpj("112") == "11.2"


def test_phone_masks():
    assert format_phone("11987654321") == "(11) 98765-4321"
    assert format_phone("1134567890") == "(11) 3456-7890"
    assert format_phone("") == ""
