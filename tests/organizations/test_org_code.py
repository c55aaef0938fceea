from ponto_certo.organizations.org_code import generate_org_code

CNPJ = "11222333000181"


def test_first_window_when_free():
    assert generate_org_code(CNPJ, []) == "11222"


def test_skips_taken_windows_left_to_right():
    assert generate_org_code(CNPJ, {"11222", "12223"}) == "22233"


def test_fallback_when_every_window_is_taken():
    taken = {CNPJ[i : i + 5] for i in range(len(CNPJ) - 4)}
    assert generate_org_code(CNPJ, taken) == "112221"


def test_fallback_is_not_checked_for_collision():
    taken = {CNPJ[i : i + 5] for i in range(len(CNPJ) - 4)} | {"112221"}
    assert generate_org_code(CNPJ, taken) == "112221"
