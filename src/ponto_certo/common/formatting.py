from __future__ import annotations

from typing import Optional

from .validators import only_digits


def format_minutes(minutes: int, *, signed: bool = False) -> str:
    """Render minutes as HH:MM, e.g. -90 -> "-01:30".

    With ``signed=True`` positive values get a leading "+" as used in closing
    screens.
    """
    minutes = int(minutes)
    sign = "-" if minutes < 0 else ("+" if signed and minutes > 0 else "")
    total = abs(minutes)
    return f"{sign}{total // 60:02d}:{total % 60:02d}"


def _mask(digits: str, groups: tuple[tuple[int, str], ...]) -> str:
    # Progressive mask: only emit separators for the digits already typed.
    out = ""
    pos = 0
    for size, sep_before in groups:
        if pos >= len(digits):
            break
        out += sep_before + digits[pos : pos + size]
        pos += size
    return out


def format_cpf(value: Optional[str]) -> str:
    digits = only_digits(value)[:11]
    return _mask(digits, ((3, ""), (3, "."), (3, "."), (2, "-")))


def format_cnpj(value: Optional[str]) -> str:
    digits = only_digits(value)[:14]
    return _mask(digits, ((2, ""), (3, "."), (3, "."), (4, "/"), (2, "-")))


def format_cep(value: Optional[str]) -> str:
    digits = only_digits(value)[:8]
    return _mask(digits, ((5, ""), (3, "-")))


def format_phone(value: Optional[str]) -> str:
    digits = only_digits(value)[:11]
    if not digits:
        return ""
    if len(digits) <= 2:
        return f"({digits}"
    if len(digits) <= 10:
        # landline: (XX) XXXX-XXXX
        return "(" + digits[:2] + ") " + _mask(digits[2:], ((4, ""), (4, "-")))
    return "(" + digits[:2] + ") " + _mask(digits[2:], ((5, ""), (4, "-")))
