from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

_CNPJ_FIRST_WEIGHTS = (5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)
_CNPJ_SECOND_WEIGHTS = (6, 5, 4, 3, 2, 9, 8, 7, 6, 5, 4, 3, 2)


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} é obrigatório")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} deve ter no mínimo {min_len} caracteres")
    return value


def only_digits(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def is_valid_email(value: Optional[str]) -> bool:
    return bool(value) and bool(_EMAIL_RE.match(value.strip()))


def require_email(value: Optional[str], field_name: str = "E-mail") -> str:
    value = require_non_empty(value, field_name)
    if not is_valid_email(value):
        raise ValidationError(f"{field_name} inválido")
    return value.lower()


def _all_same(digits: str) -> bool:
    return len(set(digits)) == 1


def is_valid_cpf(value: Optional[str]) -> bool:
    digits = only_digits(value)
    if len(digits) != 11 or _all_same(digits):
        return False

    for size in (9, 10):
        total = sum(int(d) * w for d, w in zip(digits[:size], range(size + 1, 1, -1)))
        check = (total * 10) % 11
        if check == 10:
            check = 0
        if check != int(digits[size]):
            return False
    return True


def is_valid_cnpj(value: Optional[str]) -> bool:
    digits = only_digits(value)
    if len(digits) != 14 or _all_same(digits):
        return False

    for weights in (_CNPJ_FIRST_WEIGHTS, _CNPJ_SECOND_WEIGHTS):
        size = len(weights)
        total = sum(int(d) * w for d, w in zip(digits[:size], weights))
        rest = total % 11
        check = 0 if rest < 2 else 11 - rest
        if check != int(digits[size]):
            return False
    return True


def require_cpf(value: Optional[str]) -> str:
    if not is_valid_cpf(value):
        raise ValidationError("CPF inválido")
    return only_digits(value)


def require_cnpj(value: Optional[str]) -> str:
    if not is_valid_cnpj(value):
        raise ValidationError("CNPJ inválido")
    return only_digits(value)
