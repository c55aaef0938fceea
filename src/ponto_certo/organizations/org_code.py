"""Org code generation from a company's CNPJ."""

from __future__ import annotations

from typing import Collection

ORG_CODE_LENGTH = 5


def generate_org_code(cnpj_digits: str, existing_codes: Collection[str]) -> str:
    """Return the first 5-digit window of the CNPJ not already taken.

    Windows are scanned left to right. When every window collides the code
    falls back to the first five digits plus the last digit, which is not
    checked against ``existing_codes``.
    """
    taken = set(existing_codes)
    for start in range(len(cnpj_digits) - ORG_CODE_LENGTH + 1):
        candidate = cnpj_digits[start : start + ORG_CODE_LENGTH]
        if candidate not in taken:
            return candidate
    return cnpj_digits[:ORG_CODE_LENGTH] + cnpj_digits[-1:]
