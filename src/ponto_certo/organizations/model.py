from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..users.model import Address


@dataclass(frozen=True)
class Organization:
    organization_id: int
    name: str
    slug: str
    org_code: Optional[str] = None


@dataclass(frozen=True)
class CompanyInfo:
    organization_id: int
    cnpj: str
    razao_social: str
    nome_fantasia: str
    inscricao_estadual: Optional[str] = None
    inscricao_municipal: Optional[str] = None
    business_sector: Optional[str] = None
    address: Address = Address()
    phone: Optional[str] = None
    whatsapp: Optional[str] = None
    financial_email: Optional[str] = None
    has_branches: bool = False
