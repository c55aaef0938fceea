from __future__ import annotations

import logging
from typing import Optional

from ..common.validators import is_valid_email, only_digits, require_cnpj, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..users.model import Address
from .model import CompanyInfo, Organization
from .org_code import generate_org_code
from .repository import OrganizationRepository

logger = logging.getLogger(__name__)


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class OrganizationService:
    """Use case: institutional registration of the company and its org code."""

    def __init__(self, organizations: OrganizationRepository):
        self._organizations = organizations

    def get(self, organization_id: int) -> Organization:
        org = self._organizations.get_by_id(int(organization_id))
        if not org:
            raise NotFoundError("Organização não encontrada")
        return org

    def get_company_info(self, organization_id: int) -> Optional[CompanyInfo]:
        return self._organizations.get_company_info(int(organization_id))

    def resolve_by_org_code(self, org_code: str) -> Organization:
        code = (org_code or "").strip()
        org = self._organizations.get_by_code(code) if code else None
        if not org:
            raise AuthenticationError("Código da empresa não encontrado")
        return org

    def save_company_info(self, *, current_role: Role, organization_id: int, data: dict) -> CompanyInfo:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem editar os dados da empresa")

        cnpj = require_cnpj(data.get("cnpj"))
        financial_email = _clean(data.get("financial_email"))
        if financial_email and not is_valid_email(financial_email):
            raise ValidationError("E-mail financeiro inválido")

        info = CompanyInfo(
            organization_id=int(organization_id),
            cnpj=cnpj,
            razao_social=require_non_empty(data.get("razao_social"), "Razão social"),
            nome_fantasia=require_non_empty(data.get("nome_fantasia"), "Nome fantasia"),
            inscricao_estadual=_clean(data.get("inscricao_estadual")),
            inscricao_municipal=_clean(data.get("inscricao_municipal")),
            business_sector=_clean(data.get("business_sector")),
            address=Address(
                cep=only_digits(data.get("cep")) or None,
                street=_clean(data.get("street")),
                number=_clean(data.get("number")),
                complement=_clean(data.get("complement")),
                neighborhood=_clean(data.get("neighborhood")),
                city=_clean(data.get("city")),
                state=(_clean(data.get("state")) or "").upper() or None,
            ),
            phone=only_digits(data.get("phone")) or None,
            whatsapp=only_digits(data.get("whatsapp")) or None,
            financial_email=financial_email.lower() if financial_email else None,
            has_branches=bool(data.get("has_branches", False)),
        )
        self._organizations.save_company_info(info)
        self.ensure_org_code(organization_id=int(organization_id), cnpj_digits=cnpj)
        return info

    def ensure_org_code(self, *, organization_id: int, cnpj_digits: str) -> str:
        """Generate the login code once; an existing code is never replaced."""
        org = self.get(organization_id)
        if org.org_code:
            return org.org_code

        code = generate_org_code(cnpj_digits, self._organizations.list_codes())
        if not self._organizations.set_org_code_if_missing(org.organization_id, code):
            # Another request stored a code first.
            return self.get(organization_id).org_code or code
        logger.info("Org code %s generated for organization %s", code, organization_id)
        return code
