from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import CompanyInfo, Organization


class OrganizationRepository(Protocol):
    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        raise NotImplementedError

    def get_by_code(self, org_code: str) -> Optional[Organization]:
        raise NotImplementedError

    def list_codes(self) -> Sequence[str]:
        """All org codes in use across tenants."""

        raise NotImplementedError

    def set_org_code_if_missing(self, organization_id: int, org_code: str) -> bool:
        """Store the code only when the organization has none. Returns True when stored."""

        raise NotImplementedError

    def get_company_info(self, organization_id: int) -> Optional[CompanyInfo]:
        raise NotImplementedError

    def save_company_info(self, info: CompanyInfo) -> None:
        raise NotImplementedError
