from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from ..users.model import Address
from .model import CompanyInfo, Organization
from .repository import OrganizationRepository


class MySQLOrganizationRepository(OrganizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _to_org(r: dict) -> Organization:
        return Organization(
            organization_id=int(r["organization_id"]),
            name=r["name"],
            slug=r["slug"],
            org_code=r.get("org_code"),
        )

    def get_by_id(self, organization_id: int) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT organization_id, name, slug, org_code FROM organizations WHERE organization_id=%s",
                (int(organization_id),),
            )
            r = fetchone(cur)
            return self._to_org(r) if r else None

    def get_by_code(self, org_code: str) -> Optional[Organization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT organization_id, name, slug, org_code FROM organizations WHERE org_code=%s",
                (org_code,),
            )
            r = fetchone(cur)
            return self._to_org(r) if r else None

    def list_codes(self) -> Sequence[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT org_code FROM organizations WHERE org_code IS NOT NULL")
            return [r["org_code"] for r in fetchall(cur)]

    def set_org_code_if_missing(self, organization_id: int, org_code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE organizations SET org_code=%s WHERE organization_id=%s AND org_code IS NULL",
                (org_code, int(organization_id)),
            )
            return cur.rowcount > 0

    def get_company_info(self, organization_id: int) -> Optional[CompanyInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT organization_id, cnpj, razao_social, nome_fantasia, inscricao_estadual,
                       inscricao_municipal, business_sector, cep, street, address_number, complement,
                       neighborhood, city, state, phone, whatsapp, financial_email, has_branches
                FROM company_info
                WHERE organization_id=%s
                """,
                (int(organization_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return CompanyInfo(
                organization_id=int(r["organization_id"]),
                cnpj=r["cnpj"],
                razao_social=r["razao_social"],
                nome_fantasia=r["nome_fantasia"],
                inscricao_estadual=r.get("inscricao_estadual"),
                inscricao_municipal=r.get("inscricao_municipal"),
                business_sector=r.get("business_sector"),
                address=Address(
                    cep=r.get("cep"),
                    street=r.get("street"),
                    number=r.get("address_number"),
                    complement=r.get("complement"),
                    neighborhood=r.get("neighborhood"),
                    city=r.get("city"),
                    state=r.get("state"),
                ),
                phone=r.get("phone"),
                whatsapp=r.get("whatsapp"),
                financial_email=r.get("financial_email"),
                has_branches=as_bool(r.get("has_branches")),
            )

    def save_company_info(self, info: CompanyInfo) -> None:
        a = info.address
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO company_info(
                    organization_id, cnpj, razao_social, nome_fantasia, inscricao_estadual,
                    inscricao_municipal, business_sector, cep, street, address_number, complement,
                    neighborhood, city, state, phone, whatsapp, financial_email, has_branches
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    cnpj=VALUES(cnpj), razao_social=VALUES(razao_social),
                    nome_fantasia=VALUES(nome_fantasia), inscricao_estadual=VALUES(inscricao_estadual),
                    inscricao_municipal=VALUES(inscricao_municipal), business_sector=VALUES(business_sector),
                    cep=VALUES(cep), street=VALUES(street), address_number=VALUES(address_number),
                    complement=VALUES(complement), neighborhood=VALUES(neighborhood), city=VALUES(city),
                    state=VALUES(state), phone=VALUES(phone), whatsapp=VALUES(whatsapp),
                    financial_email=VALUES(financial_email), has_branches=VALUES(has_branches)
                """,
                (
                    int(info.organization_id),
                    info.cnpj,
                    info.razao_social,
                    info.nome_fantasia,
                    info.inscricao_estadual,
                    info.inscricao_municipal,
                    info.business_sector,
                    a.cep,
                    a.street,
                    a.number,
                    a.complement,
                    a.neighborhood,
                    a.city,
                    a.state,
                    info.phone,
                    info.whatsapp,
                    info.financial_email,
                    int(info.has_branches),
                ),
            )
