from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from ponto_certo.core.enums import EmployeeStatus, Role
from ponto_certo.core.exceptions import AuthenticationError
from ponto_certo.organizations.model import Organization
from ponto_certo.organizations.service import OrganizationService
from ponto_certo.users.service import AuthService


class FakeOrgRepo:
    def __init__(self):
        self.orgs = {
            1: Organization(organization_id=1, name="Empresa", slug="empresa", org_code="11222"),
            2: Organization(organization_id=2, name="Outra", slug="outra", org_code="33300"),
        }

    def get_by_id(self, organization_id):
        return self.orgs.get(organization_id)

    def get_by_code(self, org_code):
        return next((o for o in self.orgs.values() if o.org_code == org_code), None)


@pytest.fixture
def auth(users_repo, profile_factory):
    pw = generate_password_hash("segredo1")
    users_repo.add(profile_factory(1, email="ana@empresa.com", password_hash=pw, role=Role.ADMIN))
    users_repo.add(profile_factory(2, email="bia@empresa.com", password_hash=pw, status=EmployeeStatus.INATIVO))
    users_repo.add(profile_factory(3, email="caio@empresa.com", password_hash="legacy$hash"))
    return AuthService(users_repo, OrganizationService(FakeOrgRepo()))


def test_login_inside_org(auth):
    user = auth.authenticate("11222", "Ana@Empresa.com", "segredo1")
    assert user.user_id == 1
    assert user.organization_id == 1
    assert user.role == Role.ADMIN


@pytest.mark.parametrize(
    "org_code, email, password",
    [
        ("11222", "ana@empresa.com", "errada"),
        ("33300", "ana@empresa.com", "segredo1"),
        ("99999", "ana@empresa.com", "segredo1"),
        ("11222", "ninguem@empresa.com", "segredo1"),
        ("11222", "caio@empresa.com", "segredo1"),
    ],
)
def test_login_rejected(auth, org_code, email, password):
    with pytest.raises(AuthenticationError):
        auth.authenticate(org_code, email, password)


def test_inactive_user_cannot_login(auth):
    with pytest.raises(AuthenticationError, match="inativo"):
        auth.authenticate("11222", "bia@empresa.com", "segredo1")
