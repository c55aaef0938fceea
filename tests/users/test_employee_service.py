from __future__ import annotations

import pytest
from werkzeug.security import check_password_hash

from ponto_certo.core.enums import EmployeeStatus, Role
from ponto_certo.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ponto_certo.schedules.model import WorkSchedule
from ponto_certo.users.service import EmployeeService


@pytest.fixture
def service(users_repo, schedules_repo, profile_factory):
    users_repo.add(profile_factory(1, role=Role.ADMIN, email="admin@empresa.com"))
    users_repo.add(profile_factory(2, email="ana@empresa.com"))
    users_repo.add(profile_factory(3, organization_id=2, role=Role.ADMIN, email="admin@outra.com"))
    users_repo.add(profile_factory(4, organization_id=2, email="bia@outra.com"))
    schedules_repo.save(WorkSchedule(schedule_id=0, organization_id=1, name="Comercial"))
    return EmployeeService(users_repo, schedules_repo)


def _create(service, **overrides):
    values = dict(
        current_role=Role.ADMIN,
        organization_id=1,
        email="Novo@Empresa.com",
        password="segredo1",
        full_name="Novo Colaborador",
    )
    values.update(overrides)
    return service.create_employee(**values)


def test_admin_creates_employee(service, users_repo):
    user_id = _create(service, cpf="529.982.247-25", phone="(11) 98765-4321", work_schedule_id=1)

    user = users_repo.get_by_id(user_id)
    assert user.email == "novo@empresa.com"
    assert user.role == Role.EMPLOYEE
    assert user.cpf == "52998224725"
    assert user.phone == "11987654321"
    assert user.work_schedule_id == 1
    assert check_password_hash(user.password_hash, "segredo1")


def test_create_employee_requires_admin(service):
    with pytest.raises(AuthorizationError):
        _create(service, current_role=Role.EMPLOYEE)


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": ""},
        {"email": "sem-arroba"},
        {"password": "12345"},
        {"full_name": " "},
        {"cpf": "111.111.111-11"},
    ],
)
def test_create_employee_validation(service, overrides):
    with pytest.raises(ValidationError):
        _create(service, **overrides)


def test_create_employee_duplicate_email(service):
    with pytest.raises(ValidationError):
        _create(service, email="ANA@empresa.com")


def test_create_employee_schedule_from_other_org(service, schedules_repo):
    other = schedules_repo.save(WorkSchedule(schedule_id=0, organization_id=2, name="Outra"))
    with pytest.raises(ValidationError):
        _create(service, work_schedule_id=other)


def test_user_changes_own_password(service, users_repo):
    service.update_password(
        requester_id=2, requester_role=Role.EMPLOYEE, requester_organization_id=1, target_user_id=2, new_password="nova123"
    )
    assert check_password_hash(users_repo.get_by_id(2).password_hash, "nova123")


def test_employee_cannot_change_other_password(service):
    with pytest.raises(AuthorizationError):
        service.update_password(
            requester_id=2, requester_role=Role.EMPLOYEE, requester_organization_id=1, target_user_id=1, new_password="nova123"
        )


def test_admin_changes_password_in_own_org_only(service, users_repo):
    service.update_password(
        requester_id=1, requester_role=Role.ADMIN, requester_organization_id=1, target_user_id=2, new_password="nova123"
    )
    assert check_password_hash(users_repo.get_by_id(2).password_hash, "nova123")

    with pytest.raises(AuthorizationError):
        service.update_password(
            requester_id=1, requester_role=Role.ADMIN, requester_organization_id=1, target_user_id=4, new_password="nova123"
        )


def test_support_changes_any_password(service, users_repo):
    service.update_password(
        requester_id=99, requester_role=Role.SUPORTE, requester_organization_id=1, target_user_id=4, new_password="nova123"
    )
    assert check_password_hash(users_repo.get_by_id(4).password_hash, "nova123")


def test_password_minimum_length(service):
    with pytest.raises(ValidationError):
        service.update_password(
            requester_id=2, requester_role=Role.EMPLOYEE, requester_organization_id=1, target_user_id=2, new_password="123"
        )


def test_change_status_writes_history(service, users_repo):
    service.change_status(
        current_role=Role.ADMIN,
        organization_id=1,
        admin_user_id=1,
        user_id=2,
        status=EmployeeStatus.AFASTADO,
        specification="Licença médica",
        reason="Atestado de 15 dias",
    )

    user = users_repo.get_by_id(2)
    assert user.status == EmployeeStatus.AFASTADO
    history = service.status_history(organization_id=1, user_id=2)
    assert [(h.previous_status, h.new_status) for h in history] == [("ativo", "afastado")]


def test_leave_status_needs_specification(service):
    with pytest.raises(ValidationError):
        service.change_status(
            current_role=Role.ADMIN, organization_id=1, admin_user_id=1, user_id=2, status=EmployeeStatus.AFASTADO
        )


def test_same_status_is_rejected(service):
    with pytest.raises(ValidationError):
        service.change_status(
            current_role=Role.ADMIN, organization_id=1, admin_user_id=1, user_id=2, status=EmployeeStatus.ATIVO
        )


def test_admin_account_cannot_be_deleted(service, users_repo):
    with pytest.raises(ValidationError):
        service.delete_employee(current_role=Role.ADMIN, organization_id=1, user_id=1)

    service.delete_employee(current_role=Role.ADMIN, organization_id=1, user_id=2)
    assert users_repo.get_by_id(2) is None


def test_employee_from_other_org_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.get(organization_id=1, user_id=4)
