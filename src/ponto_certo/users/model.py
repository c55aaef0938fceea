from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import EmployeeStatus, Role


@dataclass(frozen=True)
class Address:
    cep: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


@dataclass(frozen=True)
class Profile:
    user_id: int
    organization_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role = Role.EMPLOYEE
    status: EmployeeStatus = EmployeeStatus.ATIVO
    status_specification: Optional[str] = None
    cpf: Optional[str] = None
    phone: Optional[str] = None
    sector: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
    work_schedule_id: Optional[int] = None
    address: Address = Address()
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ATIVO


@dataclass(frozen=True)
class NewEmployee:
    organization_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role = Role.EMPLOYEE
    cpf: Optional[str] = None
    phone: Optional[str] = None
    sector: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[date] = None
    work_schedule_id: Optional[int] = None
    address: Address = Address()


@dataclass(frozen=True)
class StatusChange:
    history_id: int
    user_id: int
    previous_status: Optional[str]
    new_status: str
    previous_specification: Optional[str]
    new_specification: Optional[str]
    reason: Optional[str]
    changed_by: int
    changed_at: datetime
