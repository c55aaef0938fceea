from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus
from .model import NewEmployee, Profile, StatusChange


class UserRepository(Protocol):
    def get_by_id(self, user_id: int) -> Optional[Profile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_for_organization(
        self, organization_id: int, *, status: Optional[EmployeeStatus] = None
    ) -> Sequence[Profile]:
        raise NotImplementedError

    def count_by_schedule(self, schedule_id: int) -> int:
        raise NotImplementedError

    def create(self, employee: NewEmployee) -> int:
        """Insert the profile and its zeroed hours balance. Returns user_id."""

        raise NotImplementedError

    def update_password(self, user_id: int, password_hash: str) -> bool:
        raise NotImplementedError

    def update_profile(self, user_id: int, changes: dict) -> bool:
        raise NotImplementedError

    def update_status(self, user_id: int, status: EmployeeStatus, specification: Optional[str]) -> bool:
        raise NotImplementedError

    def add_status_history(
        self,
        *,
        organization_id: int,
        user_id: int,
        previous_status: Optional[str],
        new_status: str,
        previous_specification: Optional[str],
        new_specification: Optional[str],
        reason: Optional[str],
        changed_by: int,
    ) -> int:
        raise NotImplementedError

    def list_status_history(self, user_id: int) -> Sequence[StatusChange]:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
