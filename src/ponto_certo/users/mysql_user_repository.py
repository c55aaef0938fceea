from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import EmployeeStatus, Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Address, NewEmployee, Profile, StatusChange
from .repository import UserRepository

_PROFILE_SELECT = """
    SELECT user_id, organization_id, full_name, email, password_hash, role, status,
           status_specification, cpf, phone, sector, position, hire_date, work_schedule_id,
           cep, street, address_number, complement, neighborhood, city, state, created_at
    FROM profiles
"""

# Columns an admin may edit through update_profile.
_EDITABLE_COLUMNS = {
    "full_name": "full_name",
    "cpf": "cpf",
    "phone": "phone",
    "sector": "sector",
    "position": "position",
    "hire_date": "hire_date",
    "work_schedule_id": "work_schedule_id",
    "cep": "cep",
    "street": "street",
    "number": "address_number",
    "complement": "complement",
    "neighborhood": "neighborhood",
    "city": "city",
    "state": "state",
}


def _to_profile(row: dict) -> Profile:
    return Profile(
        user_id=int(row["user_id"]),
        organization_id=int(row["organization_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        status=EmployeeStatus(row["status"]),
        status_specification=row.get("status_specification"),
        cpf=row.get("cpf"),
        phone=row.get("phone"),
        sector=row.get("sector"),
        position=row.get("position"),
        hire_date=row.get("hire_date"),
        work_schedule_id=row.get("work_schedule_id"),
        address=Address(
            cep=row.get("cep"),
            street=row.get("street"),
            number=row.get("address_number"),
            complement=row.get("complement"),
            neighborhood=row.get("neighborhood"),
            city=row.get("city"),
            state=row.get("state"),
        ),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_PROFILE_SELECT + " WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[Profile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_PROFILE_SELECT + " WHERE email=%s", (email.strip().lower(),))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def list_for_organization(
        self, organization_id: int, *, status: Optional[EmployeeStatus] = None
    ) -> Sequence[Profile]:
        clauses = ["organization_id=%s"]
        params: list[object] = [int(organization_id)]
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_PROFILE_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY full_name", tuple(params))
            return [_to_profile(r) for r in fetchall(cur)]

    def count_by_schedule(self, schedule_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM profiles WHERE work_schedule_id=%s", (int(schedule_id),))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def create(self, employee: NewEmployee) -> int:
        a = employee.address
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO profiles(
                    organization_id, full_name, email, password_hash, role, cpf, phone, sector,
                    position, hire_date, work_schedule_id,
                    cep, street, address_number, complement, neighborhood, city, state
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(employee.organization_id),
                    employee.full_name,
                    employee.email,
                    employee.password_hash,
                    employee.role.value,
                    employee.cpf,
                    employee.phone,
                    employee.sector,
                    employee.position,
                    employee.hire_date,
                    employee.work_schedule_id,
                    a.cep,
                    a.street,
                    a.number,
                    a.complement,
                    a.neighborhood,
                    a.city,
                    a.state,
                ),
            )
            user_id = int(cur.lastrowid)
            cur.execute(
                "INSERT INTO hours_balance(user_id, organization_id, balance_minutes) VALUES(%s,%s,0)",
                (user_id, int(employee.organization_id)),
            )
            return user_id

    def update_password(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE profiles SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def update_profile(self, user_id: int, changes: dict) -> bool:
        columns = [(col, changes[key]) for key, col in _EDITABLE_COLUMNS.items() if key in changes]
        if not columns:
            return False
        assignments = ", ".join(f"{col}=%s" for col, _ in columns)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE profiles SET {assignments} WHERE user_id=%s",
                tuple(v for _, v in columns) + (int(user_id),),
            )
            return cur.rowcount > 0

    def update_status(self, user_id: int, status: EmployeeStatus, specification: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE profiles SET status=%s, status_specification=%s WHERE user_id=%s",
                (status.value, specification, int(user_id)),
            )
            return cur.rowcount > 0

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO status_history(
                    organization_id, user_id, previous_status, new_status,
                    previous_specification, new_specification, reason, changed_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(organization_id),
                    int(user_id),
                    previous_status,
                    new_status,
                    previous_specification,
                    new_specification,
                    reason,
                    int(changed_by),
                ),
            )
            return int(cur.lastrowid)

    def list_status_history(self, user_id: int) -> Sequence[StatusChange]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT history_id, user_id, previous_status, new_status, previous_specification,
                       new_specification, reason, changed_by, changed_at
                FROM status_history
                WHERE user_id=%s
                ORDER BY changed_at DESC
                """,
                (int(user_id),),
            )
            return [
                StatusChange(
                    history_id=int(r["history_id"]),
                    user_id=int(r["user_id"]),
                    previous_status=r.get("previous_status"),
                    new_status=r["new_status"],
                    previous_specification=r.get("previous_specification"),
                    new_specification=r.get("new_specification"),
                    reason=r.get("reason"),
                    changed_by=int(r["changed_by"]),
                    changed_at=r["changed_at"],
                )
                for r in fetchall(cur)
            ]

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM profiles WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
