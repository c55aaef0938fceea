from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Iterator

from werkzeug.security import generate_password_hash

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"
# Login code of the demo workspace.
DEMO_ORG_CODE = "00000"


def _strip_create_db_and_use(sql: str) -> str:
    # The configured database name wins over the one written in schema.sql.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_line_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a SQL script on ';' outside of quoted strings."""
    buf: list[str] = []
    quote = ""
    escape = False

    for ch in sql:
        buf.append(ch)
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = ""
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            buf.pop()
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _exec_sql(cur, statements: Iterable[str]) -> None:
    for stmt in statements:
        cur.execute(stmt)


def ensure_database_exists(db_config: dict) -> None:
    conn_factory = DatabaseConnection(DBConfig.from_dict(db_config))
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{conn_factory.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path = SCHEMA_PATH) -> None:
    ensure_database_exists(db_config)

    sql = Path(schema_path).read_text(encoding="utf-8")
    sql = _strip_line_comments(_strip_create_db_and_use(sql))

    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        _exec_sql(cur, iter_sql_statements(sql))
        conn.commit()
    finally:
        conn.close()
    logger.info("Schema applied from %s", schema_path)


def ensure_demo_organization(db_config: dict, *, admin_email: str, admin_password: str) -> None:
    """Create a demo organization with one admin account if it does not exist yet."""
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor(dictionary=True)
        cur.execute("SELECT organization_id FROM organizations WHERE slug=%s", ("demo",))
        row = cur.fetchone()
        if row:
            org_id = int(row["organization_id"])
        else:
            cur.execute(
                "INSERT INTO organizations(name, slug, org_code) VALUES(%s, %s, %s)",
                ("Empresa Demo", "demo", DEMO_ORG_CODE),
            )
            org_id = int(cur.lastrowid)

        cur.execute("INSERT IGNORE INTO payroll_settings(organization_id) VALUES(%s)", (org_id,))

        cur.execute("SELECT user_id FROM profiles WHERE email=%s", (admin_email.lower(),))
        if not cur.fetchone():
            cur.execute(
                """
                INSERT INTO profiles(organization_id, full_name, email, password_hash, role)
                VALUES(%s, %s, %s, %s, 'admin')
                """,
                (org_id, "Administrador", admin_email.lower(), generate_password_hash(admin_password)),
            )
            cur.execute(
                "INSERT INTO hours_balance(user_id, organization_id, balance_minutes) VALUES(%s, %s, 0)",
                (int(cur.lastrowid), org_id),
            )
        conn.commit()
    finally:
        conn.close()
    logger.info("Demo organization ready (organization_id=%s)", org_id)


def list_tables(db_config: dict) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_dict(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
