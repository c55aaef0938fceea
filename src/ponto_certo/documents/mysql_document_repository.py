from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import DocumentStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Document
from .repository import DocumentRepository

_SELECT = """
    SELECT document_id, organization_id, user_id, title, document_type, reference_month, file_url,
           status, signature_data, signed_at, expires_at, created_at
    FROM documents
"""


def _to_document(r: dict) -> Document:
    return Document(
        document_id=int(r["document_id"]),
        organization_id=int(r["organization_id"]),
        user_id=int(r["user_id"]),
        title=r["title"],
        document_type=r.get("document_type") or "timesheet",
        reference_month=r.get("reference_month"),
        file_url=r.get("file_url"),
        status=DocumentStatus(r["status"]),
        signature_data=r.get("signature_data"),
        signed_at=r.get("signed_at"),
        expires_at=r.get("expires_at"),
        created_at=r.get("created_at"),
    )


class MySQLDocumentRepository(DocumentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, document: Document) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO documents(
                    organization_id, user_id, title, document_type, reference_month, file_url, status, expires_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(document.organization_id),
                    int(document.user_id),
                    document.title,
                    document.document_type,
                    document.reference_month,
                    document.file_url,
                    DocumentStatus.PENDING_SIGNATURE.value,
                    document.expires_at,
                ),
            )
            return int(cur.lastrowid)

    def get(self, document_id: int) -> Optional[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE document_id=%s", (int(document_id),))
            r = fetchone(cur)
            return _to_document(r) if r else None

    def list_for_organization(
        self, *, organization_id: int, status: Optional[DocumentStatus] = None
    ) -> Sequence[Document]:
        sql = _SELECT + " WHERE organization_id=%s"
        params: list[object] = [int(organization_id)]
        if status is not None:
            sql += " AND status=%s"
            params.append(status.value)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " ORDER BY created_at DESC", tuple(params))
            return [_to_document(r) for r in fetchall(cur)]

    def list_for_user(self, user_id: int) -> Sequence[Document]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE user_id=%s ORDER BY created_at DESC", (int(user_id),))
            return [_to_document(r) for r in fetchall(cur)]

    def mark_signed(self, *, document_id: int, signature_data: str, signed_at: datetime) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE documents
                SET status=%s, signature_data=%s, signed_at=%s
                WHERE document_id=%s AND status=%s
                """,
                (
                    DocumentStatus.SIGNED.value,
                    signature_data,
                    signed_at,
                    int(document_id),
                    DocumentStatus.PENDING_SIGNATURE.value,
                ),
            )
            return cur.rowcount > 0

    def expire_overdue(self, *, organization_id: int, today: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE documents
                SET status=%s
                WHERE organization_id=%s AND status=%s AND expires_at IS NOT NULL AND expires_at < %s
                """,
                (
                    DocumentStatus.EXPIRED.value,
                    int(organization_id),
                    DocumentStatus.SIGNED.value,
                    today,
                ),
            )
            return int(cur.rowcount or 0)

    def delete_expired(self, *, organization_id: int, document_ids: Sequence[int]) -> int:
        if not document_ids:
            return 0
        ids = [int(i) for i in document_ids]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"DELETE FROM documents WHERE organization_id=%s AND status=%s AND document_id IN ({in_clause(ids)})",
                (int(organization_id), DocumentStatus.EXPIRED.value, *ids),
            )
            return int(cur.rowcount or 0)
