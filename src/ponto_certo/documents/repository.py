from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import DocumentStatus
from .model import Document


class DocumentRepository(Protocol):
    def create(self, document: Document) -> int:
        raise NotImplementedError

    def get(self, document_id: int) -> Optional[Document]:
        raise NotImplementedError

    def list_for_organization(
        self, *, organization_id: int, status: Optional[DocumentStatus] = None
    ) -> Sequence[Document]:
        raise NotImplementedError

    def list_for_user(self, user_id: int) -> Sequence[Document]:
        raise NotImplementedError

    def mark_signed(self, *, document_id: int, signature_data: str, signed_at: datetime) -> bool:
        """Only a pending document can be signed. False otherwise."""

        raise NotImplementedError

    def expire_overdue(self, *, organization_id: int, today: date) -> int:
        """Signed documents with expires_at < today become expired. Returns how many changed."""

        raise NotImplementedError

    def delete_expired(self, *, organization_id: int, document_ids: Sequence[int]) -> int:
        raise NotImplementedError
