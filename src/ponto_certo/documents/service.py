from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import reference_month as month_of
from ..core.constants import DOCUMENT_EXPIRING_SOON_DAYS
from ..core.enums import DocumentStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.repository import UserRepository
from .model import Document, DocumentSummary
from .repository import DocumentRepository

logger = logging.getLogger(__name__)


def expiration_info(expires_at: Optional[date], today: date) -> Optional[str]:
    """Short label shown next to a document: 'Vencido', 'Vence hoje' or 'Vence em N dias'."""
    if expires_at is None:
        return None
    days = (expires_at - today).days
    if days < 0:
        return "Vencido"
    if days == 0:
        return "Vence hoje"
    if days == 1:
        return "Vence em 1 dia"
    return f"Vence em {days} dias"


def summarize(documents: Sequence[Document], today: date) -> DocumentSummary:
    soon = today + timedelta(days=DOCUMENT_EXPIRING_SOON_DAYS)
    return DocumentSummary(
        pending=sum(1 for d in documents if d.status == DocumentStatus.PENDING_SIGNATURE),
        expired=sum(1 for d in documents if d.status == DocumentStatus.EXPIRED),
        expiring_soon=sum(
            1
            for d in documents
            if d.status == DocumentStatus.SIGNED and d.expires_at is not None and today <= d.expires_at <= soon
        ),
    )


class DocumentService:
    def __init__(self, documents: DocumentRepository, users: UserRepository):
        self._documents = documents
        self._users = users

    def create(
        self,
        *,
        current_role: Role,
        organization_id: int,
        user_id: int,
        title: str,
        document_type: str = "timesheet",
        reference_month: Optional[date] = None,
        file_url: Optional[str] = None,
        expires_at: Optional[date] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem enviar documentos")
        title = (title or "").strip()
        if not title:
            raise ValidationError("Título é obrigatório")
        user = self._users.get_by_id(user_id)
        if not user or user.organization_id != organization_id:
            raise NotFoundError("Colaborador não encontrado")

        document_id = self._documents.create(
            Document(
                document_id=0,
                organization_id=organization_id,
                user_id=user.user_id,
                title=title,
                document_type=document_type or "timesheet",
                reference_month=month_of(reference_month) if reference_month else None,
                file_url=file_url,
                expires_at=expires_at,
            )
        )
        logger.info("Document %s sent to user %s", document_id, user.user_id)
        return document_id

    def sign(self, *, user_id: int, document_id: int, signature_data: str, now: datetime) -> None:
        doc = self._documents.get(document_id)
        if not doc or doc.user_id != user_id:
            raise NotFoundError("Documento não encontrado")
        if doc.status != DocumentStatus.PENDING_SIGNATURE:
            raise ValidationError("Este documento não está aguardando assinatura")
        if not (signature_data or "").strip():
            raise ValidationError("Assinatura é obrigatória")
        if not self._documents.mark_signed(document_id=doc.document_id, signature_data=signature_data, signed_at=now):
            raise ValidationError("Este documento não está aguardando assinatura")
        logger.info("Document %s signed by user %s", doc.document_id, user_id)

    def expire_overdue(self, *, organization_id: int, today: date) -> int:
        count = self._documents.expire_overdue(organization_id=organization_id, today=today)
        if count:
            logger.info("%s document(s) expired in organization %s", count, organization_id)
        return count

    def delete_expired(self, *, current_role: Role, organization_id: int, document_ids: Sequence[int]) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem excluir documentos")
        if not document_ids:
            raise ValidationError("Selecione ao menos um documento")
        count = self._documents.delete_expired(organization_id=organization_id, document_ids=document_ids)
        logger.info("%s expired document(s) deleted in organization %s", count, organization_id)
        return count

    def list_for_organization(
        self, *, current_role: Role, organization_id: int, today: date, status: Optional[DocumentStatus] = None
    ) -> Sequence[Document]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Apenas administradores podem listar os documentos")
        self.expire_overdue(organization_id=organization_id, today=today)
        return self._documents.list_for_organization(organization_id=organization_id, status=status)

    def list_mine(self, user_id: int) -> Sequence[Document]:
        return self._documents.list_for_user(user_id)

    def summary(self, *, organization_id: int, today: date) -> DocumentSummary:
        self.expire_overdue(organization_id=organization_id, today=today)
        return summarize(self._documents.list_for_organization(organization_id=organization_id), today)
