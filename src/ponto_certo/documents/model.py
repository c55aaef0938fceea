from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import DocumentStatus


@dataclass(frozen=True)
class Document:
    """A file sent to an employee for electronic signature (e.g. a monthly timesheet)."""

    document_id: int
    organization_id: int
    user_id: int
    title: str
    document_type: str = "timesheet"
    reference_month: Optional[date] = None
    file_url: Optional[str] = None
    status: DocumentStatus = DocumentStatus.PENDING_SIGNATURE
    signature_data: Optional[str] = None
    signed_at: Optional[datetime] = None
    expires_at: Optional[date] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class DocumentSummary:
    pending: int
    expired: int
    expiring_soon: int
