"""Referral document models.

Documents are produced by the document renderer and stored against the
referral. Rendering itself (HTML, PDF) is the renderer's concern.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class DocumentType(str, Enum):
    """Kinds of document a referral can generate."""

    REFERRAL_FORM = "referral_form"
    TEACHER_TO_ADMIN = "teacher_to_admin"
    ADMIN_TO_COUNSELOR = "admin_to_counselor"
    VIOLATION_RECORD = "violation_record"
    PARENT_NOTIFICATION = "parent_notification"

    @property
    def label(self) -> str:
        return _DOCUMENT_LABELS[self]

    @classmethod
    def parse(cls, value: str) -> DocumentType | None:
        """Return the document type for a raw value, or None if unknown."""
        try:
            return cls(value)
        except ValueError:
            return None


_DOCUMENT_LABELS: dict[DocumentType, str] = {
    DocumentType.REFERRAL_FORM: "Referral form",
    DocumentType.TEACHER_TO_ADMIN: "Teacher to administration referral",
    DocumentType.ADMIN_TO_COUNSELOR: "Administration to counselor referral",
    DocumentType.VIOLATION_RECORD: "Behaviour violation record",
    DocumentType.PARENT_NOTIFICATION: "Parent notification",
}


@dataclass(frozen=True)
class RenderedDocument:
    """Renderer output before it is stored.

    Attributes:
        title: Document title.
        content: Rendered body (format is the renderer's choice).
    """

    title: str
    content: str


@dataclass(frozen=True, eq=True)
class ReferralDocument:
    """A stored document generated from a referral.

    Attributes:
        document_id: Unique identifier.
        referral_id: Referral it was generated from.
        document_number: Human-readable number (e.g. DOC-2026-00003).
        document_type: What kind of document.
        title: Document title.
        content: Rendered body.
        generated_by: User who generated it.
        created_at: When it was stored (UTC).
    """

    document_id: UUID
    referral_id: UUID
    document_number: str
    document_type: DocumentType
    title: str
    content: str
    generated_by: int
    created_at: datetime

    def __post_init__(self) -> None:
        if not self.document_number:
            raise ValueError("document_number cannot be empty")
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (UTC)")
