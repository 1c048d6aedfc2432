"""In-memory stub implementation of DocumentRepositoryProtocol."""

from __future__ import annotations

from uuid import UUID

from student_affairs.domain.models.referral_document import ReferralDocument


class DocumentRepositoryStub:
    """In-memory referral document store."""

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._documents: dict[UUID, ReferralDocument] = {}
        self._sequences: dict[tuple[str, int], int] = {}

    async def save(self, document: ReferralDocument) -> None:
        """Persist a generated document."""
        self._documents[document.document_id] = document

    async def delete(self, document_id: UUID) -> None:
        """Remove a document if present."""
        self._documents.pop(document_id, None)

    async def list_for_referral(self, referral_id: UUID) -> list[ReferralDocument]:
        """Return a referral's documents ordered by created_at."""
        docs = [d for d in self._documents.values() if d.referral_id == referral_id]
        docs.sort(key=lambda d: d.created_at)
        return docs

    async def next_number(self, prefix: str, year: int) -> str:
        """Allocate the next number, e.g. DOC-2026-00001."""
        seq = self._sequences.get((prefix, year), 0) + 1
        self._sequences[(prefix, year)] = seq
        return f"{prefix}-{year}-{seq:05d}"

    def clear(self) -> None:
        """Clear all stored data."""
        self._documents.clear()
        self._sequences.clear()
