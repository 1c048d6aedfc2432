"""Referral document repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from student_affairs.domain.models.referral_document import ReferralDocument


class DocumentRepositoryProtocol(Protocol):
    """Repository protocol for generated referral documents."""

    @abstractmethod
    async def save(self, document: ReferralDocument) -> None:
        """Persist a generated document."""
        ...

    @abstractmethod
    async def delete(self, document_id: UUID) -> None:
        """Remove a document; a missing id is not an error."""
        ...

    @abstractmethod
    async def list_for_referral(self, referral_id: UUID) -> list[ReferralDocument]:
        """Return a referral's documents ordered by created_at."""
        ...

    @abstractmethod
    async def next_number(self, prefix: str, year: int) -> str:
        """Allocate the next human-readable document number for a year."""
        ...
