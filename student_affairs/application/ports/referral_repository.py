"""Referral repository port.

Writes after creation go through compare_and_swap so two writers that
read the same version cannot both commit.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from student_affairs.domain.models.referral import Referral


class ReferralRepositoryProtocol(Protocol):
    """Repository protocol for referral persistence."""

    @abstractmethod
    async def save(self, referral: Referral) -> None:
        """Persist a new referral.

        Args:
            referral: The referral to save.

        Raises:
            ConflictError: A referral with the same id already exists.
        """
        ...

    @abstractmethod
    async def get(self, referral_id: UUID) -> Referral | None:
        """Retrieve a referral by ID.

        Returns:
            The Referral if found, None otherwise.
        """
        ...

    @abstractmethod
    async def compare_and_swap(self, referral: Referral, expected_version: int) -> None:
        """Replace the stored referral if its version is still expected_version.

        Args:
            referral: The new state (version already bumped).
            expected_version: Version the writer read.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            ConcurrentModificationError: Stored version differs.
        """
        ...

    @abstractmethod
    async def delete(self, referral_id: UUID) -> bool:
        """Remove a referral.

        Returns:
            True if a referral was removed.
        """
        ...

    @abstractmethod
    async def next_number(self, prefix: str, year: int) -> str:
        """Allocate the next human-readable referral number for a year.

        Returns:
            A number such as "REF-2026-00012".
        """
        ...
