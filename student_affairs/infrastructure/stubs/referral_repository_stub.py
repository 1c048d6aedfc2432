"""In-memory stub implementation of ReferralRepositoryProtocol.

This module provides an in-memory implementation for testing and for
the default bootstrap wiring. Not intended for production use.
"""

from __future__ import annotations

from uuid import UUID

from student_affairs.domain.errors.workflow import (
    ConcurrentModificationError,
    ConflictError,
    ReferralNotFoundError,
)
from student_affairs.domain.models.referral import Referral, ReferralStatus


class ReferralRepositoryStub:
    """In-memory implementation of ReferralRepositoryProtocol.

    Example:
        >>> stub = ReferralRepositoryStub()
        >>> await stub.save(referral)
        >>> result = await stub.get(referral.referral_id)
    """

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._referrals: dict[UUID, Referral] = {}
        self._sequences: dict[tuple[str, int], int] = {}  # (prefix, year) -> last seq

    async def save(self, referral: Referral) -> None:
        """Persist a new referral.

        Raises:
            ConflictError: Referral id already stored.
        """
        if referral.referral_id in self._referrals:
            raise ConflictError(f"Referral already exists: {referral.referral_id}")
        self._referrals[referral.referral_id] = referral

    async def get(self, referral_id: UUID) -> Referral | None:
        """Retrieve referral by ID."""
        return self._referrals.get(referral_id)

    async def compare_and_swap(self, referral: Referral, expected_version: int) -> None:
        """Replace the referral if the stored version matches.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            ConcurrentModificationError: Stored version differs.
        """
        current = self._referrals.get(referral.referral_id)
        if current is None:
            raise ReferralNotFoundError(referral.referral_id)
        if current.version != expected_version:
            raise ConcurrentModificationError(
                entity_id=referral.referral_id,
                expected_version=expected_version,
                actual_version=current.version,
            )
        self._referrals[referral.referral_id] = referral

    async def delete(self, referral_id: UUID) -> bool:
        """Remove a referral. Returns True if one was removed."""
        return self._referrals.pop(referral_id, None) is not None

    async def next_number(self, prefix: str, year: int) -> str:
        """Allocate the next number, e.g. REF-2026-00001."""
        seq = self._sequences.get((prefix, year), 0) + 1
        self._sequences[(prefix, year)] = seq
        return f"{prefix}-{year}-{seq:05d}"

    async def list_by_status(self, status: ReferralStatus) -> list[Referral]:
        """Return referrals in a status ordered by created_at."""
        matching = [r for r in self._referrals.values() if r.status == status]
        matching.sort(key=lambda r: r.created_at)
        return matching

    def clear(self) -> None:
        """Clear all stored data."""
        self._referrals.clear()
        self._sequences.clear()
