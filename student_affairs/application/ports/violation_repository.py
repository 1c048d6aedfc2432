"""Violation repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from student_affairs.domain.models.violation import ViolationRecord


class ViolationRepositoryProtocol(Protocol):
    """Repository protocol for violation records."""

    @abstractmethod
    async def save(self, record: ViolationRecord) -> None:
        """Persist a violation record.

        Raises:
            ConflictError: A record with the same id already exists.
        """
        ...

    @abstractmethod
    async def get(self, violation_id: UUID) -> ViolationRecord | None:
        """Retrieve a violation record by ID."""
        ...

    @abstractmethod
    async def delete(self, violation_id: UUID) -> None:
        """Remove a record; a missing id is not an error."""
        ...

    @abstractmethod
    async def list_for_student(self, student_id: int) -> list[ViolationRecord]:
        """Return a student's violations ordered by occurred_at."""
        ...
