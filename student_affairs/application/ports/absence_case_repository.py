"""Absence case repository port."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from uuid import UUID

    from student_affairs.domain.models.absence_case import AbsenceCase


class AbsenceCaseRepositoryProtocol(Protocol):
    """Repository protocol for absence cases."""

    @abstractmethod
    async def save(self, case: AbsenceCase) -> None:
        """Persist a new case.

        Raises:
            ConflictError: A case with the same id already exists.
        """
        ...

    @abstractmethod
    async def get(self, case_id: UUID) -> AbsenceCase | None:
        """Retrieve a case by ID."""
        ...

    @abstractmethod
    async def compare_and_swap(self, case: AbsenceCase, expected_version: int) -> None:
        """Replace the stored case if its version is still expected_version.

        Raises:
            AbsenceCaseNotFoundError: Case doesn't exist.
            ConcurrentModificationError: Stored version differs.
        """
        ...

    @abstractmethod
    async def find_open_for_student(self, student_id: int) -> AbsenceCase | None:
        """Return the student's unresolved case, if any."""
        ...

    @abstractmethod
    async def find_latest_for_student(self, student_id: int) -> AbsenceCase | None:
        """Return the student's most recently opened case, resolved or not."""
        ...

    @abstractmethod
    async def list_open(self) -> list[AbsenceCase]:
        """Return all unresolved cases ordered by created_at."""
        ...
