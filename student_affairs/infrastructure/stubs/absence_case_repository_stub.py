"""In-memory stub implementation of AbsenceCaseRepositoryProtocol."""

from __future__ import annotations

from uuid import UUID

from student_affairs.domain.errors.workflow import (
    AbsenceCaseNotFoundError,
    ConcurrentModificationError,
    ConflictError,
)
from student_affairs.domain.models.absence_case import AbsenceCase


class AbsenceCaseRepositoryStub:
    """In-memory absence case store."""

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._cases: dict[UUID, AbsenceCase] = {}

    async def save(self, case: AbsenceCase) -> None:
        """Persist a new case.

        Raises:
            ConflictError: Case id already stored.
        """
        if case.case_id in self._cases:
            raise ConflictError(f"Absence case already exists: {case.case_id}")
        self._cases[case.case_id] = case

    async def get(self, case_id: UUID) -> AbsenceCase | None:
        """Retrieve a case by ID."""
        return self._cases.get(case_id)

    async def compare_and_swap(self, case: AbsenceCase, expected_version: int) -> None:
        """Replace the case if the stored version matches.

        Raises:
            AbsenceCaseNotFoundError: Case doesn't exist.
            ConcurrentModificationError: Stored version differs.
        """
        current = self._cases.get(case.case_id)
        if current is None:
            raise AbsenceCaseNotFoundError(case.case_id)
        if current.version != expected_version:
            raise ConcurrentModificationError(
                entity_id=case.case_id,
                expected_version=expected_version,
                actual_version=current.version,
            )
        self._cases[case.case_id] = case

    async def find_open_for_student(self, student_id: int) -> AbsenceCase | None:
        """Return the student's unresolved case, if any."""
        for case in self._cases.values():
            if case.student_id == student_id and not case.is_resolved:
                return case
        return None

    async def find_latest_for_student(self, student_id: int) -> AbsenceCase | None:
        """Return the student's most recently opened case, resolved or not."""
        cases = await self.list_for_student(student_id)
        return cases[-1] if cases else None

    async def list_open(self) -> list[AbsenceCase]:
        """Return unresolved cases ordered by created_at."""
        cases = [c for c in self._cases.values() if not c.is_resolved]
        cases.sort(key=lambda c: c.created_at)
        return cases

    async def list_for_student(self, student_id: int) -> list[AbsenceCase]:
        """Return all of a student's cases, resolved included."""
        cases = [c for c in self._cases.values() if c.student_id == student_id]
        cases.sort(key=lambda c: c.created_at)
        return cases

    def clear(self) -> None:
        """Clear all stored data."""
        self._cases.clear()
