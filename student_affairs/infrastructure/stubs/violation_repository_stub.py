"""In-memory stub implementation of ViolationRepositoryProtocol."""

from __future__ import annotations

from uuid import UUID

from student_affairs.domain.errors.workflow import ConflictError
from student_affairs.domain.models.violation import ViolationRecord


class ViolationRepositoryStub:
    """In-memory violation store."""

    def __init__(self) -> None:
        """Initialize the stub with empty storage."""
        self._records: dict[UUID, ViolationRecord] = {}

    def add_record(self, record: ViolationRecord) -> None:
        """Add a record directly to storage for testing."""
        self._records[record.violation_id] = record

    async def save(self, record: ViolationRecord) -> None:
        """Persist a violation record.

        Raises:
            ConflictError: Record id already stored.
        """
        if record.violation_id in self._records:
            raise ConflictError(f"Violation already exists: {record.violation_id}")
        self._records[record.violation_id] = record

    async def get(self, violation_id: UUID) -> ViolationRecord | None:
        """Retrieve a record by ID."""
        return self._records.get(violation_id)

    async def delete(self, violation_id: UUID) -> None:
        """Remove a record if present."""
        self._records.pop(violation_id, None)

    async def list_for_student(self, student_id: int) -> list[ViolationRecord]:
        """Return a student's records ordered by occurred_at."""
        records = [r for r in self._records.values() if r.student_id == student_id]
        records.sort(key=lambda r: r.occurred_at)
        return records

    def clear(self) -> None:
        """Clear all stored data."""
        self._records.clear()
