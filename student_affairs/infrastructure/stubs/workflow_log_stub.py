"""In-memory stub implementation of WorkflowLogProtocol.

Entries are never removed. detach() hides a referral's entries from the
live view and moves them to the archive.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID, uuid4

from student_affairs.domain.models.actor import Actor
from student_affairs.domain.models.workflow_log import (
    LogSubject,
    WorkflowLogAction,
    WorkflowLogEntry,
)

_Key = tuple[LogSubject, UUID]


class WorkflowLogStub:
    """In-memory append-only workflow log.

    The sequence counter is store-wide and never reset by detach(), so
    sequences stay unique across referrals and absence cases.
    """

    def __init__(self) -> None:
        """Initialize the stub with an empty log."""
        self._entries: dict[_Key, list[WorkflowLogEntry]] = {}
        self._archive: dict[_Key, list[WorkflowLogEntry]] = {}
        self._sequence: int = 0

    async def append(
        self,
        subject_id: UUID,
        action: WorkflowLogAction,
        actor: Actor,
        created_at: datetime,
        notes: str | None = None,
        subject: LogSubject = LogSubject.REFERRAL,
    ) -> WorkflowLogEntry:
        """Append an entry and assign its sequence."""
        self._sequence += 1
        entry = WorkflowLogEntry(
            entry_id=uuid4(),
            subject_id=subject_id,
            sequence=self._sequence,
            action=action,
            actor=actor,
            created_at=created_at,
            notes=notes,
            subject=subject,
        )
        self._entries.setdefault((subject, subject_id), []).append(entry)
        return entry

    async def list_for_referral(self, referral_id: UUID) -> list[WorkflowLogEntry]:
        """Return a referral's live entries ordered by (created_at, sequence)."""
        return self._ordered((LogSubject.REFERRAL, referral_id))

    async def list_for_absence_case(self, case_id: UUID) -> list[WorkflowLogEntry]:
        """Return an absence case's entries ordered by (created_at, sequence)."""
        return self._ordered((LogSubject.ABSENCE_CASE, case_id))

    async def detach(self, referral_id: UUID) -> int:
        """Move a referral's entries from the live view to the archive."""
        key = (LogSubject.REFERRAL, referral_id)
        entries = self._entries.pop(key, [])
        if entries:
            self._archive.setdefault(key, []).extend(entries)
        return len(entries)

    def get_archived(self, referral_id: UUID) -> list[WorkflowLogEntry]:
        """Return entries detached for a referral (for testing)."""
        return list(self._archive.get((LogSubject.REFERRAL, referral_id), []))

    @property
    def entry_count(self) -> int:
        """Total entries held, live and archived."""
        live = sum(len(e) for e in self._entries.values())
        archived = sum(len(e) for e in self._archive.values())
        return live + archived

    def clear(self) -> None:
        """Clear all stored data."""
        self._entries.clear()
        self._archive.clear()
        self._sequence = 0

    def _ordered(self, key: _Key) -> list[WorkflowLogEntry]:
        return sorted(self._entries.get(key, []), key=lambda e: e.sort_key)
