"""Workflow log (audit) port.

Entries are append-only and keyed by subject: a referral or an absence
case. The store assigns one insertion sequence across all subjects; it
breaks created_at ties.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

from student_affairs.domain.models.workflow_log import LogSubject

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from student_affairs.domain.models.actor import Actor
    from student_affairs.domain.models.workflow_log import (
        WorkflowLogAction,
        WorkflowLogEntry,
    )


class WorkflowLogProtocol(Protocol):
    """Protocol for the referral and absence case audit log."""

    @abstractmethod
    async def append(
        self,
        subject_id: UUID,
        action: WorkflowLogAction,
        actor: Actor,
        created_at: datetime,
        notes: str | None = None,
        subject: LogSubject = LogSubject.REFERRAL,
    ) -> WorkflowLogEntry:
        """Append an entry.

        Args:
            subject_id: Referral or case the action was taken on.
            action: What was done.
            actor: Who did it.
            created_at: Commit time of the action.
            notes: Optional free text.
            subject: Kind of entity subject_id names.

        Returns:
            The stored entry with its assigned sequence.
        """
        ...

    @abstractmethod
    async def list_for_referral(self, referral_id: UUID) -> list[WorkflowLogEntry]:
        """Return the live entries of a referral ordered by (created_at, sequence)."""
        ...

    @abstractmethod
    async def list_for_absence_case(self, case_id: UUID) -> list[WorkflowLogEntry]:
        """Return an absence case's entries ordered by (created_at, sequence)."""
        ...

    @abstractmethod
    async def detach(self, referral_id: UUID) -> int:
        """Remove a referral's entries from the live view.

        The entries themselves are retained by the store.

        Returns:
            Number of entries detached.
        """
        ...
