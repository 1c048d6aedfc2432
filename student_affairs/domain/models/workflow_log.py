"""Workflow log domain models.

A WorkflowLogEntry is an immutable fact about something done to a
referral or to an absence case. Entries are append-only: never edited,
never removed. Ordering is by creation time with ties broken by the
store-assigned insertion sequence, because wall-clock timestamps are
not unique.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from student_affairs.domain.models.actor import Actor


class LogSubject(str, Enum):
    """Kind of entity a log entry is about."""

    REFERRAL = "referral"
    ABSENCE_CASE = "absence_case"


class WorkflowLogAction(str, Enum):
    """Action recorded in the workflow log."""

    # Referral actions
    RECEIVED = "received"
    ASSIGNED = "assigned"
    TRANSFERRED = "transferred"
    VIOLATION_RECORDED = "violation_recorded"
    CASE_OPENED = "case_opened"
    PLAN_CREATED = "plan_created"
    PARENT_CONTACTED = "parent_contacted"
    NOTE_ADDED = "note_added"
    DOCUMENT_GENERATED = "document_generated"
    COMPLETED = "completed"
    CLOSED = "closed"
    CANCELLED = "cancelled"

    # Absence case actions
    ABSENCE_CASE_OPENED = "absence_case_opened"
    CASE_REEVALUATED = "case_reevaluated"
    ACTION_COMPLETED = "action_completed"
    REFERRAL_LINKED = "referral_linked"


@dataclass(frozen=True, eq=True)
class WorkflowLogEntry:
    """A single entry in a referral's or absence case's audit log.

    Attributes:
        entry_id: Unique identifier for this entry.
        subject_id: The referral or case the action was taken on.
        sequence: Store-assigned monotonic insertion sequence.
        action: What was done.
        actor: Who did it.
        created_at: When the action was committed (UTC).
        notes: Optional free text (transfer reason, note body, ...).
        subject: Whether subject_id names a referral or an absence case.
    """

    entry_id: UUID
    subject_id: UUID
    sequence: int
    action: WorkflowLogAction
    actor: Actor
    created_at: datetime
    notes: str | None = field(default=None)
    subject: LogSubject = field(default=LogSubject.REFERRAL)

    def __post_init__(self) -> None:
        if self.sequence < 1:
            raise ValueError(f"sequence must be >= 1, got {self.sequence}")
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (UTC)")

    @property
    def referral_id(self) -> UUID | None:
        """The referral this entry belongs to, None for case entries."""
        return self.subject_id if self.subject == LogSubject.REFERRAL else None

    @property
    def sort_key(self) -> tuple[datetime, int]:
        """Ordering key: creation time, then insertion sequence."""
        return (self.created_at, self.sequence)

    def to_dict(self) -> dict[str, Any]:
        """Convert entry to dict for storage/transmission."""
        return {
            "entry_id": str(self.entry_id),
            "subject": self.subject.value,
            "subject_id": str(self.subject_id),
            "sequence": self.sequence,
            "action": self.action.value,
            "actor": {
                "id": self.actor.actor_id,
                "name": self.actor.name,
                "role": self.actor.role,
            },
            "notes": self.notes,
            "created_at": self.created_at.isoformat(),
        }
