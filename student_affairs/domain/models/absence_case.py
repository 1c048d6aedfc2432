"""Absence case domain models.

An AbsenceCase tracks one student's accumulated absences and the
follow-up actions they make mandatory. The ladder rules that derive the
level and the required actions live in
student_affairs.domain.services.absence_ladder; this module only holds
the data and the invariants that hold regardless of thresholds.

Action Level Order:
- THREE_DAYS < FIVE_DAYS < TEN_DAYS
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any
from uuid import UUID


class AbsenceType(str, Enum):
    """How the absences accumulated."""

    CONSECUTIVE = "consecutive"
    """Unbroken run of absent days."""

    REPEATED = "repeated"
    """Separate absent days adding up over the term."""


class ActionLevel(str, Enum):
    """Absence severity tier driving which actions are mandatory."""

    THREE_DAYS = "3days"
    FIVE_DAYS = "5days"
    TEN_DAYS = "10days"

    @property
    def rank(self) -> int:
        """Position in the escalation order (0 is lowest)."""
        return _LEVEL_ORDER.index(self)

    def __lt__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, ActionLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, ActionLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, ActionLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:  # type: ignore[override]
        if not isinstance(other, ActionLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_ORDER: tuple[ActionLevel, ...] = (
    ActionLevel.THREE_DAYS,
    ActionLevel.FIVE_DAYS,
    ActionLevel.TEN_DAYS,
)


class AbsenceCaseStatus(str, Enum):
    """Status of an absence case."""

    ACTIVE = "active"
    RESOLVED = "resolved"
    ESCALATED = "escalated"


class RequiredActionKey(str, Enum):
    """Named obligations an absence case can carry."""

    COUNSELOR_NOTIFIED = "counselor_notified"
    LEARNING_PLAN_CREATED = "learning_plan_created"
    PROTECTION_CENTER_NOTIFIED = "protection_center_notified"
    PARENT_SUMMONED = "parent_summoned"
    COMMITMENT_TAKEN = "commitment_taken"
    REPORTED_TO_1919 = "reported_to_1919"
    EDUCATION_DEPT_NOTIFIED = "education_dept_notified"

    @property
    def is_critical(self) -> bool:
        return self in CRITICAL_ACTIONS


CRITICAL_ACTIONS: frozenset[RequiredActionKey] = frozenset(
    {
        RequiredActionKey.PROTECTION_CENTER_NOTIFIED,
        RequiredActionKey.REPORTED_TO_1919,
    }
)


@dataclass(frozen=True, eq=True)
class RequiredAction:
    """One obligation on an absence case.

    Attributes:
        key: Which obligation.
        done: Whether it has been carried out.
        done_at: When it was marked done (UTC).
        notes: Optional note recorded when marking it done.
    """

    key: RequiredActionKey
    done: bool = False
    done_at: datetime | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.done and self.done_at is None:
            raise ValueError(f"{self.key.value} is done but has no done_at")
        if not self.done and self.done_at is not None:
            raise ValueError(f"{self.key.value} is not done but has done_at")

    @property
    def critical(self) -> bool:
        return self.key.is_critical


@dataclass(frozen=True)
class AttendanceSummary:
    """Per-student attendance figures handed in by the attendance sweep.

    Attributes:
        student_id: The student.
        total_absence_days: Unexcused absent days in the term.
        consecutive_days: Longest current unbroken run, if any.
        absence_start_date: First day of the current run or of the term's absences.
        last_absence_date: Most recent absent day.
    """

    student_id: int
    total_absence_days: int
    consecutive_days: int | None = None
    absence_start_date: date | None = None
    last_absence_date: date | None = None

    def __post_init__(self) -> None:
        if self.total_absence_days < 0:
            raise ValueError(
                f"total_absence_days must be >= 0, got {self.total_absence_days}"
            )
        if self.consecutive_days is not None and self.consecutive_days < 0:
            raise ValueError(
                f"consecutive_days must be >= 0, got {self.consecutive_days}"
            )


@dataclass(frozen=True, eq=True)
class AbsenceCase:
    """A student's absence escalation case.

    Attributes:
        case_id: Unique identifier.
        student_id: The student.
        absence_type: Consecutive or repeated.
        total_absence_days: Effective total; never decreases within a case.
        action_level: Current tier; never decreases within a case.
        status: Active, escalated or resolved.
        required_actions: Obligations for the current level, in display order.
        created_at: When the case was opened (UTC).
        consecutive_days: Length of the unbroken run for consecutive cases.
        absence_start_date: First absent day.
        last_absence_date: Most recent absent day.
        referral_id: Referral opened for this case, if any.
        notes: Free text.
        updated_at: Last committed change.
        version: Optimistic concurrency token.
    """

    case_id: UUID
    student_id: int
    absence_type: AbsenceType
    total_absence_days: int
    action_level: ActionLevel
    status: AbsenceCaseStatus
    required_actions: tuple[RequiredAction, ...]
    created_at: datetime
    consecutive_days: int | None = field(default=None)
    absence_start_date: date | None = field(default=None)
    last_absence_date: date | None = field(default=None)
    referral_id: UUID | None = field(default=None)
    notes: str | None = field(default=None)
    updated_at: datetime | None = field(default=None)
    version: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate absence case invariants.

        Raises:
            ValueError: If any invariant is violated.
        """
        if self.total_absence_days < 0:
            raise ValueError(
                f"total_absence_days must be >= 0, got {self.total_absence_days}"
            )
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (UTC)")
        keys = [a.key for a in self.required_actions]
        if len(keys) != len(set(keys)):
            raise ValueError("required_actions contains duplicate keys")
        if self.status == AbsenceCaseStatus.RESOLVED and self.pending_actions:
            raise ValueError("resolved case cannot have pending required actions")

    @property
    def is_resolved(self) -> bool:
        return self.status == AbsenceCaseStatus.RESOLVED

    @property
    def required_keys(self) -> tuple[RequiredActionKey, ...]:
        return tuple(a.key for a in self.required_actions)

    @property
    def pending_actions(self) -> tuple[RequiredAction, ...]:
        return tuple(a for a in self.required_actions if not a.done)

    @property
    def requires_protection_center(self) -> bool:
        return RequiredActionKey.PROTECTION_CENTER_NOTIFIED in self.required_keys

    @property
    def progress(self) -> int:
        """Completed share of the currently required actions, 0-100."""
        if not self.required_actions:
            return 0
        done = sum(1 for a in self.required_actions if a.done)
        return done * 100 // len(self.required_actions)

    def action(self, key: RequiredActionKey) -> RequiredAction | None:
        """Return the required action for a key, or None if not required."""
        for required in self.required_actions:
            if required.key == key:
                return required
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert case to dict for storage/transmission."""
        return {
            "case_id": str(self.case_id),
            "student_id": self.student_id,
            "absence_type": self.absence_type.value,
            "total_absence_days": self.total_absence_days,
            "consecutive_days": self.consecutive_days,
            "action_level": self.action_level.value,
            "status": self.status.value,
            "required_actions": [
                {
                    "key": a.key.value,
                    "done": a.done,
                    "done_at": a.done_at.isoformat() if a.done_at else None,
                    "critical": a.critical,
                }
                for a in self.required_actions
            ],
            "actions_progress": self.progress,
            "referral_id": str(self.referral_id) if self.referral_id else None,
            "created_at": self.created_at.isoformat(),
        }
