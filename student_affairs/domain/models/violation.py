"""Behavioural violation domain models.

A ViolationRecord is created once and never changed. The occurrence
number and procedure step are captured at recording time so the record
keeps telling which rung of the disciplinary ladder was applied even if
the catalog changes later.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import UUID

MIN_DEGREE: int = 1
MAX_DEGREE: int = 4


def is_valid_degree(degree: int) -> bool:
    """Check a violation degree is within 1..4."""
    return MIN_DEGREE <= degree <= MAX_DEGREE


@dataclass(frozen=True, eq=True)
class ViolationRecord:
    """An immutable record of one behavioural violation.

    Attributes:
        violation_id: Unique identifier.
        student_id: The student who committed the violation.
        degree: Severity tier, 1 (lowest) to 4 (highest).
        violation_type: Key of the violation type within the degree.
        occurred_at: When the violation happened (UTC).
        location: Where it happened.
        description: What happened.
        occurrence: 1-based repetition of (student, degree, type).
        procedure_step: Ladder step applied, None when the degree has no ladder.
        referral_id: Referral the violation was recorded from, if any.
        reported_by: User who reported it.
        recorded_at: When the record was persisted (UTC).
        points_deducted: Behaviour points deducted for this violation.
    """

    violation_id: UUID
    student_id: int
    degree: int
    violation_type: str
    occurred_at: datetime
    location: str
    description: str
    occurrence: int
    recorded_at: datetime
    procedure_step: int | None = field(default=None)
    referral_id: UUID | None = field(default=None)
    reported_by: int | None = field(default=None)
    points_deducted: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate violation record fields.

        Raises:
            ValueError: If any field validation fails.
        """
        if not is_valid_degree(self.degree):
            raise ValueError(
                f"degree must be {MIN_DEGREE}-{MAX_DEGREE}, got {self.degree}"
            )
        if not self.violation_type:
            raise ValueError("violation_type cannot be empty")
        if self.occurrence < 1:
            raise ValueError(f"occurrence must be >= 1, got {self.occurrence}")
        if self.points_deducted < 0:
            raise ValueError(
                f"points_deducted must be >= 0, got {self.points_deducted}"
            )
        if self.occurred_at.tzinfo is None:
            raise ValueError("occurred_at must be timezone-aware (UTC)")
        if self.recorded_at.tzinfo is None:
            raise ValueError("recorded_at must be timezone-aware (UTC)")

    def matches(self, student_id: int, degree: int, violation_type: str) -> bool:
        """Check whether this record counts towards a (student, degree, type) tuple."""
        return (
            self.student_id == student_id
            and self.degree == degree
            and self.violation_type == violation_type
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert record to dict for storage/transmission."""
        return {
            "violation_id": str(self.violation_id),
            "student_id": self.student_id,
            "degree": self.degree,
            "violation_type": self.violation_type,
            "occurred_at": self.occurred_at.isoformat(),
            "location": self.location,
            "description": self.description,
            "occurrence": self.occurrence,
            "procedure_step": self.procedure_step,
            "referral_id": str(self.referral_id) if self.referral_id else None,
            "reported_by": self.reported_by,
            "points_deducted": self.points_deducted,
            "recorded_at": self.recorded_at.isoformat(),
        }


@dataclass(frozen=True)
class ViolationPayload:
    """Input for recording a violation.

    Attributes:
        degree: Severity tier, 1..4.
        violation_type: Key of the violation type.
        occurred_at: When it happened (UTC).
        location: Where it happened.
        description: What happened.
        send_parent_message: Dispatch a parent notification after recording.
        parent_message: Message body; a default is built when omitted.
        points_to_deduct: Behaviour points to deduct; taken from the
            resolved procedure's tasks when omitted.
        transfer_to_counselor: Transfer the referral to the counselor
            after recording.
        create_treatment_plan: Ask the caller to open a treatment plan
            for the student.
    """

    degree: int
    violation_type: str
    occurred_at: datetime
    location: str
    description: str = ""
    send_parent_message: bool = False
    parent_message: str | None = None
    points_to_deduct: int | None = None
    transfer_to_counselor: bool = False
    create_treatment_plan: bool = False
