"""Violation escalation resolver (pure).

Maps a new violation to the disciplinary procedure for its repetition:
count how often the student already committed the same
(degree, violation_type), then pick that rung of the degree's ladder.
Nothing here reads or writes a store; callers load history and the
ladder and pass them in.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from student_affairs.domain.models.procedure import (
    ProcedureDefinition,
    ProcedureLadder,
)
from student_affairs.domain.models.violation import ViolationRecord


@dataclass(frozen=True)
class ViolationEscalation:
    """Resolver output.

    Attributes:
        occurrence: 1-based repetition of (student, degree, type).
        procedure: Ladder entry to apply, None when the degree has no ladder.
        saturated: True when no rung matched the occurrence exactly and the
            last rung was applied.
    """

    occurrence: int
    procedure: ProcedureDefinition | None
    saturated: bool

    @property
    def procedure_step(self) -> int | None:
        return self.procedure.step if self.procedure is not None else None


def count_occurrence(
    student_id: int,
    degree: int,
    violation_type: str,
    history: Iterable[ViolationRecord],
) -> int:
    """Count the occurrence number a new violation would get.

    Args:
        student_id: The student.
        degree: Violation degree.
        violation_type: Violation type key.
        history: The student's prior violations (any degree or type).

    Returns:
        1 plus the number of prior records with the same student, degree
        and type.
    """
    return 1 + sum(1 for r in history if r.matches(student_id, degree, violation_type))


def resolve_violation_escalation(
    student_id: int,
    degree: int,
    violation_type: str,
    history: Iterable[ViolationRecord],
    ladder: ProcedureLadder,
) -> ViolationEscalation:
    """Resolve occurrence and procedure for a new violation.

    Args:
        student_id: The student.
        degree: Violation degree.
        violation_type: Violation type key.
        history: The student's prior violations.
        ladder: Procedure ladder of the degree.

    Returns:
        ViolationEscalation with the occurrence and the selected rung.
    """
    occurrence = count_occurrence(student_id, degree, violation_type, history)
    procedure = ladder.resolve(occurrence)
    saturated = (
        procedure is not None and procedure.step_or_repetition != occurrence
    )
    return ViolationEscalation(
        occurrence=occurrence,
        procedure=procedure,
        saturated=saturated,
    )
