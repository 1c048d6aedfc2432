"""Lateness follow-up levels and sweep input."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class LatenessLevel(str, Enum):
    """Follow-up tier for a student's late arrivals in the term."""

    WARNING = "warning"
    """Student is warned and the homeroom teacher informed."""

    PARENT_SUMMON = "parent_summon"
    """Parent is summoned to the school."""

    COMMITTEE = "committee"
    """Case goes to the student guidance committee."""


@dataclass(frozen=True)
class LatenessSummary:
    """Per-student late-arrival count handed in by the attendance sweep.

    Attributes:
        student_id: The student.
        late_count: Late arrivals in the term.
    """

    student_id: int
    late_count: int

    def __post_init__(self) -> None:
        if self.late_count < 0:
            raise ValueError(f"late_count must be >= 0, got {self.late_count}")
