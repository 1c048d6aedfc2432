"""Disciplinary procedure catalog models.

For each violation degree the catalog defines an ordered ladder of
procedures keyed by repetition count. The ladder lookup saturates: an
occurrence past the last rung resolves to the last rung, never to
nothing.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True, eq=True)
class ProcedureTask:
    """A task inside a procedure step.

    Attributes:
        task_id: Catalog identifier.
        title: What has to be done.
        mandatory: Whether the step is incomplete without it.
        role: Role responsible (teacher, counselor, committee, ...).
        system_trigger: Automation hook key (e.g. "trigger_parent_sms").
        points_to_deduct: Behaviour points deducted by the task.
    """

    task_id: int
    title: str
    mandatory: bool = True
    role: str | None = None
    system_trigger: str | None = None
    points_to_deduct: int | None = None


@dataclass(frozen=True, eq=True)
class ProcedureDefinition:
    """A catalog entry: what to do for a given repetition within a degree.

    Attributes:
        degree: Violation degree the entry belongs to.
        step: Position in the degree's ladder (1-based).
        title: Short name of the procedure.
        description: What the procedure prescribes.
        repetition: Repetition count this entry applies to, when it differs
            from the step number.
        mandatory: Whether the procedure must be executed.
        tasks: Task breakdown.
    """

    degree: int
    step: int
    title: str
    description: str
    repetition: int | None = field(default=None)
    mandatory: bool = field(default=True)
    tasks: tuple[ProcedureTask, ...] = field(default=())

    def __post_init__(self) -> None:
        if self.step < 1:
            raise ValueError(f"step must be >= 1, got {self.step}")
        if self.repetition is not None and self.repetition < 1:
            raise ValueError(f"repetition must be >= 1, got {self.repetition}")

    @property
    def step_or_repetition(self) -> int:
        """Ladder key: the repetition when defined, otherwise the step."""
        return self.repetition if self.repetition is not None else self.step

    @property
    def points_to_deduct(self) -> int:
        """Behaviour points deducted by the procedure's tasks."""
        return sum(t.points_to_deduct or 0 for t in self.tasks)


@dataclass(frozen=True)
class ProcedureLadder:
    """Ordered procedure ladder for one degree.

    Build with ProcedureLadder.for_degree() so entries are filtered and
    ordered by their ladder key.
    """

    degree: int
    entries: tuple[ProcedureDefinition, ...]

    @classmethod
    def for_degree(
        cls, degree: int, definitions: Iterable[ProcedureDefinition]
    ) -> ProcedureLadder:
        """Build the ladder for a degree from catalog entries.

        Args:
            degree: The violation degree.
            definitions: Catalog entries; entries of other degrees are ignored.

        Returns:
            Ladder ordered by step_or_repetition.
        """
        entries = sorted(
            (d for d in definitions if d.degree == degree),
            key=lambda d: (d.step_or_repetition, d.step),
        )
        return cls(degree=degree, entries=tuple(entries))

    @property
    def is_empty(self) -> bool:
        return not self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def resolve(self, occurrence: int) -> ProcedureDefinition | None:
        """Select the procedure for an occurrence, saturating at the last rung.

        Args:
            occurrence: 1-based occurrence number.

        Returns:
            The entry whose step_or_repetition equals occurrence; otherwise
            the last entry; None only when the ladder is empty.

        Raises:
            ValueError: If occurrence is below 1.
        """
        if occurrence < 1:
            raise ValueError(f"occurrence must be >= 1, got {occurrence}")
        if self.is_empty:
            return None
        for entry in self.entries:
            if entry.step_or_repetition == occurrence:
                return entry
        return self.entries[-1]
