"""In-memory stub implementation of ProcedureCatalogProtocol.

Ships a small default catalog so the default wiring and the integration
tests have ladders for every degree. Tests replace it with set_procedures().
"""

from __future__ import annotations

from collections.abc import Iterable

from student_affairs.domain.models.procedure import ProcedureDefinition, ProcedureTask


def _task(task_id: int, title: str, role: str, **kwargs: object) -> ProcedureTask:
    return ProcedureTask(task_id=task_id, title=title, role=role, **kwargs)  # type: ignore[arg-type]


DEFAULT_PROCEDURES: tuple[ProcedureDefinition, ...] = (
    # Degree 1
    ProcedureDefinition(
        degree=1,
        step=1,
        title="Verbal warning",
        description="Teacher warns the student and records the incident.",
        tasks=(_task(101, "Warn the student", "teacher"),),
    ),
    ProcedureDefinition(
        degree=1,
        step=2,
        title="Written warning and parent notice",
        description="Written warning signed by the student; parent is informed.",
        tasks=(
            _task(102, "Written warning", "teacher"),
            _task(
                103,
                "Notify parent",
                "system",
                system_trigger="trigger_parent_sms",
            ),
        ),
    ),
    ProcedureDefinition(
        degree=1,
        step=3,
        title="Parent summon and behaviour commitment",
        description="Parent is summoned and the student signs a commitment.",
        tasks=(
            _task(104, "Summon parent", "vice_principal"),
            _task(105, "Sign commitment", "vice_principal", points_to_deduct=1),
        ),
    ),
    ProcedureDefinition(
        degree=1,
        step=4,
        title="Referral to counselor",
        description="Student is referred to the counselor for follow-up.",
        tasks=(_task(106, "Refer to counselor", "vice_principal", points_to_deduct=1),),
    ),
    # Degree 2
    ProcedureDefinition(
        degree=2,
        step=1,
        title="Parent notice and written warning",
        description="Parent is informed and a written warning is issued.",
        tasks=(
            _task(201, "Written warning", "vice_principal", points_to_deduct=2),
            _task(202, "Notify parent", "system", system_trigger="trigger_parent_sms"),
        ),
    ),
    ProcedureDefinition(
        degree=2,
        step=2,
        title="Parent summon and counselor referral",
        description="Parent is summoned and the counselor opens a case.",
        tasks=(
            _task(203, "Summon parent", "vice_principal"),
            _task(204, "Open student case", "counselor", points_to_deduct=2),
        ),
    ),
    ProcedureDefinition(
        degree=2,
        step=3,
        title="Guidance committee",
        description="Case goes to the student guidance committee.",
        tasks=(_task(205, "Committee review", "committee", points_to_deduct=2),),
    ),
    # Degree 3
    ProcedureDefinition(
        degree=3,
        step=1,
        title="Parent summon and committee review",
        description="Parent is summoned and the committee reviews the case.",
        tasks=(
            _task(301, "Summon parent", "vice_principal"),
            _task(302, "Committee review", "committee", points_to_deduct=3),
        ),
    ),
    ProcedureDefinition(
        degree=3,
        step=2,
        title="Class transfer",
        description="Student is moved to another class by committee decision.",
        tasks=(_task(303, "Transfer class", "committee", points_to_deduct=3),),
    ),
    # Degree 4
    ProcedureDefinition(
        degree=4,
        step=1,
        title="Committee and education department notice",
        description="Committee decision and notice to the education department.",
        tasks=(
            _task(401, "Committee review", "committee", points_to_deduct=10),
            _task(402, "Notify education department", "principal"),
        ),
    ),
)

DEFAULT_VIOLATION_TYPES: dict[int, frozenset[str]] = {
    1: frozenset({"late_to_class", "uniform", "sleeping_in_class"}),
    2: frozenset({"skipping_class", "disrespect", "mobile_phone"}),
    3: frozenset({"fighting", "vandalism", "bullying"}),
    4: frozenset({"assault", "weapon_possession", "theft"}),
}


class ProcedureCatalogStub:
    """In-memory procedure catalog."""

    def __init__(
        self,
        procedures: Iterable[ProcedureDefinition] = DEFAULT_PROCEDURES,
        violation_types: dict[int, frozenset[str]] | None = None,
    ) -> None:
        """Initialize the catalog.

        Args:
            procedures: Catalog entries for all degrees.
            violation_types: Allowed type keys per degree; None uses the
                default set, an empty dict disables type checking.
        """
        self._procedures: list[ProcedureDefinition] = list(procedures)
        self._violation_types: dict[int, frozenset[str]] = (
            dict(DEFAULT_VIOLATION_TYPES)
            if violation_types is None
            else dict(violation_types)
        )

    def set_procedures(self, procedures: Iterable[ProcedureDefinition]) -> None:
        """Replace the catalog entries (for testing)."""
        self._procedures = list(procedures)

    def set_violation_types(self, degree: int, types: Iterable[str]) -> None:
        """Replace the allowed type keys for a degree (for testing)."""
        self._violation_types[degree] = frozenset(types)

    async def get_procedures(self, degree: int) -> list[ProcedureDefinition]:
        """Return the definitions of a degree."""
        return [p for p in self._procedures if p.degree == degree]

    async def violation_types(self, degree: int) -> frozenset[str]:
        """Return the type keys of a degree; empty when unrestricted."""
        return self._violation_types.get(degree, frozenset())
