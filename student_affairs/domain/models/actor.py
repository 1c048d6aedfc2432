"""Actor reference used for attribution of workflow actions."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, eq=True)
class Actor:
    """Opaque reference to the person performing an action.

    Resolved by the identity provider; the workflow only records it.

    Attributes:
        actor_id: User identifier.
        name: Display name at the time of the action.
        role: Role key (e.g. "counselor", "vice_principal").
    """

    actor_id: int
    name: str
    role: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("actor name cannot be empty")
        if not self.role:
            raise ValueError("actor role cannot be empty")
