"""Partial-success result for operations with post-commit side effects."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SideEffectOutcome(Generic[T]):
    """Result of a committed mutation followed by an external side effect.

    A failed side effect never undoes the committed state change; the
    failure is reported here instead.

    Attributes:
        entity: The entity as committed.
        state_changed: Whether the state write committed.
        side_effect_error: Failure description, None when the side effect
            succeeded or none was requested.
    """

    entity: T
    state_changed: bool = True
    side_effect_error: str | None = None

    @property
    def succeeded(self) -> bool:
        """True when the state committed and no side effect failed."""
        return self.state_changed and self.side_effect_error is None
