"""Identity provider stub returning a configurable actor."""

from __future__ import annotations

from student_affairs.domain.models.actor import Actor

DEFAULT_ACTOR = Actor(actor_id=1, name="System Administrator", role="admin")


class IdentityProviderStub:
    """Returns whichever actor the test sets as current.

    Usage:
        identity = IdentityProviderStub()
        identity.set_actor(Actor(actor_id=42, name="Counselor", role="counselor"))
    """

    def __init__(self, actor: Actor = DEFAULT_ACTOR) -> None:
        """Initialize with the actor to report."""
        self._actor = actor

    def set_actor(self, actor: Actor) -> None:
        """Switch the current actor."""
        self._actor = actor

    def current_actor(self) -> Actor:
        """Return the current actor."""
        return self._actor
