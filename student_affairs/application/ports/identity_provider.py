"""Identity provider port."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from student_affairs.domain.models.actor import Actor


class IdentityProviderProtocol(Protocol):
    """Resolves the actor performing the current operation."""

    @abstractmethod
    def current_actor(self) -> Actor:
        """Return the authenticated actor."""
        ...
