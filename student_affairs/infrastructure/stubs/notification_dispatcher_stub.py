"""Notification dispatcher stub.

Records every message instead of delivering it, with configurable
failure for testing post-commit side-effect handling.
"""

from __future__ import annotations

from dataclasses import dataclass

from student_affairs.application.ports.time_authority import TimeAuthorityProtocol
from student_affairs.domain.errors.workflow import DependencyFailureError
from student_affairs.domain.models.notification import (
    DispatchResult,
    NotificationRecipient,
)


@dataclass(frozen=True)
class SentNotification:
    """A message captured by the stub."""

    recipient: NotificationRecipient
    message: str


class NotificationDispatcherStub:
    """In-memory notification dispatcher.

    Usage:
        dispatcher = NotificationDispatcherStub()

        # Raise DependencyFailureError on send
        dispatcher.configure_failure(True, "SMS gateway down")

        # Return delivered=False instead of raising
        dispatcher.configure_undelivered(True, "number unreachable")
    """

    def __init__(self, time_authority: TimeAuthorityProtocol | None = None) -> None:
        """Initialize the stub with no sent messages."""
        self._time = time_authority
        self._sent: list[SentNotification] = []
        self._should_fail = False
        self._failure_message = "Simulated dispatch failure"
        self._undelivered = False
        self._undelivered_reason = "Simulated undelivered message"

    @property
    def sent(self) -> list[SentNotification]:
        """Messages accepted so far."""
        return list(self._sent)

    def configure_failure(
        self,
        should_fail: bool,
        message: str = "Simulated dispatch failure",
    ) -> None:
        """Configure whether send() raises DependencyFailureError."""
        self._should_fail = should_fail
        self._failure_message = message

    def configure_undelivered(
        self,
        undelivered: bool,
        reason: str = "Simulated undelivered message",
    ) -> None:
        """Configure whether send() reports delivered=False."""
        self._undelivered = undelivered
        self._undelivered_reason = reason

    async def send(
        self, recipient: NotificationRecipient, message: str
    ) -> DispatchResult:
        """Capture a message.

        Raises:
            DependencyFailureError: If configured to fail.
        """
        if self._should_fail:
            raise DependencyFailureError("notification_dispatcher", self._failure_message)
        if self._undelivered:
            return DispatchResult(delivered=False, error=self._undelivered_reason)

        self._sent.append(SentNotification(recipient=recipient, message=message))
        return DispatchResult(
            delivered=True,
            dispatched_at=self._time.now() if self._time is not None else None,
        )

    def clear(self) -> None:
        """Clear captured messages and failure configuration."""
        self._sent.clear()
        self._should_fail = False
        self._undelivered = False
