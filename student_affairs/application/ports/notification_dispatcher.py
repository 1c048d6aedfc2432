"""Notification dispatcher port.

Delivery channels (SMS, WhatsApp, push) are the adapter's concern.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from student_affairs.domain.models.notification import (
        DispatchResult,
        NotificationRecipient,
    )


class NotificationDispatcherProtocol(Protocol):
    """Protocol for sending notifications to parents and staff."""

    @abstractmethod
    async def send(
        self, recipient: NotificationRecipient, message: str
    ) -> DispatchResult:
        """Send a message.

        Returns:
            DispatchResult; delivered=False reports a failure.

        Raises:
            DependencyFailureError: The dispatcher could not be reached.
        """
        ...
