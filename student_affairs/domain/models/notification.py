"""Notification dispatch models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class NotificationRecipient:
    """Who a notification is addressed to.

    Attributes:
        student_id: Student the notification concerns.
        audience: Recipient group ("parent", "counselor", ...).
    """

    student_id: int
    audience: str = "parent"


@dataclass(frozen=True)
class DispatchResult:
    """Outcome reported by the notification dispatcher.

    Attributes:
        delivered: Whether the dispatcher accepted the message.
        error: Failure description when not delivered.
        dispatched_at: When the dispatcher accepted it.
    """

    delivered: bool
    error: str | None = field(default=None)
    dispatched_at: datetime | None = field(default=None)
