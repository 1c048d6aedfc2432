"""Workflow errors for referrals, violations and absence cases.

This module defines the error taxonomy shared by every workflow
operation:

- InvalidStateError: action not permitted from the current state
- ValidationError: required input missing or malformed
- ConflictError: set-once operation attempted a second time
- ConcurrentModificationError: compare-and-swap lost to another writer
- DependencyFailureError: an external collaborator failed

Guard errors are raised before any write. A DependencyFailureError raised
after a committed write is reported as a partial success by the calling
service, never rolled back.
"""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from student_affairs.domain.exceptions import StudentAffairsError


class InvalidStateError(StudentAffairsError):
    """Raised when an action is attempted from a state that forbids it.

    Always surfaced to the caller; never retried silently. Re-invoking a
    non-idempotent transition (receive, complete) after it succeeded
    lands here, so callers can tell "someone already acted" apart from
    a duplicated request.

    Attributes:
        entity_id: The referral or case the action targeted.
        current_state: State the entity was in when the guard ran.
        action: The attempted action.
        allowed_states: States from which the action is permitted.
    """

    def __init__(
        self,
        entity_id: UUID,
        current_state: str,
        action: str,
        allowed_states: Iterable[str] = (),
    ) -> None:
        """Initialize invalid state error.

        Args:
            entity_id: The referral or case the action targeted.
            current_state: Current state value.
            action: Attempted action name.
            allowed_states: State values that permit the action.
        """
        self.entity_id = entity_id
        self.current_state = current_state
        self.action = action
        self.allowed_states = sorted(allowed_states)

        allowed_str = (
            f" Allowed from: {self.allowed_states}" if self.allowed_states else ""
        )
        super().__init__(
            f"Cannot {action} {entity_id}: current state is {current_state}.{allowed_str}"
        )


class ValidationError(StudentAffairsError):
    """Raised when required input is missing or malformed.

    Attributes:
        field: Name of the offending input, when known.
    """

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize validation error.

        Args:
            message: Human-readable description of the problem.
            field: Name of the offending input.
        """
        self.field = field
        super().__init__(message)


class ConflictError(StudentAffairsError):
    """Raised when a set-once operation is attempted twice.

    Examples are linking a second violation to a referral or marking an
    absence action done that is already done.
    """


class ConcurrentModificationError(ConflictError):
    """Raised when a compare-and-swap write finds a newer version.

    The caller should re-read the entity and decide whether to retry.

    Attributes:
        entity_id: The entity being written.
        expected_version: Version the writer read.
        actual_version: Version currently stored.
    """

    def __init__(
        self,
        entity_id: UUID,
        expected_version: int,
        actual_version: int,
    ) -> None:
        """Initialize concurrent modification error.

        Args:
            entity_id: The entity being written.
            expected_version: Version the writer read.
            actual_version: Version currently stored.
        """
        self.entity_id = entity_id
        self.expected_version = expected_version
        self.actual_version = actual_version
        super().__init__(
            f"Concurrent modification detected for {entity_id}: "
            f"expected version {expected_version}, found {actual_version}"
        )


class DependencyFailureError(StudentAffairsError):
    """Raised by an external collaborator (dispatcher, renderer) on failure.

    Attributes:
        collaborator: Short name of the failing collaborator.
        reason: Failure description.
    """

    def __init__(self, collaborator: str, reason: str) -> None:
        """Initialize dependency failure error.

        Args:
            collaborator: Short name of the failing collaborator.
            reason: Failure description.
        """
        self.collaborator = collaborator
        self.reason = reason
        super().__init__(f"{collaborator} failed: {reason}")


class ReferralNotFoundError(StudentAffairsError):
    """Raised when a referral does not exist."""

    def __init__(self, referral_id: UUID) -> None:
        self.referral_id = referral_id
        super().__init__(f"Referral not found: {referral_id}")


class AbsenceCaseNotFoundError(StudentAffairsError):
    """Raised when an absence case does not exist."""

    def __init__(self, case_id: UUID) -> None:
        self.case_id = case_id
        super().__init__(f"Absence case not found: {case_id}")
