"""Referral domain models.

This module defines the referral aggregate and its state machine:
- ReferralStatus: lifecycle states
- ReferralAction: workflow actions a caller can request
- REFERRAL_TRANSITIONS: the central transition table
- Referral: immutable aggregate whose with_* methods return new instances

State Transition Matrix:
- PENDING -> RECEIVED
- RECEIVED -> IN_PROGRESS, TRANSFERRED, COMPLETED, CLOSED, CANCELLED
- IN_PROGRESS -> IN_PROGRESS, TRANSFERRED, COMPLETED, CLOSED, CANCELLED
- TRANSFERRED -> IN_PROGRESS, TRANSFERRED, COMPLETED, CLOSED, CANCELLED
- COMPLETED, CLOSED, CANCELLED -> (terminal)

Every with_* method runs guard_transition() first, so an illegal
transition can never produce a new instance.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from uuid import UUID

from student_affairs.domain.errors.workflow import (
    ConflictError,
    InvalidStateError,
)
from student_affairs.domain.models.workflow_log import WorkflowLogAction


class ReferralType(str, Enum):
    """What the referral is about."""

    ACADEMIC_WEAKNESS = "academic_weakness"
    BEHAVIORAL_VIOLATION = "behavioral_violation"


class ReferralTargetRole(str, Enum):
    """Role the referral is routed to."""

    COUNSELOR = "counselor"
    VICE_PRINCIPAL = "vice_principal"
    COMMITTEE = "committee"


class ReferralPriority(str, Enum):
    """Handling priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class ReferralStatus(str, Enum):
    """Status states for a referral."""

    PENDING = "pending"
    """Submitted, nobody has picked it up yet."""

    RECEIVED = "received"
    """Acknowledged by the target role."""

    IN_PROGRESS = "in_progress"
    """Assigned and being worked on."""

    TRANSFERRED = "transferred"
    """Re-routed to another role."""

    COMPLETED = "completed"
    CLOSED = "closed"
    CANCELLED = "cancelled"

    def is_terminal(self) -> bool:
        """Check if this is a terminal state.

        Returns:
            True if COMPLETED, CLOSED or CANCELLED.
        """
        return self in TERMINAL_STATUSES

    def allowed_actions(self) -> frozenset[ReferralAction]:
        """Actions the transition table permits from this state."""
        return frozenset(
            action
            for action, transition in REFERRAL_TRANSITIONS.items()
            if self in transition.allowed_from
        )


class ReferralAction(str, Enum):
    """Workflow actions that can be requested on a referral."""

    RECEIVE = "receive"
    ASSIGN = "assign"
    TRANSFER = "transfer"
    RECORD_VIOLATION = "record_violation"
    COMPLETE = "complete"
    CLOSE = "close"
    CANCEL = "cancel"
    ADD_NOTE = "add_note"
    GENERATE_DOCUMENT = "generate_document"
    NOTIFY_PARENT = "notify_parent"
    LINK_CASE = "link_case"
    LINK_PLAN = "link_plan"


TERMINAL_STATUSES: frozenset[ReferralStatus] = frozenset(
    {ReferralStatus.COMPLETED, ReferralStatus.CLOSED, ReferralStatus.CANCELLED}
)

_WORKING_STATUSES: frozenset[ReferralStatus] = frozenset(
    {ReferralStatus.RECEIVED, ReferralStatus.IN_PROGRESS, ReferralStatus.TRANSFERRED}
)


@dataclass(frozen=True)
class ReferralTransition:
    """One row of the transition table.

    Attributes:
        allowed_from: States the action may start from.
        target: Resulting status, or None when the status is unchanged.
        log_action: Entry written to the workflow log on success.
    """

    allowed_from: frozenset[ReferralStatus]
    target: ReferralStatus | None
    log_action: WorkflowLogAction


REFERRAL_TRANSITIONS: dict[ReferralAction, ReferralTransition] = {
    ReferralAction.RECEIVE: ReferralTransition(
        frozenset({ReferralStatus.PENDING}),
        ReferralStatus.RECEIVED,
        WorkflowLogAction.RECEIVED,
    ),
    ReferralAction.ASSIGN: ReferralTransition(
        _WORKING_STATUSES, ReferralStatus.IN_PROGRESS, WorkflowLogAction.ASSIGNED
    ),
    ReferralAction.TRANSFER: ReferralTransition(
        _WORKING_STATUSES, ReferralStatus.TRANSFERRED, WorkflowLogAction.TRANSFERRED
    ),
    ReferralAction.RECORD_VIOLATION: ReferralTransition(
        _WORKING_STATUSES, None, WorkflowLogAction.VIOLATION_RECORDED
    ),
    ReferralAction.COMPLETE: ReferralTransition(
        _WORKING_STATUSES, ReferralStatus.COMPLETED, WorkflowLogAction.COMPLETED
    ),
    ReferralAction.CLOSE: ReferralTransition(
        _WORKING_STATUSES, ReferralStatus.CLOSED, WorkflowLogAction.CLOSED
    ),
    ReferralAction.CANCEL: ReferralTransition(
        _WORKING_STATUSES, ReferralStatus.CANCELLED, WorkflowLogAction.CANCELLED
    ),
    ReferralAction.ADD_NOTE: ReferralTransition(
        _WORKING_STATUSES, None, WorkflowLogAction.NOTE_ADDED
    ),
    ReferralAction.GENERATE_DOCUMENT: ReferralTransition(
        _WORKING_STATUSES, None, WorkflowLogAction.DOCUMENT_GENERATED
    ),
    ReferralAction.NOTIFY_PARENT: ReferralTransition(
        _WORKING_STATUSES, None, WorkflowLogAction.PARENT_CONTACTED
    ),
    ReferralAction.LINK_CASE: ReferralTransition(
        _WORKING_STATUSES, None, WorkflowLogAction.CASE_OPENED
    ),
    ReferralAction.LINK_PLAN: ReferralTransition(
        _WORKING_STATUSES, None, WorkflowLogAction.PLAN_CREATED
    ),
}


def guard_transition(referral: Referral, action: ReferralAction) -> ReferralTransition:
    """Check an action against the transition table.

    Args:
        referral: The referral in its freshly read state.
        action: The requested action.

    Returns:
        The matching transition row.

    Raises:
        InvalidStateError: If the action is not allowed from the current status.
    """
    transition = REFERRAL_TRANSITIONS[action]
    if referral.status not in transition.allowed_from:
        raise InvalidStateError(
            entity_id=referral.referral_id,
            current_state=referral.status.value,
            action=action.value,
            allowed_states=[s.value for s in transition.allowed_from],
        )
    return transition


@dataclass(frozen=True, eq=True)
class Referral:
    """A request to route a student's case to a responsible role.

    Attributes:
        referral_id: Unique identifier.
        referral_number: Human-readable number (e.g. REF-2026-00012).
        student_id: The student concerned.
        referred_by: User who submitted the referral.
        referral_type: Academic weakness or behavioural violation.
        target_role: Role currently responsible.
        description: Submitter's description of the matter.
        created_at: Submission time (UTC).
        status: Current lifecycle status.
        priority: Handling priority.
        assigned_to: User working the referral (never set while pending).
        received_by: User who received it.
        violation_id: Linked violation record (set once).
        student_case_id: Linked student case (set once).
        treatment_plan_id: Linked treatment plan (set once).
        parent_notified: Whether a parent notification was committed.
        parent_notified_at: When the last parent notification was committed.
        completed_at: Set exactly when the status is terminal.
        updated_at: Last committed change.
        version: Optimistic concurrency token, bumped on every change.
    """

    referral_id: UUID
    referral_number: str
    student_id: int
    referred_by: int
    referral_type: ReferralType
    target_role: ReferralTargetRole
    description: str
    created_at: datetime

    status: ReferralStatus = field(default=ReferralStatus.PENDING)
    priority: ReferralPriority = field(default=ReferralPriority.MEDIUM)
    assigned_to: int | None = field(default=None)
    received_by: int | None = field(default=None)
    violation_id: UUID | None = field(default=None)
    student_case_id: int | None = field(default=None)
    treatment_plan_id: int | None = field(default=None)
    parent_notified: bool = field(default=False)
    parent_notified_at: datetime | None = field(default=None)
    completed_at: datetime | None = field(default=None)
    updated_at: datetime | None = field(default=None)
    version: int = field(default=0)

    def __post_init__(self) -> None:
        """Validate referral invariants.

        Raises:
            ValueError: If any invariant is violated.
        """
        if not self.referral_number:
            raise ValueError("referral_number cannot be empty")
        if not self.description or not self.description.strip():
            raise ValueError("description cannot be empty")
        if self.created_at.tzinfo is None:
            raise ValueError("created_at must be timezone-aware (UTC)")
        if self.version < 0:
            raise ValueError(f"version must be >= 0, got {self.version}")

        if self.status.is_terminal() and self.completed_at is None:
            raise ValueError(
                f"{self.status.value} status requires completed_at timestamp"
            )
        if not self.status.is_terminal() and self.completed_at is not None:
            raise ValueError(
                f"completed_at can only be set for terminal statuses, "
                f"got {self.status.value}"
            )

        if self.status == ReferralStatus.PENDING and self.assigned_to is not None:
            raise ValueError("pending referral cannot have assigned_to")

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal()

    def _advance(self, at: datetime, **changes: object) -> Referral:
        return replace(self, updated_at=at, version=self.version + 1, **changes)

    def with_received(self, receiver_id: int, at: datetime) -> Referral:
        """Receive the referral. PENDING -> RECEIVED.

        Raises:
            InvalidStateError: If not pending (prevents double receive).
        """
        transition = guard_transition(self, ReferralAction.RECEIVE)
        return self._advance(at, status=transition.target, received_by=receiver_id)

    def with_assignment(self, assignee_id: int, at: datetime) -> Referral:
        """Assign the referral. -> IN_PROGRESS.

        Re-assigning replaces the assignee. Assigning a transferred referral
        takes it back into progress under the new role.

        Raises:
            InvalidStateError: If pending or terminal.
        """
        transition = guard_transition(self, ReferralAction.ASSIGN)
        return self._advance(at, status=transition.target, assigned_to=assignee_id)

    def with_transfer(self, target_role: ReferralTargetRole, at: datetime) -> Referral:
        """Re-route the referral to another role. -> TRANSFERRED.

        Raises:
            InvalidStateError: If pending or terminal.
        """
        transition = guard_transition(self, ReferralAction.TRANSFER)
        return self._advance(at, status=transition.target, target_role=target_role)

    def with_violation_link(self, violation_id: UUID, at: datetime) -> Referral:
        """Link the violation created from this referral (set once).

        Raises:
            InvalidStateError: If pending or terminal.
            ConflictError: If a violation is already linked.
        """
        guard_transition(self, ReferralAction.RECORD_VIOLATION)
        if self.violation_id is not None:
            raise ConflictError(
                f"Referral {self.referral_id} already has violation {self.violation_id}"
            )
        return self._advance(at, violation_id=violation_id)

    def with_student_case_link(self, case_id: int, at: datetime) -> Referral:
        """Link the student case opened from this referral (set once)."""
        guard_transition(self, ReferralAction.LINK_CASE)
        if self.student_case_id is not None:
            raise ConflictError(
                f"Referral {self.referral_id} already has student case "
                f"{self.student_case_id}"
            )
        return self._advance(at, student_case_id=case_id)

    def with_treatment_plan_link(self, plan_id: int, at: datetime) -> Referral:
        """Link the treatment plan created from this referral (set once)."""
        guard_transition(self, ReferralAction.LINK_PLAN)
        if self.treatment_plan_id is not None:
            raise ConflictError(
                f"Referral {self.referral_id} already has treatment plan "
                f"{self.treatment_plan_id}"
            )
        return self._advance(at, treatment_plan_id=plan_id)

    def with_parent_notified(self, at: datetime) -> Referral:
        """Record that a parent notification was committed."""
        guard_transition(self, ReferralAction.NOTIFY_PARENT)
        return self._advance(at, parent_notified=True, parent_notified_at=at)

    def with_activity(self, action: ReferralAction, at: datetime) -> Referral:
        """Record a side-effect-only action (note, document) on the referral.

        The status is unchanged; the version bump serializes the action
        against concurrent transitions.

        Raises:
            InvalidStateError: If the action is not allowed from the status.
            ValueError: If the action changes status.
        """
        transition = guard_transition(self, action)
        if transition.target is not None:
            raise ValueError(f"{action.value} is a status transition, not an activity")
        return self._advance(at)

    def with_closure(self, action: ReferralAction, at: datetime) -> Referral:
        """Move the referral into a terminal state.

        Args:
            action: COMPLETE, CLOSE or CANCEL.
            at: Completion time, stored as completed_at.

        Raises:
            InvalidStateError: If pending or already terminal.
            ValueError: If the action is not a closing action.
        """
        transition = guard_transition(self, action)
        if transition.target is None or not transition.target.is_terminal():
            raise ValueError(f"{action.value} is not a closing action")
        return self._advance(at, status=transition.target, completed_at=at)

    def with_links_detached(self) -> Referral:
        """Break links to violation, case and plan without touching them."""
        return replace(
            self,
            violation_id=None,
            student_case_id=None,
            treatment_plan_id=None,
        )
