"""Referral workflow service.

Orchestrates the referral state machine against the stores:

1. Read the referral fresh from the repository
2. Run the transition guard on the fresh copy
3. Validate the caller's input
4. Compute the new immutable state
5. Write it with compare-and-swap on the version read in step 1
6. Append exactly one workflow log entry
7. Run any external side effect (notification) as a separate step

Actions that also store a separate record (violation, document) save it
before step 5 and remove it again when the compare-and-swap fails.

A failed guard or validation writes nothing. A side effect that fails
after step 5 is reported through SideEffectOutcome; the committed state
is never rolled back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from student_affairs.config.escalation_config import (
    DEFAULT_ESCALATION_CONFIG,
    EscalationConfig,
)
from student_affairs.domain.errors.workflow import (
    ConflictError,
    DependencyFailureError,
    InvalidStateError,
    ReferralNotFoundError,
    ValidationError,
)
from student_affairs.domain.models.notification import NotificationRecipient
from student_affairs.domain.models.referral import (
    REFERRAL_TRANSITIONS,
    Referral,
    ReferralAction,
    ReferralPriority,
    ReferralTargetRole,
    ReferralType,
    guard_transition,
)
from student_affairs.domain.models.referral_document import (
    DocumentType,
    ReferralDocument,
)
from student_affairs.domain.models.side_effect import SideEffectOutcome

if TYPE_CHECKING:
    from student_affairs.application.ports.document_renderer import (
        DocumentRendererProtocol,
    )
    from student_affairs.application.ports.document_repository import (
        DocumentRepositoryProtocol,
    )
    from student_affairs.application.ports.identity_provider import (
        IdentityProviderProtocol,
    )
    from student_affairs.application.ports.notification_dispatcher import (
        NotificationDispatcherProtocol,
    )
    from student_affairs.application.ports.referral_repository import (
        ReferralRepositoryProtocol,
    )
    from student_affairs.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from student_affairs.application.ports.workflow_log import WorkflowLogProtocol
    from student_affairs.application.services.violation_escalation_service import (
        ViolationEscalationService,
    )
    from student_affairs.domain.models.actor import Actor
    from student_affairs.domain.models.violation import (
        ViolationPayload,
        ViolationRecord,
    )
    from student_affairs.domain.models.workflow_log import WorkflowLogEntry

logger = get_logger(__name__)

DEFAULT_VIOLATION_PARENT_MESSAGE = (
    "A behaviour violation (degree {degree}) was recorded for your child. "
    "Please contact the school."
)

DEFAULT_PARENT_MESSAGE = (
    "The school would like to discuss referral {number} about your child. "
    "Please contact the student affairs office."
)

COUNSELOR_TRANSFER_NOTE = "Transferred to the counselor after recording the violation"


@dataclass(frozen=True)
class ViolationRecordingOutcome(SideEffectOutcome[Referral]):
    """Outcome of record_violation().

    Attributes:
        violation: The persisted violation record.
        treatment_plan_requested: The caller asked for a treatment plan;
            once it exists, link it with link_treatment_plan().
    """

    violation: ViolationRecord | None = None
    treatment_plan_requested: bool = False


def _require_text(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required", field=field)
    return value.strip()


class ReferralWorkflowService:
    """Runs referral workflow actions.

    Example:
        >>> service = ReferralWorkflowService(...)
        >>> referral = await service.submit(
        ...     student_id=7,
        ...     referral_type=ReferralType.BEHAVIORAL_VIOLATION,
        ...     target_role=ReferralTargetRole.VICE_PRINCIPAL,
        ...     description="Fight in the yard",
        ... )
        >>> referral = await service.receive(referral.referral_id)
        >>> referral = await service.assign(referral.referral_id, assignee_id=42)
        >>> referral = await service.complete(referral.referral_id)
    """

    def __init__(
        self,
        referral_repo: ReferralRepositoryProtocol,
        workflow_log: WorkflowLogProtocol,
        document_repo: DocumentRepositoryProtocol,
        document_renderer: DocumentRendererProtocol,
        notification_dispatcher: NotificationDispatcherProtocol,
        identity_provider: IdentityProviderProtocol,
        time_authority: TimeAuthorityProtocol,
        violation_service: ViolationEscalationService,
        config: EscalationConfig | None = None,
    ) -> None:
        """Initialize the referral workflow service.

        Args:
            referral_repo: Repository for referral persistence
            workflow_log: Append-only audit log
            document_repo: Repository for generated documents
            document_renderer: Renders referral documents
            notification_dispatcher: Sends parent notifications
            identity_provider: Resolves the acting user
            time_authority: Clock for all timestamps
            violation_service: Resolves and records violations
            config: Escalation configuration (numbering prefixes)
        """
        self._referral_repo = referral_repo
        self._workflow_log = workflow_log
        self._document_repo = document_repo
        self._renderer = document_renderer
        self._dispatcher = notification_dispatcher
        self._identity = identity_provider
        self._time = time_authority
        self._violations = violation_service
        self._config = config or DEFAULT_ESCALATION_CONFIG

    # =========================================================================
    # Submission
    # =========================================================================

    async def submit(
        self,
        student_id: int,
        referral_type: ReferralType,
        target_role: ReferralTargetRole,
        description: str,
        priority: ReferralPriority = ReferralPriority.MEDIUM,
    ) -> Referral:
        """Create a pending referral.

        Submission is not a transition and writes no log entry.

        Raises:
            ValidationError: Empty description.
        """
        description = _require_text(description, "description")
        actor = self._identity.current_actor()
        now = self._time.now()
        number = await self._referral_repo.next_number(
            self._config.referral_number_prefix, now.year
        )

        referral = Referral(
            referral_id=uuid4(),
            referral_number=number,
            student_id=student_id,
            referred_by=actor.actor_id,
            referral_type=referral_type,
            target_role=target_role,
            description=description,
            priority=priority,
            created_at=now,
            updated_at=now,
        )
        await self._referral_repo.save(referral)

        logger.info(
            "Referral submitted",
            referral_id=str(referral.referral_id),
            referral_number=number,
            student_id=student_id,
            referral_type=referral_type.value,
            target_role=target_role.value,
            referred_by=actor.actor_id,
        )
        return referral

    # =========================================================================
    # Status transitions
    # =========================================================================

    async def receive(self, referral_id: UUID) -> Referral:
        """Receive a pending referral.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            InvalidStateError: Not pending (includes a second receive).
            ConcurrentModificationError: Lost a race with another writer.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.RECEIVE, actor)

        now = self._time.now()
        updated = referral.with_received(actor.actor_id, now)
        await self._commit(referral, updated, ReferralAction.RECEIVE, actor)
        return updated

    async def assign(
        self,
        referral_id: UUID,
        assignee_id: int,
        notes: str | None = None,
    ) -> Referral:
        """Assign a referral and move it into progress.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            InvalidStateError: Pending or terminal.
            ConcurrentModificationError: Lost a race with another writer.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.ASSIGN, actor)

        now = self._time.now()
        updated = referral.with_assignment(assignee_id, now)
        await self._commit(
            referral,
            updated,
            ReferralAction.ASSIGN,
            actor,
            notes=notes,
            assignee_id=assignee_id,
        )
        return updated

    async def transfer(
        self,
        referral_id: UUID,
        target_role: ReferralTargetRole,
        notes: str,
    ) -> Referral:
        """Re-route a referral to another role.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            InvalidStateError: Pending or terminal (checked before notes).
            ValidationError: Empty transfer reason.
            ConcurrentModificationError: Lost a race with another writer.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.TRANSFER, actor)
        reason = _require_text(notes, "notes")

        now = self._time.now()
        updated = referral.with_transfer(target_role, now)
        await self._commit(
            referral,
            updated,
            ReferralAction.TRANSFER,
            actor,
            notes=reason,
            from_role=referral.target_role.value,
            to_role=target_role.value,
        )
        return updated

    async def complete(self, referral_id: UUID, notes: str | None = None) -> Referral:
        """Complete a referral. Succeeds at most once.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            InvalidStateError: Pending or already terminal.
            ConcurrentModificationError: Lost a race with another writer.
        """
        return await self._close(referral_id, ReferralAction.COMPLETE, notes)

    async def close(self, referral_id: UUID, notes: str | None = None) -> Referral:
        """Close a referral without completing it."""
        return await self._close(referral_id, ReferralAction.CLOSE, notes)

    async def cancel(self, referral_id: UUID, notes: str | None = None) -> Referral:
        """Cancel a referral."""
        return await self._close(referral_id, ReferralAction.CANCEL, notes)

    # =========================================================================
    # Activities (status unchanged)
    # =========================================================================

    async def record_violation(
        self,
        referral_id: UUID,
        payload: ViolationPayload,
    ) -> ViolationRecordingOutcome:
        """Record the violation a behavioural referral is about.

        Resolves occurrence and procedure step, persists the record, links
        it to the referral, optionally transfers the referral to the
        counselor, then optionally notifies the parent.

        The record is saved before the referral link is written. When the
        link write fails the record is discarded again, so a referral
        never points at a missing violation and no orphan record is left.

        Returns:
            ViolationRecordingOutcome with the updated referral and the
            record; side_effect_error is set when the parent notification
            failed.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            InvalidStateError: Pending or terminal.
            ValidationError: Not a behavioural referral, or invalid payload.
            ConflictError: A violation is already linked.
            ConcurrentModificationError: Lost a race with another writer.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.RECORD_VIOLATION, actor)

        if referral.referral_type != ReferralType.BEHAVIORAL_VIOLATION:
            raise ValidationError(
                f"Referral {referral_id} is {referral.referral_type.value}; "
                "violations can only be recorded on behavioral_violation referrals",
                field="referral_type",
            )
        if referral.violation_id is not None:
            raise ConflictError(
                f"Referral {referral_id} already has violation {referral.violation_id}"
            )

        record = await self._violations.build_record(
            student_id=referral.student_id,
            payload=payload,
            referral_id=referral.referral_id,
            reported_by=actor.actor_id,
        )

        now = self._time.now()
        updated = referral.with_violation_link(record.violation_id, now)
        await self._violations.commit_record(record)
        try:
            await self._referral_repo.compare_and_swap(updated, referral.version)
        except Exception:
            await self._violations.discard_record(record)
            raise
        await self._append_log(
            updated,
            ReferralAction.RECORD_VIOLATION,
            actor,
            notes=(
                f"degree={record.degree} type={record.violation_type} "
                f"occurrence={record.occurrence} step={record.procedure_step} "
                f"points={record.points_deducted}"
            ),
            violation_id=str(record.violation_id),
            occurrence=record.occurrence,
            treatment_plan_requested=payload.create_treatment_plan,
        )

        if payload.transfer_to_counselor:
            transferred = updated.with_transfer(
                ReferralTargetRole.COUNSELOR, self._time.now()
            )
            await self._commit(
                updated,
                transferred,
                ReferralAction.TRANSFER,
                actor,
                notes=COUNSELOR_TRANSFER_NOTE,
                from_role=updated.target_role.value,
                to_role=ReferralTargetRole.COUNSELOR.value,
            )
            updated = transferred

        error: str | None = None
        if payload.send_parent_message:
            message = payload.parent_message or DEFAULT_VIOLATION_PARENT_MESSAGE.format(
                degree=record.degree
            )
            error = await self._dispatch(updated, message)

        return ViolationRecordingOutcome(
            entity=updated,
            side_effect_error=error,
            violation=record,
            treatment_plan_requested=payload.create_treatment_plan,
        )

    async def add_note(self, referral_id: UUID, note: str) -> Referral:
        """Add a note to a referral's log.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            InvalidStateError: Pending or terminal.
            ValidationError: Empty note.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.ADD_NOTE, actor)
        body = _require_text(note, "note")

        updated = referral.with_activity(ReferralAction.ADD_NOTE, self._time.now())
        await self._commit(referral, updated, ReferralAction.ADD_NOTE, actor, notes=body)
        return updated

    async def generate_document(
        self,
        referral_id: UUID,
        document_type: DocumentType | str,
    ) -> ReferralDocument:
        """Render and store a referral document.

        The renderer runs before anything is written, so a rendering
        failure leaves the referral and its log untouched. The document is
        stored before the referral write and removed again when that write
        fails.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            InvalidStateError: Pending or terminal.
            ValidationError: Unknown document type.
            DependencyFailureError: Rendering failed.
            ConcurrentModificationError: Lost a race with another writer.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.GENERATE_DOCUMENT, actor)

        parsed = (
            document_type
            if isinstance(document_type, DocumentType)
            else DocumentType.parse(document_type)
        )
        if parsed is None:
            raise ValidationError(
                f"Unknown document type: {document_type}", field="document_type"
            )

        log = logger.bind(
            referral_id=str(referral_id), document_type=parsed.value
        )
        try:
            rendered = await self._renderer.render(referral, parsed)
        except DependencyFailureError as e:
            log.warning("Document rendering failed", error=str(e))
            raise

        now = self._time.now()
        document = ReferralDocument(
            document_id=uuid4(),
            referral_id=referral.referral_id,
            document_number=await self._document_repo.next_number(
                self._config.document_number_prefix, now.year
            ),
            document_type=parsed,
            title=rendered.title or parsed.label,
            content=rendered.content,
            generated_by=actor.actor_id,
            created_at=now,
        )
        updated = referral.with_activity(ReferralAction.GENERATE_DOCUMENT, now)

        await self._document_repo.save(document)
        try:
            await self._referral_repo.compare_and_swap(updated, referral.version)
        except Exception:
            await self._document_repo.delete(document.document_id)
            log.warning(
                "Document discarded after failed referral write",
                document_number=document.document_number,
            )
            raise
        await self._append_log(
            updated,
            ReferralAction.GENERATE_DOCUMENT,
            actor,
            notes=f"{parsed.value} {document.document_number}",
            document_id=str(document.document_id),
        )
        return document

    async def notify_parent(
        self, referral_id: UUID, message: str | None = None
    ) -> SideEffectOutcome[Referral]:
        """Record a parent contact, then dispatch the notification.

        A missing or blank message falls back to a default that names the
        referral number.

        Returns:
            SideEffectOutcome with the committed referral; side_effect_error
            is set when dispatch failed.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
            InvalidStateError: Pending or terminal.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.NOTIFY_PARENT, actor)
        if message is not None and message.strip():
            body = message.strip()
        else:
            body = DEFAULT_PARENT_MESSAGE.format(number=referral.referral_number)

        updated = referral.with_parent_notified(self._time.now())
        await self._commit(
            referral, updated, ReferralAction.NOTIFY_PARENT, actor, notes=body
        )

        error = await self._dispatch(updated, body)
        return SideEffectOutcome(entity=updated, side_effect_error=error)

    async def link_student_case(self, referral_id: UUID, case_id: int) -> Referral:
        """Link the student case opened from a referral (set once).

        Raises:
            ConflictError: A case is already linked.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.LINK_CASE, actor)

        updated = referral.with_student_case_link(case_id, self._time.now())
        await self._commit(
            referral,
            updated,
            ReferralAction.LINK_CASE,
            actor,
            notes=f"student case {case_id}",
        )
        return updated

    async def link_treatment_plan(self, referral_id: UUID, plan_id: int) -> Referral:
        """Link the treatment plan created from a referral (set once).

        Raises:
            ConflictError: A plan is already linked.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, ReferralAction.LINK_PLAN, actor)

        updated = referral.with_treatment_plan_link(plan_id, self._time.now())
        await self._commit(
            referral,
            updated,
            ReferralAction.LINK_PLAN,
            actor,
            notes=f"treatment plan {plan_id}",
        )
        return updated

    # =========================================================================
    # Deletion and reads
    # =========================================================================

    async def delete(self, referral_id: UUID) -> None:
        """Delete a referral in any state.

        The referral's log is detached from the live view and its links
        are dropped; linked violations, cases and plans are kept.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
        """
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()

        detached = referral.with_links_detached()
        detached_entries = await self._workflow_log.detach(referral_id)
        await self._referral_repo.delete(detached.referral_id)

        logger.info(
            "Referral deleted",
            referral_id=str(referral_id),
            status=referral.status.value,
            detached_entries=detached_entries,
            violation_id=str(referral.violation_id) if referral.violation_id else None,
            deleted_by=actor.actor_id,
        )

    async def get_referral(self, referral_id: UUID) -> Referral:
        """Retrieve a referral.

        Raises:
            ReferralNotFoundError: Referral doesn't exist.
        """
        return await self._load(referral_id)

    async def get_timeline(self, referral_id: UUID) -> list[WorkflowLogEntry]:
        """Return a referral's log ordered by (created_at, sequence)."""
        return await self._workflow_log.list_for_referral(referral_id)

    async def get_documents(self, referral_id: UUID) -> list[ReferralDocument]:
        """Return the documents generated for a referral."""
        return await self._document_repo.list_for_referral(referral_id)

    # =========================================================================
    # Internals
    # =========================================================================

    async def _load(self, referral_id: UUID) -> Referral:
        referral = await self._referral_repo.get(referral_id)
        if referral is None:
            raise ReferralNotFoundError(referral_id)
        return referral

    def _guard(self, referral: Referral, action: ReferralAction, actor: Actor) -> None:
        try:
            guard_transition(referral, action)
        except InvalidStateError as e:
            logger.warning(
                "Referral action rejected",
                referral_id=str(referral.referral_id),
                action=action.value,
                status=referral.status.value,
                actor_id=actor.actor_id,
                allowed_states=e.allowed_states,
            )
            raise

    async def _close(
        self,
        referral_id: UUID,
        action: ReferralAction,
        notes: str | None,
    ) -> Referral:
        referral = await self._load(referral_id)
        actor = self._identity.current_actor()
        self._guard(referral, action, actor)

        updated = referral.with_closure(action, self._time.now())
        await self._commit(referral, updated, action, actor, notes=notes)
        return updated

    async def _commit(
        self,
        before: Referral,
        after: Referral,
        action: ReferralAction,
        actor: Actor,
        notes: str | None = None,
        **log_fields: object,
    ) -> None:
        await self._referral_repo.compare_and_swap(after, before.version)
        await self._append_log(after, action, actor, notes=notes, **log_fields)

    async def _append_log(
        self,
        referral: Referral,
        action: ReferralAction,
        actor: Actor,
        notes: str | None = None,
        **log_fields: object,
    ) -> None:
        entry = await self._workflow_log.append(
            subject_id=referral.referral_id,
            action=REFERRAL_TRANSITIONS[action].log_action,
            actor=actor,
            created_at=referral.updated_at or self._time.now(),
            notes=notes,
        )
        logger.info(
            "Referral action committed",
            referral_id=str(referral.referral_id),
            action=action.value,
            status=referral.status.value,
            version=referral.version,
            actor_id=actor.actor_id,
            sequence=entry.sequence,
            **log_fields,
        )

    async def _dispatch(self, referral: Referral, message: str) -> str | None:
        log = logger.bind(
            referral_id=str(referral.referral_id),
            student_id=referral.student_id,
        )
        try:
            result = await self._dispatcher.send(
                NotificationRecipient(student_id=referral.student_id), message
            )
        except DependencyFailureError as e:
            log.warning("Parent notification failed after commit", error=str(e))
            return str(e)

        if not result.delivered:
            error = DependencyFailureError(
                "notification_dispatcher", result.error or "message not delivered"
            )
            log.warning("Parent notification not delivered", error=str(error))
            return str(error)

        log.info("Parent notification dispatched")
        return None
