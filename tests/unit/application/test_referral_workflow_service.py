"""Unit tests for ReferralWorkflowService.

Tests:
- submit numbering and validation
- guard runs before input validation and rejects pending referrals
- every committed action appends exactly one log entry
- record_violation links, resolves and notifies
- record_violation deducts points, transfers to the counselor and
  reports treatment plan requests
- a failed record or document save leaves the referral unchanged
- side-effect failures after commit are reported, not rolled back
- rendering failures commit nothing
- compare-and-swap conflicts write no log entry
- delete detaches the log
"""

from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from student_affairs.application.services.referral_workflow_service import (
    COUNSELOR_TRANSFER_NOTE,
    DEFAULT_PARENT_MESSAGE,
    ReferralWorkflowService,
)
from student_affairs.domain.errors import (
    ConcurrentModificationError,
    ConflictError,
    DependencyFailureError,
    InvalidStateError,
    ReferralNotFoundError,
    ValidationError,
)
from student_affairs.domain.models.referral import (
    Referral,
    ReferralPriority,
    ReferralStatus,
    ReferralTargetRole,
    ReferralType,
)
from student_affairs.domain.models.referral_document import DocumentType
from student_affairs.domain.models.violation import ViolationPayload
from student_affairs.domain.models.workflow_log import WorkflowLogAction
from student_affairs.infrastructure.stubs import (
    DocumentRendererStub,
    DocumentRepositoryStub,
    NotificationDispatcherStub,
    ReferralRepositoryStub,
    ViolationRepositoryStub,
    WorkflowLogStub,
)

OCCURRED_AT = datetime(2026, 2, 9, 10, 30, 0, tzinfo=timezone.utc)


def fight_payload(**overrides: object) -> ViolationPayload:
    fields: dict[str, object] = {
        "degree": 3,
        "violation_type": "fighting",
        "occurred_at": OCCURRED_AT,
        "location": "Yard",
        "description": "Fight during break",
    }
    fields.update(overrides)
    return ViolationPayload(**fields)  # type: ignore[arg-type]


async def submit_behavioral(service: ReferralWorkflowService) -> Referral:
    return await service.submit(
        student_id=7,
        referral_type=ReferralType.BEHAVIORAL_VIOLATION,
        target_role=ReferralTargetRole.VICE_PRINCIPAL,
        description="Fight in the yard",
    )


async def working_referral(
    service: ReferralWorkflowService,
    referral_type: ReferralType = ReferralType.BEHAVIORAL_VIOLATION,
) -> Referral:
    """Submit, receive and assign a referral."""
    referral = await service.submit(
        student_id=7,
        referral_type=referral_type,
        target_role=ReferralTargetRole.VICE_PRINCIPAL,
        description="Needs follow-up",
    )
    await service.receive(referral.referral_id)
    return await service.assign(referral.referral_id, assignee_id=42)


class TestSubmit:
    """Tests for submit()."""

    async def test_submit_creates_pending_referral(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await submit_behavioral(workflow_service)

        assert referral.status == ReferralStatus.PENDING
        assert referral.referral_number == "REF-2026-00001"
        assert referral.referred_by == 42
        assert referral.priority == ReferralPriority.MEDIUM
        assert referral.version == 0
        assert await workflow_log.list_for_referral(referral.referral_id) == []

    async def test_numbers_increase(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        await submit_behavioral(workflow_service)
        second = await submit_behavioral(workflow_service)

        assert second.referral_number == "REF-2026-00002"

    async def test_empty_description_rejected(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        with pytest.raises(ValidationError) as exc_info:
            await workflow_service.submit(
                student_id=7,
                referral_type=ReferralType.ACADEMIC_WEAKNESS,
                target_role=ReferralTargetRole.COUNSELOR,
                description="   ",
            )

        assert exc_info.value.field == "description"


class TestPendingGuard:
    """A pending referral permits only receive."""

    async def test_assign_rejected_while_pending(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await submit_behavioral(workflow_service)

        with pytest.raises(InvalidStateError) as exc_info:
            await workflow_service.assign(referral.referral_id, assignee_id=42)

        assert exc_info.value.current_state == "pending"
        assert workflow_log.entry_count == 0

    async def test_every_other_action_rejected(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await submit_behavioral(workflow_service)
        rid = referral.referral_id

        calls = [
            workflow_service.transfer(rid, ReferralTargetRole.COUNSELOR, "reason"),
            workflow_service.complete(rid),
            workflow_service.close(rid),
            workflow_service.cancel(rid),
            workflow_service.add_note(rid, "note"),
            workflow_service.record_violation(rid, fight_payload()),
            workflow_service.generate_document(rid, DocumentType.REFERRAL_FORM),
            workflow_service.notify_parent(rid, "Please call"),
            workflow_service.link_student_case(rid, 5),
            workflow_service.link_treatment_plan(rid, 6),
        ]
        for call in calls:
            with pytest.raises(InvalidStateError):
                await call

        stored = await workflow_service.get_referral(rid)
        assert stored.version == 0

    async def test_guard_runs_before_validation(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        """Empty transfer notes on a pending referral report the state error."""
        referral = await submit_behavioral(workflow_service)

        with pytest.raises(InvalidStateError):
            await workflow_service.transfer(
                referral.referral_id, ReferralTargetRole.COUNSELOR, ""
            )

    async def test_unknown_referral(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        with pytest.raises(ReferralNotFoundError):
            await workflow_service.receive(uuid4())


class TestTransitions:
    """Tests for receive, assign, transfer and closure."""

    async def test_receive_then_second_receive_fails(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await submit_behavioral(workflow_service)

        received = await workflow_service.receive(referral.referral_id)

        assert received.status == ReferralStatus.RECEIVED
        assert received.received_by == 42
        with pytest.raises(InvalidStateError):
            await workflow_service.receive(referral.referral_id)
        assert workflow_log.entry_count == 1

    async def test_transfer_requires_notes(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)

        with pytest.raises(ValidationError) as exc_info:
            await workflow_service.transfer(
                referral.referral_id, ReferralTargetRole.COUNSELOR, "  "
            )

        assert exc_info.value.field == "notes"

    async def test_transfer_and_reassign(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        transferred = await workflow_service.transfer(
            referral.referral_id, ReferralTargetRole.COUNSELOR, "Needs counselling"
        )
        reassigned = await workflow_service.assign(referral.referral_id, assignee_id=77)

        assert transferred.status == ReferralStatus.TRANSFERRED
        assert transferred.target_role == ReferralTargetRole.COUNSELOR
        assert reassigned.status == ReferralStatus.IN_PROGRESS
        assert reassigned.assigned_to == 77
        entries = await workflow_log.list_for_referral(referral.referral_id)
        assert [e.action for e in entries] == [
            WorkflowLogAction.RECEIVED,
            WorkflowLogAction.ASSIGNED,
            WorkflowLogAction.TRANSFERRED,
            WorkflowLogAction.ASSIGNED,
        ]
        assert entries[2].notes == "Needs counselling"

    async def test_complete_at_most_once(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)

        completed = await workflow_service.complete(referral.referral_id)

        assert completed.status == ReferralStatus.COMPLETED
        assert completed.completed_at is not None
        with pytest.raises(InvalidStateError):
            await workflow_service.complete(referral.referral_id)
        with pytest.raises(InvalidStateError):
            await workflow_service.cancel(referral.referral_id)

    async def test_cancel_from_received(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await submit_behavioral(workflow_service)
        await workflow_service.receive(referral.referral_id)

        cancelled = await workflow_service.cancel(referral.referral_id, "duplicate")

        assert cancelled.status == ReferralStatus.CANCELLED

    async def test_log_entry_timestamp_matches_commit(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await submit_behavioral(workflow_service)

        received = await workflow_service.receive(referral.referral_id)

        (entry,) = await workflow_log.list_for_referral(referral.referral_id)
        assert entry.created_at == received.updated_at
        assert entry.actor.actor_id == 42


class TestRecordViolation:
    """Tests for record_violation()."""

    async def test_links_and_resolves(
        self,
        workflow_service: ReferralWorkflowService,
        violation_repo: ViolationRepositoryStub,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        outcome = await workflow_service.record_violation(
            referral.referral_id, fight_payload()
        )

        assert outcome.succeeded
        assert outcome.entity.status == ReferralStatus.IN_PROGRESS
        record = await violation_repo.get(outcome.entity.violation_id)
        assert record is not None
        assert record.occurrence == 1
        assert record.procedure_step == 1
        assert record.referral_id == referral.referral_id
        assert record.reported_by == 42
        entries = await workflow_log.list_for_referral(referral.referral_id)
        assert entries[-1].action == WorkflowLogAction.VIOLATION_RECORDED

    async def test_second_violation_on_same_referral_conflicts(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)
        await workflow_service.record_violation(referral.referral_id, fight_payload())

        with pytest.raises(ConflictError):
            await workflow_service.record_violation(
                referral.referral_id, fight_payload()
            )

    async def test_prior_violations_raise_occurrence(
        self,
        workflow_service: ReferralWorkflowService,
        violation_repo: ViolationRepositoryStub,
    ) -> None:
        first = await working_referral(workflow_service)
        await workflow_service.record_violation(first.referral_id, fight_payload())
        second = await working_referral(workflow_service)

        outcome = await workflow_service.record_violation(
            second.referral_id, fight_payload()
        )

        record = await violation_repo.get(outcome.entity.violation_id)
        assert record is not None
        assert record.occurrence == 2
        assert record.procedure_step == 2

    async def test_academic_referral_rejected(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(
            workflow_service, ReferralType.ACADEMIC_WEAKNESS
        )

        with pytest.raises(ValidationError) as exc_info:
            await workflow_service.record_violation(
                referral.referral_id, fight_payload()
            )

        assert exc_info.value.field == "referral_type"

    async def test_invalid_payload_writes_nothing(
        self,
        workflow_service: ReferralWorkflowService,
        violation_repo: ViolationRepositoryStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        with pytest.raises(ValidationError):
            await workflow_service.record_violation(
                referral.referral_id, fight_payload(degree=5)
            )

        stored = await workflow_service.get_referral(referral.referral_id)
        assert stored.violation_id is None
        assert await violation_repo.list_for_student(7) == []

    async def test_parent_message_dispatched(
        self,
        workflow_service: ReferralWorkflowService,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        outcome = await workflow_service.record_violation(
            referral.referral_id, fight_payload(send_parent_message=True)
        )

        assert outcome.succeeded
        assert "degree 3" in dispatcher.sent[0].message

    async def test_dispatch_failure_keeps_violation(
        self,
        workflow_service: ReferralWorkflowService,
        dispatcher: NotificationDispatcherStub,
        violation_repo: ViolationRepositoryStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        dispatcher.configure_failure(True, "SMS gateway down")

        outcome = await workflow_service.record_violation(
            referral.referral_id,
            fight_payload(send_parent_message=True, parent_message="Call us"),
        )

        assert outcome.state_changed
        assert not outcome.succeeded
        assert outcome.side_effect_error == "notification_dispatcher failed: SMS gateway down"
        assert await violation_repo.get(outcome.entity.violation_id) is not None

    async def test_cas_conflict_saves_no_violation(
        self,
        workflow_service: ReferralWorkflowService,
        referral_repo: ReferralRepositoryStub,
        violation_repo: ViolationRepositoryStub,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        entries_before = workflow_log.entry_count
        referral_repo.compare_and_swap = AsyncMock(  # type: ignore[method-assign]
            side_effect=ConcurrentModificationError(referral.referral_id, 2, 3)
        )

        with pytest.raises(ConcurrentModificationError):
            await workflow_service.record_violation(
                referral.referral_id, fight_payload()
            )

        assert await violation_repo.list_for_student(7) == []
        assert workflow_log.entry_count == entries_before

    async def test_failed_violation_save_leaves_referral_unlinked(
        self,
        workflow_service: ReferralWorkflowService,
        violation_repo: ViolationRepositoryStub,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        entries_before = workflow_log.entry_count
        violation_repo.save = AsyncMock(  # type: ignore[method-assign]
            side_effect=RuntimeError("violation store down")
        )

        with pytest.raises(RuntimeError):
            await workflow_service.record_violation(
                referral.referral_id, fight_payload()
            )

        stored = await workflow_service.get_referral(referral.referral_id)
        assert stored.violation_id is None
        assert stored.version == referral.version
        assert workflow_log.entry_count == entries_before

        del violation_repo.save
        outcome = await workflow_service.record_violation(
            referral.referral_id, fight_payload()
        )
        assert outcome.entity.violation_id is not None

    async def test_points_taken_from_procedure_tasks(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)

        outcome = await workflow_service.record_violation(
            referral.referral_id, fight_payload()
        )

        assert outcome.violation is not None
        assert outcome.violation.points_deducted == 3

    async def test_points_from_payload_override_procedure(
        self,
        workflow_service: ReferralWorkflowService,
        violation_repo: ViolationRepositoryStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        outcome = await workflow_service.record_violation(
            referral.referral_id, fight_payload(points_to_deduct=5)
        )

        record = await violation_repo.get(outcome.entity.violation_id)
        assert record is not None
        assert record.points_deducted == 5

    async def test_negative_points_rejected(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)

        with pytest.raises(ValidationError) as exc_info:
            await workflow_service.record_violation(
                referral.referral_id, fight_payload(points_to_deduct=-1)
            )

        assert exc_info.value.field == "points_to_deduct"

    async def test_transfer_to_counselor_after_recording(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        outcome = await workflow_service.record_violation(
            referral.referral_id, fight_payload(transfer_to_counselor=True)
        )

        assert outcome.entity.status == ReferralStatus.TRANSFERRED
        assert outcome.entity.target_role == ReferralTargetRole.COUNSELOR
        assert outcome.entity.version == referral.version + 2
        entries = await workflow_log.list_for_referral(referral.referral_id)
        assert [e.action for e in entries[-2:]] == [
            WorkflowLogAction.VIOLATION_RECORDED,
            WorkflowLogAction.TRANSFERRED,
        ]
        assert entries[-1].notes == COUNSELOR_TRANSFER_NOTE

    async def test_treatment_plan_request_reported(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)

        outcome = await workflow_service.record_violation(
            referral.referral_id, fight_payload(create_treatment_plan=True)
        )

        assert outcome.treatment_plan_requested
        assert outcome.violation is not None
        assert outcome.violation.violation_id == outcome.entity.violation_id
        assert outcome.entity.treatment_plan_id is None


class TestActivities:
    """Tests for notes, documents, parent notification and links."""

    async def test_add_note(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        updated = await workflow_service.add_note(referral.referral_id, "Called home")

        assert updated.status == ReferralStatus.IN_PROGRESS
        assert updated.version == referral.version + 1
        entries = await workflow_log.list_for_referral(referral.referral_id)
        assert entries[-1].action == WorkflowLogAction.NOTE_ADDED
        assert entries[-1].notes == "Called home"

    async def test_empty_note_rejected(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)

        with pytest.raises(ValidationError):
            await workflow_service.add_note(referral.referral_id, "")

    async def test_generate_document(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        document = await workflow_service.generate_document(
            referral.referral_id, "violation_record"
        )

        assert document.document_number == "DOC-2026-00001"
        assert document.document_type == DocumentType.VIOLATION_RECORD
        assert document.generated_by == 42
        assert await workflow_service.get_documents(referral.referral_id) == [document]
        entries = await workflow_log.list_for_referral(referral.referral_id)
        assert entries[-1].action == WorkflowLogAction.DOCUMENT_GENERATED

    async def test_unknown_document_type(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)

        with pytest.raises(ValidationError) as exc_info:
            await workflow_service.generate_document(referral.referral_id, "report_card")

        assert exc_info.value.field == "document_type"

    async def test_render_failure_commits_nothing(
        self,
        workflow_service: ReferralWorkflowService,
        document_renderer: DocumentRendererStub,
        document_repo: DocumentRepositoryStub,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        entries_before = workflow_log.entry_count
        document_renderer.configure_failure(True, "template missing")

        with pytest.raises(DependencyFailureError):
            await workflow_service.generate_document(
                referral.referral_id, DocumentType.REFERRAL_FORM
            )

        stored = await workflow_service.get_referral(referral.referral_id)
        assert stored.version == referral.version
        assert await document_repo.list_for_referral(referral.referral_id) == []
        assert workflow_log.entry_count == entries_before

    async def test_notify_parent(
        self,
        workflow_service: ReferralWorkflowService,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        outcome = await workflow_service.notify_parent(
            referral.referral_id, "Please visit the school"
        )

        assert outcome.succeeded
        assert outcome.entity.parent_notified
        assert outcome.entity.parent_notified_at is not None
        assert dispatcher.sent[0].recipient.student_id == 7

    async def test_notify_parent_failure_keeps_state(
        self,
        workflow_service: ReferralWorkflowService,
        dispatcher: NotificationDispatcherStub,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        dispatcher.configure_failure(True)

        outcome = await workflow_service.notify_parent(referral.referral_id, "Call us")

        assert outcome.state_changed
        assert outcome.side_effect_error is not None
        stored = await workflow_service.get_referral(referral.referral_id)
        assert stored.parent_notified
        entries = await workflow_log.list_for_referral(referral.referral_id)
        assert entries[-1].action == WorkflowLogAction.PARENT_CONTACTED

    async def test_undelivered_notification_reported(
        self,
        workflow_service: ReferralWorkflowService,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        dispatcher.configure_undelivered(True, "number unreachable")

        outcome = await workflow_service.notify_parent(referral.referral_id, "Call us")

        assert outcome.side_effect_error == (
            "notification_dispatcher failed: number unreachable"
        )

    async def test_document_save_failure_leaves_referral_unchanged(
        self,
        workflow_service: ReferralWorkflowService,
        document_repo: DocumentRepositoryStub,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        entries_before = workflow_log.entry_count
        document_repo.save = AsyncMock(  # type: ignore[method-assign]
            side_effect=RuntimeError("document store down")
        )

        with pytest.raises(RuntimeError):
            await workflow_service.generate_document(
                referral.referral_id, DocumentType.REFERRAL_FORM
            )

        stored = await workflow_service.get_referral(referral.referral_id)
        assert stored.version == referral.version
        assert workflow_log.entry_count == entries_before

    async def test_document_removed_when_referral_write_fails(
        self,
        workflow_service: ReferralWorkflowService,
        referral_repo: ReferralRepositoryStub,
        document_repo: DocumentRepositoryStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        referral_repo.compare_and_swap = AsyncMock(  # type: ignore[method-assign]
            side_effect=ConcurrentModificationError(referral.referral_id, 2, 3)
        )

        with pytest.raises(ConcurrentModificationError):
            await workflow_service.generate_document(
                referral.referral_id, DocumentType.REFERRAL_FORM
            )

        assert await document_repo.list_for_referral(referral.referral_id) == []

    async def test_notify_parent_without_message_uses_default(
        self,
        workflow_service: ReferralWorkflowService,
        dispatcher: NotificationDispatcherStub,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        outcome = await workflow_service.notify_parent(referral.referral_id)

        assert outcome.succeeded
        assert referral.referral_number in dispatcher.sent[0].message
        entries = await workflow_log.list_for_referral(referral.referral_id)
        assert entries[-1].notes == dispatcher.sent[0].message

    async def test_notify_parent_blank_message_uses_default(
        self,
        workflow_service: ReferralWorkflowService,
        dispatcher: NotificationDispatcherStub,
    ) -> None:
        referral = await working_referral(workflow_service)

        await workflow_service.notify_parent(referral.referral_id, "   ")

        assert dispatcher.sent[0].message == DEFAULT_PARENT_MESSAGE.format(
            number=referral.referral_number
        )

    async def test_links_are_set_once(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)

        linked = await workflow_service.link_student_case(referral.referral_id, 11)
        planned = await workflow_service.link_treatment_plan(referral.referral_id, 12)

        assert linked.student_case_id == 11
        assert planned.treatment_plan_id == 12
        with pytest.raises(ConflictError):
            await workflow_service.link_student_case(referral.referral_id, 13)
        with pytest.raises(ConflictError):
            await workflow_service.link_treatment_plan(referral.referral_id, 14)

    async def test_cas_conflict_writes_no_log(
        self,
        workflow_service: ReferralWorkflowService,
        referral_repo: ReferralRepositoryStub,
        workflow_log: WorkflowLogStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        entries_before = workflow_log.entry_count
        referral_repo.compare_and_swap = AsyncMock(  # type: ignore[method-assign]
            side_effect=ConcurrentModificationError(referral.referral_id, 2, 3)
        )

        with pytest.raises(ConcurrentModificationError):
            await workflow_service.add_note(referral.referral_id, "late note")

        assert workflow_log.entry_count == entries_before


class TestDeleteAndReads:
    """Tests for delete() and the read operations."""

    async def test_delete_detaches_log(
        self,
        workflow_service: ReferralWorkflowService,
        workflow_log: WorkflowLogStub,
        violation_repo: ViolationRepositoryStub,
    ) -> None:
        referral = await working_referral(workflow_service)
        outcome = await workflow_service.record_violation(
            referral.referral_id, fight_payload()
        )

        await workflow_service.delete(referral.referral_id)

        with pytest.raises(ReferralNotFoundError):
            await workflow_service.get_referral(referral.referral_id)
        assert await workflow_service.get_timeline(referral.referral_id) == []
        assert len(workflow_log.get_archived(referral.referral_id)) == 3
        assert await violation_repo.get(outcome.entity.violation_id) is not None

    async def test_delete_unknown(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        with pytest.raises(ReferralNotFoundError):
            await workflow_service.delete(uuid4())

    async def test_timeline_ordered(
        self, workflow_service: ReferralWorkflowService
    ) -> None:
        referral = await working_referral(workflow_service)
        await workflow_service.add_note(referral.referral_id, "one")

        timeline = await workflow_service.get_timeline(referral.referral_id)

        assert [e.sequence for e in timeline] == sorted(e.sequence for e in timeline)
        assert [e.action for e in timeline] == [
            WorkflowLogAction.RECEIVED,
            WorkflowLogAction.ASSIGNED,
            WorkflowLogAction.NOTE_ADDED,
        ]
