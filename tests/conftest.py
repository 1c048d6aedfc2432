"""
Pytest configuration and shared fixtures for the student affairs tests.

Testing Standards:
- Async tests run under pytest-asyncio auto mode (set in pyproject.toml)
- Use AsyncMock for async collaborator failures
- Unit tests go in tests/unit/
- Integration tests go in tests/integration/
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from student_affairs.application.services.absence_escalation_service import (
    AbsenceEscalationService,
)
from student_affairs.application.services.referral_workflow_service import (
    ReferralWorkflowService,
)
from student_affairs.application.services.violation_escalation_service import (
    ViolationEscalationService,
)
from student_affairs.config.escalation_config import DEFAULT_ESCALATION_CONFIG
from student_affairs.domain.models.actor import Actor
from student_affairs.infrastructure.stubs import (
    AbsenceCaseRepositoryStub,
    DocumentRendererStub,
    DocumentRepositoryStub,
    IdentityProviderStub,
    NotificationDispatcherStub,
    ProcedureCatalogStub,
    ReferralRepositoryStub,
    ViolationRepositoryStub,
    WorkflowLogStub,
)
from tests.helpers.fake_time_authority import FakeTimeAuthority

FIXED_NOW = datetime(2026, 2, 10, 8, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def anyio_backend() -> str:
    """Use asyncio as the async backend."""
    return "asyncio"


@pytest.fixture
def project_version() -> str:
    """Provide the current project version for tests."""
    from student_affairs import __version__

    return __version__


@pytest.fixture
def fake_time_authority() -> FakeTimeAuthority:
    """Clock that moves one second per read."""
    return FakeTimeAuthority(frozen_at=FIXED_NOW, tick_seconds=1)


@pytest.fixture
def actor() -> Actor:
    return Actor(actor_id=42, name="Noura Counselor", role="counselor")


@pytest.fixture
def identity_provider(actor: Actor) -> IdentityProviderStub:
    return IdentityProviderStub(actor)


@pytest.fixture
def referral_repo() -> ReferralRepositoryStub:
    return ReferralRepositoryStub()


@pytest.fixture
def workflow_log() -> WorkflowLogStub:
    return WorkflowLogStub()


@pytest.fixture
def violation_repo() -> ViolationRepositoryStub:
    return ViolationRepositoryStub()


@pytest.fixture
def procedure_catalog() -> ProcedureCatalogStub:
    return ProcedureCatalogStub()


@pytest.fixture
def document_repo() -> DocumentRepositoryStub:
    return DocumentRepositoryStub()


@pytest.fixture
def document_renderer() -> DocumentRendererStub:
    return DocumentRendererStub()


@pytest.fixture
def dispatcher(fake_time_authority: FakeTimeAuthority) -> NotificationDispatcherStub:
    return NotificationDispatcherStub(fake_time_authority)


@pytest.fixture
def absence_case_repo() -> AbsenceCaseRepositoryStub:
    return AbsenceCaseRepositoryStub()


@pytest.fixture
def violation_service(
    violation_repo: ViolationRepositoryStub,
    procedure_catalog: ProcedureCatalogStub,
    fake_time_authority: FakeTimeAuthority,
) -> ViolationEscalationService:
    return ViolationEscalationService(
        violation_repo=violation_repo,
        procedure_catalog=procedure_catalog,
        time_authority=fake_time_authority,
    )


@pytest.fixture
def workflow_service(
    referral_repo: ReferralRepositoryStub,
    workflow_log: WorkflowLogStub,
    document_repo: DocumentRepositoryStub,
    document_renderer: DocumentRendererStub,
    dispatcher: NotificationDispatcherStub,
    identity_provider: IdentityProviderStub,
    fake_time_authority: FakeTimeAuthority,
    violation_service: ViolationEscalationService,
) -> ReferralWorkflowService:
    return ReferralWorkflowService(
        referral_repo=referral_repo,
        workflow_log=workflow_log,
        document_repo=document_repo,
        document_renderer=document_renderer,
        notification_dispatcher=dispatcher,
        identity_provider=identity_provider,
        time_authority=fake_time_authority,
        violation_service=violation_service,
        config=DEFAULT_ESCALATION_CONFIG,
    )


@pytest.fixture
def absence_service(
    absence_case_repo: AbsenceCaseRepositoryStub,
    workflow_log: WorkflowLogStub,
    identity_provider: IdentityProviderStub,
    fake_time_authority: FakeTimeAuthority,
) -> AbsenceEscalationService:
    return AbsenceEscalationService(
        case_repo=absence_case_repo,
        workflow_log=workflow_log,
        identity_provider=identity_provider,
        time_authority=fake_time_authority,
        config=DEFAULT_ESCALATION_CONFIG,
    )
