"""
Integration test configuration.

Integration tests run the services through the bootstrap wiring with the
in-memory stores, so they exercise the same composition the application
uses. Every test starts from fresh singletons and a fake clock.

Usage:
    @pytest.mark.integration
    async def test_example(wired_workflow: ReferralWorkflowService) -> None:
        ...
"""

from collections.abc import Generator
from datetime import datetime, timezone

import pytest

from student_affairs.application.services.absence_escalation_service import (
    AbsenceEscalationService,
)
from student_affairs.application.services.referral_workflow_service import (
    ReferralWorkflowService,
)
from student_affairs.bootstrap.workflow import (
    get_absence_escalation_service,
    get_referral_workflow_service,
    reset_workflow_dependencies,
    set_escalation_config,
    set_identity_provider,
    set_notification_dispatcher,
    set_time_authority,
)
from student_affairs.config.escalation_config import DEFAULT_ESCALATION_CONFIG
from student_affairs.domain.models.actor import Actor
from student_affairs.infrastructure.stubs import (
    IdentityProviderStub,
    NotificationDispatcherStub,
)
from tests.helpers.fake_time_authority import FakeTimeAuthority

FIXED_NOW = datetime(2026, 2, 10, 8, 0, 0, tzinfo=timezone.utc)
VICE_PRINCIPAL = Actor(actor_id=42, name="Khalid Vice Principal", role="vice_principal")


@pytest.fixture
def integration_clock() -> FakeTimeAuthority:
    return FakeTimeAuthority(frozen_at=FIXED_NOW, tick_seconds=1)


@pytest.fixture
def integration_identity() -> IdentityProviderStub:
    return IdentityProviderStub(VICE_PRINCIPAL)


@pytest.fixture
def integration_dispatcher(
    integration_clock: FakeTimeAuthority,
) -> NotificationDispatcherStub:
    return NotificationDispatcherStub(integration_clock)


@pytest.fixture(autouse=True)
def wired_dependencies(
    integration_clock: FakeTimeAuthority,
    integration_identity: IdentityProviderStub,
    integration_dispatcher: NotificationDispatcherStub,
) -> Generator[None, None, None]:
    """Fresh bootstrap singletons per test."""
    reset_workflow_dependencies()
    set_escalation_config(DEFAULT_ESCALATION_CONFIG)
    set_time_authority(integration_clock)
    set_identity_provider(integration_identity)
    set_notification_dispatcher(integration_dispatcher)
    yield
    reset_workflow_dependencies()


@pytest.fixture
def wired_workflow() -> ReferralWorkflowService:
    return get_referral_workflow_service()


@pytest.fixture
def wired_absence() -> AbsenceEscalationService:
    return get_absence_escalation_service()
