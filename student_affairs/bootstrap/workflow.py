"""Bootstrap wiring for workflow dependencies.

Every getter lazily creates a module-level singleton. The defaults are
the in-memory stubs and the system clock; production deployments call
the set_* functions with real adapters before the first get_*.
"""

from __future__ import annotations

from student_affairs.application.ports.absence_case_repository import (
    AbsenceCaseRepositoryProtocol,
)
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
from student_affairs.application.ports.procedure_catalog import (
    ProcedureCatalogProtocol,
)
from student_affairs.application.ports.referral_repository import (
    ReferralRepositoryProtocol,
)
from student_affairs.application.ports.time_authority import TimeAuthorityProtocol
from student_affairs.application.ports.violation_repository import (
    ViolationRepositoryProtocol,
)
from student_affairs.application.ports.workflow_log import WorkflowLogProtocol
from student_affairs.application.services.absence_escalation_service import (
    AbsenceEscalationService,
)
from student_affairs.application.services.lateness_followup_service import (
    LatenessFollowupService,
)
from student_affairs.application.services.referral_workflow_service import (
    ReferralWorkflowService,
)
from student_affairs.application.services.violation_escalation_service import (
    ViolationEscalationService,
)
from student_affairs.config.escalation_config import EscalationConfig
from student_affairs.infrastructure.adapters.system_time_authority import (
    SystemTimeAuthority,
)
from student_affairs.infrastructure.stubs.absence_case_repository_stub import (
    AbsenceCaseRepositoryStub,
)
from student_affairs.infrastructure.stubs.document_renderer_stub import (
    DocumentRendererStub,
)
from student_affairs.infrastructure.stubs.document_repository_stub import (
    DocumentRepositoryStub,
)
from student_affairs.infrastructure.stubs.identity_provider_stub import (
    IdentityProviderStub,
)
from student_affairs.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
)
from student_affairs.infrastructure.stubs.procedure_catalog_stub import (
    ProcedureCatalogStub,
)
from student_affairs.infrastructure.stubs.referral_repository_stub import (
    ReferralRepositoryStub,
)
from student_affairs.infrastructure.stubs.violation_repository_stub import (
    ViolationRepositoryStub,
)
from student_affairs.infrastructure.stubs.workflow_log_stub import WorkflowLogStub

_config: EscalationConfig | None = None
_time_authority: TimeAuthorityProtocol | None = None
_identity_provider: IdentityProviderProtocol | None = None
_referral_repository: ReferralRepositoryProtocol | None = None
_workflow_log: WorkflowLogProtocol | None = None
_violation_repository: ViolationRepositoryProtocol | None = None
_procedure_catalog: ProcedureCatalogProtocol | None = None
_absence_case_repository: AbsenceCaseRepositoryProtocol | None = None
_document_repository: DocumentRepositoryProtocol | None = None
_document_renderer: DocumentRendererProtocol | None = None
_notification_dispatcher: NotificationDispatcherProtocol | None = None
_violation_service: ViolationEscalationService | None = None
_referral_workflow_service: ReferralWorkflowService | None = None
_absence_escalation_service: AbsenceEscalationService | None = None
_lateness_followup_service: LatenessFollowupService | None = None


def get_escalation_config() -> EscalationConfig:
    """Get escalation config, read from the environment on first use."""
    global _config
    if _config is None:
        _config = EscalationConfig.from_environment()
    return _config


def get_time_authority() -> TimeAuthorityProtocol:
    """Get time authority instance."""
    global _time_authority
    if _time_authority is None:
        _time_authority = SystemTimeAuthority()
    return _time_authority


def get_identity_provider() -> IdentityProviderProtocol:
    """Get identity provider instance."""
    global _identity_provider
    if _identity_provider is None:
        _identity_provider = IdentityProviderStub()
    return _identity_provider


def get_referral_repository() -> ReferralRepositoryProtocol:
    """Get referral repository instance."""
    global _referral_repository
    if _referral_repository is None:
        _referral_repository = ReferralRepositoryStub()
    return _referral_repository


def get_workflow_log() -> WorkflowLogProtocol:
    """Get workflow log instance."""
    global _workflow_log
    if _workflow_log is None:
        _workflow_log = WorkflowLogStub()
    return _workflow_log


def get_violation_repository() -> ViolationRepositoryProtocol:
    """Get violation repository instance."""
    global _violation_repository
    if _violation_repository is None:
        _violation_repository = ViolationRepositoryStub()
    return _violation_repository


def get_procedure_catalog() -> ProcedureCatalogProtocol:
    """Get procedure catalog instance."""
    global _procedure_catalog
    if _procedure_catalog is None:
        _procedure_catalog = ProcedureCatalogStub()
    return _procedure_catalog


def get_absence_case_repository() -> AbsenceCaseRepositoryProtocol:
    """Get absence case repository instance."""
    global _absence_case_repository
    if _absence_case_repository is None:
        _absence_case_repository = AbsenceCaseRepositoryStub()
    return _absence_case_repository


def get_document_repository() -> DocumentRepositoryProtocol:
    """Get document repository instance."""
    global _document_repository
    if _document_repository is None:
        _document_repository = DocumentRepositoryStub()
    return _document_repository


def get_document_renderer() -> DocumentRendererProtocol:
    """Get document renderer instance."""
    global _document_renderer
    if _document_renderer is None:
        _document_renderer = DocumentRendererStub()
    return _document_renderer


def get_notification_dispatcher() -> NotificationDispatcherProtocol:
    """Get notification dispatcher instance."""
    global _notification_dispatcher
    if _notification_dispatcher is None:
        _notification_dispatcher = NotificationDispatcherStub(get_time_authority())
    return _notification_dispatcher


def get_violation_escalation_service() -> ViolationEscalationService:
    """Get violation escalation service instance."""
    global _violation_service
    if _violation_service is None:
        _violation_service = ViolationEscalationService(
            violation_repo=get_violation_repository(),
            procedure_catalog=get_procedure_catalog(),
            time_authority=get_time_authority(),
        )
    return _violation_service


def get_referral_workflow_service() -> ReferralWorkflowService:
    """Get referral workflow service instance."""
    global _referral_workflow_service
    if _referral_workflow_service is None:
        _referral_workflow_service = ReferralWorkflowService(
            referral_repo=get_referral_repository(),
            workflow_log=get_workflow_log(),
            document_repo=get_document_repository(),
            document_renderer=get_document_renderer(),
            notification_dispatcher=get_notification_dispatcher(),
            identity_provider=get_identity_provider(),
            time_authority=get_time_authority(),
            violation_service=get_violation_escalation_service(),
            config=get_escalation_config(),
        )
    return _referral_workflow_service


def get_absence_escalation_service() -> AbsenceEscalationService:
    """Get absence escalation service instance."""
    global _absence_escalation_service
    if _absence_escalation_service is None:
        _absence_escalation_service = AbsenceEscalationService(
            case_repo=get_absence_case_repository(),
            workflow_log=get_workflow_log(),
            identity_provider=get_identity_provider(),
            time_authority=get_time_authority(),
            config=get_escalation_config(),
        )
    return _absence_escalation_service


def get_lateness_followup_service() -> LatenessFollowupService:
    """Get lateness follow-up service instance."""
    global _lateness_followup_service
    if _lateness_followup_service is None:
        _lateness_followup_service = LatenessFollowupService(
            config=get_escalation_config()
        )
    return _lateness_followup_service


def reset_workflow_dependencies() -> None:
    """Reset all singleton instances for testing."""
    global _config
    global _time_authority
    global _identity_provider
    global _referral_repository
    global _workflow_log
    global _violation_repository
    global _procedure_catalog
    global _absence_case_repository
    global _document_repository
    global _document_renderer
    global _notification_dispatcher
    global _violation_service
    global _referral_workflow_service
    global _absence_escalation_service
    global _lateness_followup_service

    _config = None
    _time_authority = None
    _identity_provider = None
    _referral_repository = None
    _workflow_log = None
    _violation_repository = None
    _procedure_catalog = None
    _absence_case_repository = None
    _document_repository = None
    _document_renderer = None
    _notification_dispatcher = None
    _violation_service = None
    _referral_workflow_service = None
    _absence_escalation_service = None
    _lateness_followup_service = None


def set_escalation_config(config: EscalationConfig) -> None:
    """Set custom escalation config."""
    global _config
    _config = config


def set_time_authority(time_authority: TimeAuthorityProtocol) -> None:
    """Set custom time authority for testing."""
    global _time_authority
    _time_authority = time_authority


def set_identity_provider(provider: IdentityProviderProtocol) -> None:
    """Set custom identity provider."""
    global _identity_provider
    _identity_provider = provider


def set_notification_dispatcher(dispatcher: NotificationDispatcherProtocol) -> None:
    """Set custom notification dispatcher."""
    global _notification_dispatcher
    _notification_dispatcher = dispatcher


def set_document_renderer(renderer: DocumentRendererProtocol) -> None:
    """Set custom document renderer."""
    global _document_renderer
    _document_renderer = renderer


def set_procedure_catalog(catalog: ProcedureCatalogProtocol) -> None:
    """Set custom procedure catalog."""
    global _procedure_catalog
    _procedure_catalog = catalog
