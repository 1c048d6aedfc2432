"""In-memory stub implementations of the application ports.

Used by the tests and by the default bootstrap wiring.
"""

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
    DEFAULT_ACTOR,
    IdentityProviderStub,
)
from student_affairs.infrastructure.stubs.notification_dispatcher_stub import (
    NotificationDispatcherStub,
    SentNotification,
)
from student_affairs.infrastructure.stubs.procedure_catalog_stub import (
    DEFAULT_PROCEDURES,
    DEFAULT_VIOLATION_TYPES,
    ProcedureCatalogStub,
)
from student_affairs.infrastructure.stubs.referral_repository_stub import (
    ReferralRepositoryStub,
)
from student_affairs.infrastructure.stubs.violation_repository_stub import (
    ViolationRepositoryStub,
)
from student_affairs.infrastructure.stubs.workflow_log_stub import WorkflowLogStub

__all__ = [
    "DEFAULT_ACTOR",
    "DEFAULT_PROCEDURES",
    "DEFAULT_VIOLATION_TYPES",
    "AbsenceCaseRepositoryStub",
    "DocumentRendererStub",
    "DocumentRepositoryStub",
    "IdentityProviderStub",
    "NotificationDispatcherStub",
    "ProcedureCatalogStub",
    "ReferralRepositoryStub",
    "SentNotification",
    "ViolationRepositoryStub",
    "WorkflowLogStub",
]
