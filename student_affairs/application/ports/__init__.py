"""Application ports.

Interfaces the application services depend on. Implementations live in
student_affairs.infrastructure (stubs for tests and default wiring).
"""

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

__all__: list[str] = [
    "AbsenceCaseRepositoryProtocol",
    "DocumentRendererProtocol",
    "DocumentRepositoryProtocol",
    "IdentityProviderProtocol",
    "NotificationDispatcherProtocol",
    "ProcedureCatalogProtocol",
    "ReferralRepositoryProtocol",
    "TimeAuthorityProtocol",
    "ViolationRepositoryProtocol",
    "WorkflowLogProtocol",
]
