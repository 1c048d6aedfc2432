"""Domain models for the student affairs workflow.

Contains the referral aggregate and its transition table, violation and
procedure catalog records, absence cases, and the workflow log entry.
These models are immutable and contain no infrastructure dependencies.
"""

from student_affairs.domain.models.absence_case import (
    CRITICAL_ACTIONS,
    AbsenceCase,
    AbsenceCaseStatus,
    AbsenceType,
    ActionLevel,
    AttendanceSummary,
    RequiredAction,
    RequiredActionKey,
)
from student_affairs.domain.models.actor import Actor
from student_affairs.domain.models.lateness import LatenessLevel, LatenessSummary
from student_affairs.domain.models.notification import (
    DispatchResult,
    NotificationRecipient,
)
from student_affairs.domain.models.procedure import (
    ProcedureDefinition,
    ProcedureLadder,
    ProcedureTask,
)
from student_affairs.domain.models.referral import (
    REFERRAL_TRANSITIONS,
    TERMINAL_STATUSES,
    Referral,
    ReferralAction,
    ReferralPriority,
    ReferralStatus,
    ReferralTargetRole,
    ReferralTransition,
    ReferralType,
    guard_transition,
)
from student_affairs.domain.models.referral_document import (
    DocumentType,
    ReferralDocument,
    RenderedDocument,
)
from student_affairs.domain.models.side_effect import SideEffectOutcome
from student_affairs.domain.models.violation import (
    MAX_DEGREE,
    MIN_DEGREE,
    ViolationPayload,
    ViolationRecord,
    is_valid_degree,
)
from student_affairs.domain.models.workflow_log import (
    LogSubject,
    WorkflowLogAction,
    WorkflowLogEntry,
)

__all__: list[str] = [
    "CRITICAL_ACTIONS",
    "MAX_DEGREE",
    "MIN_DEGREE",
    "REFERRAL_TRANSITIONS",
    "TERMINAL_STATUSES",
    "AbsenceCase",
    "AbsenceCaseStatus",
    "AbsenceType",
    "ActionLevel",
    "Actor",
    "AttendanceSummary",
    "DispatchResult",
    "DocumentType",
    "LatenessLevel",
    "LatenessSummary",
    "LogSubject",
    "NotificationRecipient",
    "ProcedureDefinition",
    "ProcedureLadder",
    "ProcedureTask",
    "Referral",
    "ReferralAction",
    "ReferralDocument",
    "ReferralPriority",
    "ReferralStatus",
    "ReferralTargetRole",
    "ReferralTransition",
    "ReferralType",
    "RenderedDocument",
    "RequiredAction",
    "RequiredActionKey",
    "SideEffectOutcome",
    "ViolationPayload",
    "ViolationRecord",
    "WorkflowLogAction",
    "WorkflowLogEntry",
    "guard_transition",
    "is_valid_degree",
]
