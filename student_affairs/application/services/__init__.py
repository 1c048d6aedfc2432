"""Application services.

Services orchestrate the domain models and pure domain services against
the ports: they read fresh state, guard, write with compare-and-swap,
and log.
"""

from student_affairs.application.services.absence_escalation_service import (
    AbsenceEscalationService,
    AttendanceSweepResult,
)
from student_affairs.application.services.lateness_followup_service import (
    LatenessFollowupService,
    LatenessSweepResult,
)
from student_affairs.application.services.referral_workflow_service import (
    ReferralWorkflowService,
)
from student_affairs.application.services.violation_escalation_service import (
    ViolationEscalationService,
)

__all__ = [
    "AbsenceEscalationService",
    "AttendanceSweepResult",
    "LatenessFollowupService",
    "LatenessSweepResult",
    "ReferralWorkflowService",
    "ViolationEscalationService",
]
