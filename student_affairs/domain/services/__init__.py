"""Domain services for the student affairs workflow.

Pure functions with no store access; application services load state
and pass it in.

Available services:
- resolve_violation_escalation: occurrence counting and procedure ladder lookup
- absence ladder: action level, required actions, progress, re-evaluation
- derive_lateness_level: late-arrival follow-up level
"""

from student_affairs.domain.services.absence_ladder import (
    DEFAULT_ABSENCE_THRESHOLDS,
    AbsenceThresholds,
    classify_absence,
    compute_progress,
    derive_action_level,
    escalate_level,
    mark_action_done,
    next_action_required,
    open_absence_case,
    reevaluate,
    required_action_keys,
)
from student_affairs.domain.services.lateness_ladder import (
    DEFAULT_LATENESS_THRESHOLDS,
    LatenessThresholds,
    derive_lateness_level,
)
from student_affairs.domain.services.violation_escalation import (
    ViolationEscalation,
    count_occurrence,
    resolve_violation_escalation,
)

__all__ = [
    "DEFAULT_ABSENCE_THRESHOLDS",
    "DEFAULT_LATENESS_THRESHOLDS",
    "AbsenceThresholds",
    "LatenessThresholds",
    "ViolationEscalation",
    "classify_absence",
    "compute_progress",
    "count_occurrence",
    "derive_action_level",
    "derive_lateness_level",
    "escalate_level",
    "mark_action_done",
    "next_action_required",
    "open_absence_case",
    "reevaluate",
    "required_action_keys",
    "resolve_violation_escalation",
]
