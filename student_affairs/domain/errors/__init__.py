"""Domain errors for the student affairs workflow.

All exceptions inherit from StudentAffairsError.
"""

from student_affairs.domain.errors.workflow import (
    AbsenceCaseNotFoundError,
    ConcurrentModificationError,
    ConflictError,
    DependencyFailureError,
    InvalidStateError,
    ReferralNotFoundError,
    ValidationError,
)

__all__: list[str] = [
    "AbsenceCaseNotFoundError",
    "ConcurrentModificationError",
    "ConflictError",
    "DependencyFailureError",
    "InvalidStateError",
    "ReferralNotFoundError",
    "ValidationError",
]
