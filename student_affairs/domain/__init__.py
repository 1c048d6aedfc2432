"""Domain layer: models, errors and pure escalation rules."""

from student_affairs.domain.exceptions import StudentAffairsError

__all__ = ["StudentAffairsError"]
