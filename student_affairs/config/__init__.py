"""Configuration module for the student affairs workflow.

Available Configurations:
- EscalationConfig: Absence and lateness ladder thresholds
"""

from student_affairs.config.escalation_config import (
    DEFAULT_ESCALATION_CONFIG,
    TEST_ESCALATION_CONFIG,
    EscalationConfig,
)

__all__ = [
    "EscalationConfig",
    "DEFAULT_ESCALATION_CONFIG",
    "TEST_ESCALATION_CONFIG",
]
