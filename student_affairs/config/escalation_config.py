"""Escalation threshold configuration.

This module defines the thresholds used by the absence and lateness
ladders, with environment variable overrides for per-school tuning.

Environment Variables:
- ABSENCE_MIN_CASE_DAYS: Absent days before a case is opened (default: 3, min: 1)
- ABSENCE_PARENT_SUMMON_DAYS: Total days that require summoning a parent (default: 5)
- ABSENCE_CRITICAL_DAYS: Total days that require external reporting (default: 10)
- LATENESS_WARNING_COUNT: Late arrivals before a warning (default: 5)
- LATENESS_PARENT_SUMMON_COUNT: Late arrivals before a parent summon (default: 10)
- LATENESS_COMMITTEE_COUNT: Late arrivals before committee referral (default: 15)
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from student_affairs.domain.services.absence_ladder import AbsenceThresholds
from student_affairs.domain.services.lateness_ladder import LatenessThresholds


def _get_int_env(key: str, default: int) -> int:
    """Get integer environment variable with default.

    Args:
        key: Environment variable name.
        default: Default value if not set or invalid.

    Returns:
        Parsed integer value or default.
    """
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


# =============================================================================
# Absence Configuration
# =============================================================================

# Absent days before an absence case is opened
DEFAULT_ABSENCE_MIN_CASE_DAYS = 3

# Total absent days that add the parent summon and commitment actions
DEFAULT_ABSENCE_PARENT_SUMMON_DAYS = 5

# Total absent days that add the 1919 report and education department actions
DEFAULT_ABSENCE_CRITICAL_DAYS = 10

# =============================================================================
# Lateness Configuration
# =============================================================================

DEFAULT_LATENESS_WARNING_COUNT = 5
DEFAULT_LATENESS_PARENT_SUMMON_COUNT = 10
DEFAULT_LATENESS_COMMITTEE_COUNT = 15

# =============================================================================
# Numbering
# =============================================================================

DEFAULT_REFERRAL_NUMBER_PREFIX = "REF"
DEFAULT_DOCUMENT_NUMBER_PREFIX = "DOC"


@dataclass(frozen=True)
class EscalationConfig:
    """Thresholds for the absence and lateness ladders.

    All thresholds can be overridden via environment variables.

    Attributes:
        min_case_days: Absent days before a case is opened.
        parent_summon_days: Total days that require a parent summon.
        critical_days: Total days that require external reporting.
        lateness_warning_count: Late arrivals before a warning.
        lateness_parent_summon_count: Late arrivals before a parent summon.
        lateness_committee_count: Late arrivals before committee referral.
        referral_number_prefix: Prefix of human-readable referral numbers.
        document_number_prefix: Prefix of human-readable document numbers.
    """

    min_case_days: int = DEFAULT_ABSENCE_MIN_CASE_DAYS
    parent_summon_days: int = DEFAULT_ABSENCE_PARENT_SUMMON_DAYS
    critical_days: int = DEFAULT_ABSENCE_CRITICAL_DAYS
    lateness_warning_count: int = DEFAULT_LATENESS_WARNING_COUNT
    lateness_parent_summon_count: int = DEFAULT_LATENESS_PARENT_SUMMON_COUNT
    lateness_committee_count: int = DEFAULT_LATENESS_COMMITTEE_COUNT
    referral_number_prefix: str = DEFAULT_REFERRAL_NUMBER_PREFIX
    document_number_prefix: str = DEFAULT_DOCUMENT_NUMBER_PREFIX

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.min_case_days < 1:
            raise ValueError(f"min_case_days must be >= 1, got {self.min_case_days}")
        if not self.min_case_days < self.parent_summon_days < self.critical_days:
            raise ValueError(
                "absence thresholds must be strictly increasing: "
                f"min_case_days={self.min_case_days}, "
                f"parent_summon_days={self.parent_summon_days}, "
                f"critical_days={self.critical_days}"
            )
        if self.lateness_warning_count < 1:
            raise ValueError(
                f"lateness_warning_count must be >= 1, got {self.lateness_warning_count}"
            )
        if not (
            self.lateness_warning_count
            < self.lateness_parent_summon_count
            < self.lateness_committee_count
        ):
            raise ValueError(
                "lateness thresholds must be strictly increasing: "
                f"warning={self.lateness_warning_count}, "
                f"parent_summon={self.lateness_parent_summon_count}, "
                f"committee={self.lateness_committee_count}"
            )
        if not self.referral_number_prefix:
            raise ValueError("referral_number_prefix cannot be empty")
        if not self.document_number_prefix:
            raise ValueError("document_number_prefix cannot be empty")

    @property
    def absence_thresholds(self) -> AbsenceThresholds:
        """Absence ladder thresholds as a domain value."""
        return AbsenceThresholds(
            min_case_days=self.min_case_days,
            parent_summon_days=self.parent_summon_days,
            critical_days=self.critical_days,
        )

    @property
    def lateness_thresholds(self) -> LatenessThresholds:
        """Lateness ladder thresholds as a domain value."""
        return LatenessThresholds(
            warning=self.lateness_warning_count,
            parent_summon=self.lateness_parent_summon_count,
            committee=self.lateness_committee_count,
        )

    @classmethod
    def from_environment(cls) -> EscalationConfig:
        """Create config from environment variables with defaults.

        Returns:
            EscalationConfig with values from environment or defaults.

        Raises:
            ValueError: If the overridden thresholds are not strictly increasing.
        """
        return cls(
            min_case_days=_get_int_env(
                "ABSENCE_MIN_CASE_DAYS", DEFAULT_ABSENCE_MIN_CASE_DAYS
            ),
            parent_summon_days=_get_int_env(
                "ABSENCE_PARENT_SUMMON_DAYS", DEFAULT_ABSENCE_PARENT_SUMMON_DAYS
            ),
            critical_days=_get_int_env(
                "ABSENCE_CRITICAL_DAYS", DEFAULT_ABSENCE_CRITICAL_DAYS
            ),
            lateness_warning_count=_get_int_env(
                "LATENESS_WARNING_COUNT", DEFAULT_LATENESS_WARNING_COUNT
            ),
            lateness_parent_summon_count=_get_int_env(
                "LATENESS_PARENT_SUMMON_COUNT", DEFAULT_LATENESS_PARENT_SUMMON_COUNT
            ),
            lateness_committee_count=_get_int_env(
                "LATENESS_COMMITTEE_COUNT", DEFAULT_LATENESS_COMMITTEE_COUNT
            ),
        )


# Pre-defined configurations

# Default production config
DEFAULT_ESCALATION_CONFIG = EscalationConfig()

# Testing config with the smallest valid ladders
TEST_ESCALATION_CONFIG = EscalationConfig(
    min_case_days=1,
    parent_summon_days=2,
    critical_days=3,
    lateness_warning_count=1,
    lateness_parent_summon_count=2,
    lateness_committee_count=3,
)
