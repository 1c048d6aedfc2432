"""Lateness follow-up service.

Maps the attendance sweep's late-arrival counts onto the lateness
ladder using the configured thresholds. Nothing is stored: the result
tells the caller which students are due a warning, a parent summon or
a committee referral.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from structlog import get_logger

from student_affairs.config.escalation_config import (
    DEFAULT_ESCALATION_CONFIG,
    EscalationConfig,
)
from student_affairs.domain.models.lateness import LatenessLevel, LatenessSummary
from student_affairs.domain.services.lateness_ladder import derive_lateness_level

logger = get_logger(__name__)


@dataclass
class LatenessSweepResult:
    """Students grouped by the follow-up their late count calls for.

    Attributes:
        due: Student ids per level, in input order.
        below_threshold: Students with no follow-up due.
    """

    due: dict[LatenessLevel, list[int]] = field(
        default_factory=lambda: {level: [] for level in LatenessLevel}
    )
    below_threshold: list[int] = field(default_factory=list)

    def students_at(self, level: LatenessLevel) -> list[int]:
        return self.due[level]


class LatenessFollowupService:
    """Applies the lateness ladder to late-arrival counts."""

    def __init__(self, config: EscalationConfig | None = None) -> None:
        self._config = config or DEFAULT_ESCALATION_CONFIG
        self._thresholds = self._config.lateness_thresholds

    def evaluate(self, summary: LatenessSummary) -> LatenessLevel | None:
        """Return the follow-up level for one student, None when none is due."""
        return derive_lateness_level(summary.late_count, self._thresholds)

    def process_lateness(
        self, summaries: Iterable[LatenessSummary]
    ) -> LatenessSweepResult:
        """Group a batch of late-arrival counts by follow-up level."""
        result = LatenessSweepResult()

        for summary in summaries:
            level = self.evaluate(summary)
            if level is None:
                result.below_threshold.append(summary.student_id)
            else:
                result.due[level].append(summary.student_id)

        logger.info(
            "Lateness sweep processed",
            warning=len(result.due[LatenessLevel.WARNING]),
            parent_summon=len(result.due[LatenessLevel.PARENT_SUMMON]),
            committee=len(result.due[LatenessLevel.COMMITTEE]),
            below_threshold=len(result.below_threshold),
        )
        return result
