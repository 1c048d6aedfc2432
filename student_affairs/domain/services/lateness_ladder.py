"""Lateness escalation ladder (pure)."""

from __future__ import annotations

from dataclasses import dataclass

from student_affairs.domain.models.lateness import LatenessLevel


@dataclass(frozen=True)
class LatenessThresholds:
    """Late-arrival counts at which each level starts."""

    warning: int = 5
    parent_summon: int = 10
    committee: int = 15

    def __post_init__(self) -> None:
        if not 0 < self.warning < self.parent_summon < self.committee:
            raise ValueError(
                "lateness thresholds must be positive and strictly increasing, "
                f"got {self.warning}/{self.parent_summon}/{self.committee}"
            )


DEFAULT_LATENESS_THRESHOLDS = LatenessThresholds()


def derive_lateness_level(
    late_count: int,
    thresholds: LatenessThresholds = DEFAULT_LATENESS_THRESHOLDS,
) -> LatenessLevel | None:
    """Map a term's late-arrival count to a follow-up level.

    Args:
        late_count: Late arrivals in the term.
        thresholds: Level boundaries.

    Returns:
        The level, or None when no follow-up is due.

    Raises:
        ValueError: If late_count is negative.
    """
    if late_count < 0:
        raise ValueError(f"late_count must be >= 0, got {late_count}")
    if late_count >= thresholds.committee:
        return LatenessLevel.COMMITTEE
    if late_count >= thresholds.parent_summon:
        return LatenessLevel.PARENT_SUMMON
    if late_count >= thresholds.warning:
        return LatenessLevel.WARNING
    return None
