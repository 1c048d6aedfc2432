"""Absence escalation ladder (pure).

Turns accumulated absence days into an action level and the set of
follow-up actions that level makes mandatory.

Monotonicity:
- Within one case the effective total never decreases, so a later,
  lower reading never removes obligations.
- The action level never decreases.
- Completed actions stay completed across re-evaluation.

Required Actions (in display order):
- always: counselor_notified, learning_plan_created
- consecutive case above 3days: protection_center_notified (critical)
- total >= parent_summon_days: parent_summoned, commitment_taken
- total >= critical_days: reported_to_1919 (critical), education_dept_notified
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

from student_affairs.domain.errors.workflow import (
    ConflictError,
    InvalidStateError,
    ValidationError,
)
from student_affairs.domain.models.absence_case import (
    AbsenceCase,
    AbsenceCaseStatus,
    AbsenceType,
    ActionLevel,
    AttendanceSummary,
    RequiredAction,
    RequiredActionKey,
)


@dataclass(frozen=True)
class AbsenceThresholds:
    """Absent-day counts that drive the ladder."""

    min_case_days: int = 3
    parent_summon_days: int = 5
    critical_days: int = 10

    def __post_init__(self) -> None:
        if not 0 < self.min_case_days < self.parent_summon_days < self.critical_days:
            raise ValueError(
                "absence thresholds must be positive and strictly increasing, "
                f"got {self.min_case_days}/{self.parent_summon_days}/"
                f"{self.critical_days}"
            )


DEFAULT_ABSENCE_THRESHOLDS = AbsenceThresholds()


def derive_action_level(
    total_days: int,
    thresholds: AbsenceThresholds = DEFAULT_ABSENCE_THRESHOLDS,
) -> ActionLevel:
    """Map a total of absent days to an action level.

    Args:
        total_days: Accumulated absent days.
        thresholds: Ladder boundaries.

    Returns:
        THREE_DAYS below parent_summon_days, FIVE_DAYS below critical_days,
        TEN_DAYS otherwise.

    Raises:
        ValueError: If total_days is negative.
    """
    if total_days < 0:
        raise ValueError(f"total_days must be >= 0, got {total_days}")
    if total_days >= thresholds.critical_days:
        return ActionLevel.TEN_DAYS
    if total_days >= thresholds.parent_summon_days:
        return ActionLevel.FIVE_DAYS
    return ActionLevel.THREE_DAYS


def escalate_level(current: ActionLevel, derived: ActionLevel) -> ActionLevel:
    """Return the higher of two levels; a case never de-escalates."""
    return derived if derived > current else current


def required_action_keys(
    absence_type: AbsenceType,
    action_level: ActionLevel,
    total_days: int,
    thresholds: AbsenceThresholds = DEFAULT_ABSENCE_THRESHOLDS,
) -> tuple[RequiredActionKey, ...]:
    """Compute the mandatory actions for a case.

    Args:
        absence_type: Consecutive or repeated.
        action_level: The case's (escalated) level.
        total_days: The case's effective total.
        thresholds: Ladder boundaries.

    Returns:
        Required keys in display order.
    """
    keys = [
        RequiredActionKey.COUNSELOR_NOTIFIED,
        RequiredActionKey.LEARNING_PLAN_CREATED,
    ]
    if (
        absence_type == AbsenceType.CONSECUTIVE
        and action_level > ActionLevel.THREE_DAYS
    ):
        keys.append(RequiredActionKey.PROTECTION_CENTER_NOTIFIED)
    if total_days >= thresholds.parent_summon_days:
        keys.extend(
            [RequiredActionKey.PARENT_SUMMONED, RequiredActionKey.COMMITMENT_TAKEN]
        )
    if total_days >= thresholds.critical_days:
        keys.extend(
            [
                RequiredActionKey.REPORTED_TO_1919,
                RequiredActionKey.EDUCATION_DEPT_NOTIFIED,
            ]
        )
    return tuple(keys)


def compute_progress(case: AbsenceCase) -> int:
    """Completed share of the required actions, floored to an int percent."""
    return case.progress


def next_action_required(case: AbsenceCase) -> RequiredAction | None:
    """Return the first undone action, critical actions first.

    Returns:
        The action to do next, or None when everything is done.
    """
    pending = case.pending_actions
    if not pending:
        return None
    critical = [a for a in pending if a.critical]
    return critical[0] if critical else pending[0]


def classify_absence(
    summary: AttendanceSummary,
    thresholds: AbsenceThresholds = DEFAULT_ABSENCE_THRESHOLDS,
) -> AbsenceType:
    """Consecutive when the current unbroken run reaches the case minimum."""
    if (
        summary.consecutive_days is not None
        and summary.consecutive_days >= thresholds.min_case_days
    ):
        return AbsenceType.CONSECUTIVE
    return AbsenceType.REPEATED


def _merge_actions(
    existing: tuple[RequiredAction, ...],
    keys: tuple[RequiredActionKey, ...],
) -> tuple[RequiredAction, ...]:
    by_key = {a.key: a for a in existing}
    merged = [by_key.pop(key, RequiredAction(key=key)) for key in keys]
    # Keys are monotonic within a case; anything left over is kept as-is.
    merged.extend(by_key.values())
    return tuple(merged)


def open_absence_case(
    case_id: UUID,
    summary: AttendanceSummary,
    now: datetime,
    thresholds: AbsenceThresholds = DEFAULT_ABSENCE_THRESHOLDS,
    notes: str | None = None,
) -> AbsenceCase:
    """Build a new active case from an attendance summary.

    Args:
        case_id: Identifier for the new case.
        summary: The student's attendance figures.
        now: Creation time (UTC).
        thresholds: Ladder boundaries.
        notes: Optional free text.

    Returns:
        A fresh case with every required action undone.

    Raises:
        ValidationError: If the total is below the case minimum.
    """
    if summary.total_absence_days < thresholds.min_case_days:
        raise ValidationError(
            f"total_absence_days must be >= {thresholds.min_case_days} to open a "
            f"case, got {summary.total_absence_days}",
            field="total_absence_days",
        )
    absence_type = classify_absence(summary, thresholds)
    level = derive_action_level(summary.total_absence_days, thresholds)
    keys = required_action_keys(
        absence_type, level, summary.total_absence_days, thresholds
    )
    return AbsenceCase(
        case_id=case_id,
        student_id=summary.student_id,
        absence_type=absence_type,
        total_absence_days=summary.total_absence_days,
        consecutive_days=summary.consecutive_days,
        absence_start_date=summary.absence_start_date,
        last_absence_date=summary.last_absence_date,
        action_level=level,
        status=AbsenceCaseStatus.ACTIVE,
        required_actions=tuple(RequiredAction(key=key) for key in keys),
        notes=notes,
        created_at=now,
        updated_at=now,
    )


def reevaluate(
    case: AbsenceCase,
    total_days: int,
    consecutive_days: int | None,
    now: datetime,
    thresholds: AbsenceThresholds = DEFAULT_ABSENCE_THRESHOLDS,
) -> AbsenceCase:
    """Re-apply the ladder to a case with a fresh absence reading.

    Args:
        case: The case as currently stored.
        total_days: Latest total absent days.
        consecutive_days: Latest unbroken run, if known.
        now: Evaluation time (UTC).
        thresholds: Ladder boundaries.

    Returns:
        A new case. The level and the effective total never decrease,
        completed actions are kept, and new obligations are added undone.

    Raises:
        InvalidStateError: If the case is already resolved.
        ValueError: If total_days is negative.
    """
    if case.is_resolved:
        raise InvalidStateError(
            entity_id=case.case_id,
            current_state=case.status.value,
            action="reevaluate",
            allowed_states=[
                AbsenceCaseStatus.ACTIVE.value,
                AbsenceCaseStatus.ESCALATED.value,
            ],
        )
    if total_days < 0:
        raise ValueError(f"total_days must be >= 0, got {total_days}")

    effective_total = max(case.total_absence_days, total_days)
    level = escalate_level(
        case.action_level, derive_action_level(effective_total, thresholds)
    )
    keys = required_action_keys(case.absence_type, level, effective_total, thresholds)
    actions = _merge_actions(case.required_actions, keys)

    if all(a.done for a in actions):
        status = AbsenceCaseStatus.RESOLVED
    elif level > case.action_level:
        status = AbsenceCaseStatus.ESCALATED
    else:
        status = case.status

    if consecutive_days is None:
        consecutive_days = case.consecutive_days
    elif case.consecutive_days is not None:
        consecutive_days = max(case.consecutive_days, consecutive_days)

    return replace(
        case,
        total_absence_days=effective_total,
        consecutive_days=consecutive_days,
        action_level=level,
        required_actions=actions,
        status=status,
        updated_at=now,
        version=case.version + 1,
    )


def parse_action_key(key: str | RequiredActionKey) -> RequiredActionKey:
    """Parse a raw action key.

    Raises:
        ValidationError: If the key is not a known action.
    """
    if isinstance(key, RequiredActionKey):
        return key
    try:
        return RequiredActionKey(key)
    except ValueError:
        raise ValidationError(f"Unknown action key: {key}", field="action_key") from None


def mark_action_done(
    case: AbsenceCase,
    key: str | RequiredActionKey,
    now: datetime,
    notes: str | None = None,
) -> AbsenceCase:
    """Mark one required action done.

    Args:
        case: The case as currently stored.
        key: Action to mark.
        now: Completion time (UTC).
        notes: Optional note.

    Returns:
        A new case; resolved when this was the last undone action.

    Raises:
        ValidationError: If the key is unknown or not required by the case.
        ConflictError: If the action is already done.
    """
    action_key = parse_action_key(key)
    current = case.action(action_key)
    if current is None:
        raise ValidationError(
            f"Action {action_key.value} is not required for case {case.case_id}",
            field="action_key",
        )
    if current.done:
        raise ConflictError(
            f"Action {action_key.value} already done for case {case.case_id}"
        )

    done = RequiredAction(key=action_key, done=True, done_at=now, notes=notes)
    actions = tuple(done if a.key == action_key else a for a in case.required_actions)
    status = (
        AbsenceCaseStatus.RESOLVED if all(a.done for a in actions) else case.status
    )
    return replace(
        case,
        required_actions=actions,
        status=status,
        updated_at=now,
        version=case.version + 1,
    )


def with_referral_link(case: AbsenceCase, referral_id: UUID, now: datetime) -> AbsenceCase:
    """Link the referral opened for a case (set once).

    Raises:
        ConflictError: If a referral is already linked.
    """
    if case.referral_id is not None:
        raise ConflictError(
            f"Absence case {case.case_id} already has referral {case.referral_id}"
        )
    return replace(case, referral_id=referral_id, updated_at=now, version=case.version + 1)
