"""Absence escalation service.

Applies the absence ladder to stored cases. A student has at most one
unresolved case at a time; a resolved case is never reopened. Attendance
totals are cumulative over the term, so the sweep opens a fresh case
only when the reading grew past what the latest resolved case covered.

Every committed change to a case appends exactly one workflow log entry
after the write succeeds.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from student_affairs.config.escalation_config import (
    DEFAULT_ESCALATION_CONFIG,
    EscalationConfig,
)
from student_affairs.domain.errors.workflow import (
    AbsenceCaseNotFoundError,
    ConflictError,
    InvalidStateError,
)
from student_affairs.domain.models.absence_case import (
    AbsenceCase,
    AttendanceSummary,
    RequiredActionKey,
)
from student_affairs.domain.models.workflow_log import (
    LogSubject,
    WorkflowLogAction,
)
from student_affairs.domain.services import absence_ladder

if TYPE_CHECKING:
    from student_affairs.application.ports.absence_case_repository import (
        AbsenceCaseRepositoryProtocol,
    )
    from student_affairs.application.ports.identity_provider import (
        IdentityProviderProtocol,
    )
    from student_affairs.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from student_affairs.application.ports.workflow_log import WorkflowLogProtocol
    from student_affairs.domain.models.workflow_log import WorkflowLogEntry

logger = get_logger(__name__)


@dataclass
class AttendanceSweepResult:
    """What one attendance sweep did.

    Attributes:
        opened: Cases opened by the sweep.
        reevaluated: Open cases whose reading changed.
        unchanged: Students whose open or latest resolved case already
            reflected the reading.
        below_threshold: Students with too few absences for a case.
    """

    opened: list[AbsenceCase] = field(default_factory=list)
    reevaluated: list[AbsenceCase] = field(default_factory=list)
    unchanged: list[int] = field(default_factory=list)
    below_threshold: list[int] = field(default_factory=list)


class AbsenceEscalationService:
    """Opens, re-evaluates and tracks absence cases.

    Example:
        >>> service = AbsenceEscalationService(case_repo, log, identity, clock)
        >>> case = await service.open_case(
        ...     AttendanceSummary(student_id=7, total_absence_days=4)
        ... )
        >>> case = await service.reevaluate_case(case.case_id, total_days=6)
        >>> [a.key.value for a in case.required_actions]
        ['counselor_notified', 'learning_plan_created', 'parent_summoned', 'commitment_taken']
    """

    def __init__(
        self,
        case_repo: AbsenceCaseRepositoryProtocol,
        workflow_log: WorkflowLogProtocol,
        identity_provider: IdentityProviderProtocol,
        time_authority: TimeAuthorityProtocol,
        config: EscalationConfig | None = None,
    ) -> None:
        """Initialize the absence escalation service.

        Args:
            case_repo: Repository for absence cases
            workflow_log: Append-only audit log
            identity_provider: Resolves the acting user
            time_authority: Clock for all timestamps
            config: Escalation thresholds
        """
        self._case_repo = case_repo
        self._workflow_log = workflow_log
        self._identity = identity_provider
        self._time = time_authority
        self._config = config or DEFAULT_ESCALATION_CONFIG
        self._thresholds = self._config.absence_thresholds

    async def open_case(
        self,
        summary: AttendanceSummary,
        notes: str | None = None,
    ) -> AbsenceCase:
        """Open a case for a student.

        Raises:
            ValidationError: Total below the case minimum.
            ConflictError: The student already has an unresolved case.
        """
        existing = await self._case_repo.find_open_for_student(summary.student_id)
        if existing is not None:
            raise ConflictError(
                f"Student {summary.student_id} already has open absence case "
                f"{existing.case_id}"
            )

        case = absence_ladder.open_absence_case(
            case_id=uuid4(),
            summary=summary,
            now=self._time.now(),
            thresholds=self._thresholds,
            notes=notes,
        )
        await self._case_repo.save(case)
        await self._append_log(
            case,
            WorkflowLogAction.ABSENCE_CASE_OPENED,
            notes=(
                f"type={case.absence_type.value} total={case.total_absence_days} "
                f"level={case.action_level.value}"
            ),
        )

        logger.info(
            "Absence case opened",
            case_id=str(case.case_id),
            student_id=case.student_id,
            absence_type=case.absence_type.value,
            total_absence_days=case.total_absence_days,
            action_level=case.action_level.value,
            required_actions=[k.value for k in case.required_keys],
        )
        return case

    async def reevaluate_case(
        self,
        case_id: UUID,
        total_days: int,
        consecutive_days: int | None = None,
    ) -> AbsenceCase:
        """Re-apply the ladder with a fresh absence reading.

        Raises:
            AbsenceCaseNotFoundError: Case doesn't exist.
            InvalidStateError: Case is resolved.
            ConcurrentModificationError: Lost a race with another writer.
        """
        case = await self._load(case_id)
        log = logger.bind(case_id=str(case_id), student_id=case.student_id)

        try:
            updated = absence_ladder.reevaluate(
                case,
                total_days=total_days,
                consecutive_days=consecutive_days,
                now=self._time.now(),
                thresholds=self._thresholds,
            )
        except InvalidStateError:
            log.warning("Re-evaluation rejected for resolved case")
            raise

        await self._case_repo.compare_and_swap(updated, case.version)

        added = [k.value for k in updated.required_keys if k not in case.required_keys]
        await self._append_log(
            updated,
            WorkflowLogAction.CASE_REEVALUATED,
            notes=(
                f"total={updated.total_absence_days} "
                f"level={case.action_level.value}->{updated.action_level.value}"
                + (f" added={','.join(added)}" if added else "")
            ),
        )
        log.info(
            "Absence case re-evaluated",
            total_absence_days=updated.total_absence_days,
            action_level=updated.action_level.value,
            previous_level=case.action_level.value,
            status=updated.status.value,
            added_actions=added,
            progress=updated.progress,
        )
        return updated

    async def mark_action_done(
        self,
        case_id: UUID,
        action_key: str | RequiredActionKey,
        notes: str | None = None,
    ) -> AbsenceCase:
        """Mark a required action done.

        Raises:
            AbsenceCaseNotFoundError: Case doesn't exist.
            ValidationError: Unknown key or not required by the case.
            ConflictError: Action already done.
        """
        case = await self._load(case_id)
        updated = absence_ladder.mark_action_done(
            case, action_key, now=self._time.now(), notes=notes
        )
        await self._case_repo.compare_and_swap(updated, case.version)

        key = absence_ladder.parse_action_key(action_key)
        await self._append_log(
            updated,
            WorkflowLogAction.ACTION_COMPLETED,
            notes=f"{key.value}: {notes}" if notes else key.value,
        )
        logger.info(
            "Absence action completed",
            case_id=str(case_id),
            action_key=key.value,
            status=updated.status.value,
            progress=updated.progress,
        )
        return updated

    async def link_referral(self, case_id: UUID, referral_id: UUID) -> AbsenceCase:
        """Link the referral opened for a case (set once).

        Raises:
            AbsenceCaseNotFoundError: Case doesn't exist.
            ConflictError: A referral is already linked.
        """
        case = await self._load(case_id)
        updated = absence_ladder.with_referral_link(case, referral_id, self._time.now())
        await self._case_repo.compare_and_swap(updated, case.version)
        await self._append_log(
            updated, WorkflowLogAction.REFERRAL_LINKED, notes=f"referral {referral_id}"
        )

        logger.info(
            "Absence case linked to referral",
            case_id=str(case_id),
            referral_id=str(referral_id),
        )
        return updated

    async def process_attendance(
        self, summaries: Iterable[AttendanceSummary]
    ) -> AttendanceSweepResult:
        """Apply a batch of attendance summaries.

        Called by the scheduled attendance sweep. Students with an open
        case get it re-evaluated when the reading grew. Students without
        one get a new case once they reach the minimum, unless their
        latest resolved case already covered the reading.

        Returns:
            AttendanceSweepResult describing what changed.
        """
        result = AttendanceSweepResult()

        for summary in summaries:
            case = await self._case_repo.find_open_for_student(summary.student_id)

            if case is not None:
                if not self._reading_grew(case, summary):
                    result.unchanged.append(summary.student_id)
                    continue
                result.reevaluated.append(
                    await self.reevaluate_case(
                        case.case_id,
                        total_days=summary.total_absence_days,
                        consecutive_days=summary.consecutive_days,
                    )
                )
                continue

            if summary.total_absence_days < self._thresholds.min_case_days:
                result.below_threshold.append(summary.student_id)
                continue

            latest = await self._case_repo.find_latest_for_student(summary.student_id)
            if latest is not None and not self._reading_grew(latest, summary):
                result.unchanged.append(summary.student_id)
                continue
            result.opened.append(await self.open_case(summary))

        logger.info(
            "Attendance sweep processed",
            opened=len(result.opened),
            reevaluated=len(result.reevaluated),
            unchanged=len(result.unchanged),
            below_threshold=len(result.below_threshold),
        )
        return result

    async def get_case(self, case_id: UUID) -> AbsenceCase:
        """Retrieve a case.

        Raises:
            AbsenceCaseNotFoundError: Case doesn't exist.
        """
        return await self._load(case_id)

    async def get_case_timeline(self, case_id: UUID) -> list[WorkflowLogEntry]:
        """Return a case's log ordered by (created_at, sequence)."""
        return await self._workflow_log.list_for_absence_case(case_id)

    async def list_open_cases(self) -> list[AbsenceCase]:
        """Return all unresolved cases."""
        return await self._case_repo.list_open()

    async def _load(self, case_id: UUID) -> AbsenceCase:
        case = await self._case_repo.get(case_id)
        if case is None:
            raise AbsenceCaseNotFoundError(case_id)
        return case

    async def _append_log(
        self,
        case: AbsenceCase,
        action: WorkflowLogAction,
        notes: str | None = None,
    ) -> None:
        await self._workflow_log.append(
            subject_id=case.case_id,
            action=action,
            actor=self._identity.current_actor(),
            created_at=case.updated_at or case.created_at,
            notes=notes,
            subject=LogSubject.ABSENCE_CASE,
        )

    @staticmethod
    def _reading_grew(case: AbsenceCase, summary: AttendanceSummary) -> bool:
        if summary.total_absence_days > case.total_absence_days:
            return True
        return (
            summary.consecutive_days is not None
            and summary.consecutive_days > (case.consecutive_days or 0)
        )
