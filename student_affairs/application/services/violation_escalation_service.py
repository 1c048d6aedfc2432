"""Violation escalation service.

Loads a student's violation history and the degree's procedure ladder,
runs the pure resolver, and builds or persists the resulting
ViolationRecord. Used directly for violations reported outside a
referral and by ReferralWorkflowService.record_violation().
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from structlog import get_logger

from student_affairs.domain.errors.workflow import ValidationError
from student_affairs.domain.models.procedure import ProcedureLadder
from student_affairs.domain.models.violation import (
    MAX_DEGREE,
    MIN_DEGREE,
    ViolationPayload,
    ViolationRecord,
    is_valid_degree,
)
from student_affairs.domain.services.violation_escalation import (
    ViolationEscalation,
    resolve_violation_escalation,
)

if TYPE_CHECKING:
    from student_affairs.application.ports.procedure_catalog import (
        ProcedureCatalogProtocol,
    )
    from student_affairs.application.ports.time_authority import (
        TimeAuthorityProtocol,
    )
    from student_affairs.application.ports.violation_repository import (
        ViolationRepositoryProtocol,
    )

logger = get_logger(__name__)


class ViolationEscalationService:
    """Resolves and records behavioural violations.

    Example:
        >>> service = ViolationEscalationService(
        ...     violation_repo=violation_repo,
        ...     procedure_catalog=catalog,
        ...     time_authority=clock,
        ... )
        >>> escalation = await service.preview(student_id=7, payload=payload)
        >>> escalation.occurrence
        2
    """

    def __init__(
        self,
        violation_repo: ViolationRepositoryProtocol,
        procedure_catalog: ProcedureCatalogProtocol,
        time_authority: TimeAuthorityProtocol,
    ) -> None:
        """Initialize the violation escalation service.

        Args:
            violation_repo: Repository for violation records
            procedure_catalog: Source of procedure ladders
            time_authority: Clock for recorded_at timestamps
        """
        self._violation_repo = violation_repo
        self._catalog = procedure_catalog
        self._time = time_authority

    async def validate(self, payload: ViolationPayload) -> None:
        """Validate violation input.

        Raises:
            ValidationError: Degree outside 1..4, empty or unknown type,
                empty location, or negative points.
        """
        if not is_valid_degree(payload.degree):
            raise ValidationError(
                f"degree must be {MIN_DEGREE}-{MAX_DEGREE}, got {payload.degree}",
                field="degree",
            )
        if not payload.violation_type or not payload.violation_type.strip():
            raise ValidationError("violation_type is required", field="violation_type")
        if not payload.location or not payload.location.strip():
            raise ValidationError("location is required", field="location")
        if payload.occurred_at.tzinfo is None:
            raise ValidationError(
                "occurred_at must be timezone-aware", field="occurred_at"
            )
        if payload.points_to_deduct is not None and payload.points_to_deduct < 0:
            raise ValidationError(
                f"points_to_deduct must be >= 0, got {payload.points_to_deduct}",
                field="points_to_deduct",
            )

        known_types = await self._catalog.violation_types(payload.degree)
        if known_types and payload.violation_type not in known_types:
            raise ValidationError(
                f"Unknown violation type {payload.violation_type!r} "
                f"for degree {payload.degree}",
                field="violation_type",
            )

    async def preview(
        self, student_id: int, payload: ViolationPayload
    ) -> ViolationEscalation:
        """Compute what recording this violation would apply, without persisting.

        Raises:
            ValidationError: Invalid payload.
        """
        await self.validate(payload)
        return await self._resolve(student_id, payload)

    async def build_record(
        self,
        student_id: int,
        payload: ViolationPayload,
        referral_id: UUID | None = None,
        reported_by: int | None = None,
    ) -> ViolationRecord:
        """Validate, resolve and build a record without persisting it.

        Raises:
            ValidationError: Invalid payload.
        """
        await self.validate(payload)
        escalation = await self._resolve(student_id, payload)

        return ViolationRecord(
            violation_id=uuid4(),
            student_id=student_id,
            degree=payload.degree,
            violation_type=payload.violation_type,
            occurred_at=payload.occurred_at,
            location=payload.location,
            description=payload.description,
            occurrence=escalation.occurrence,
            procedure_step=escalation.procedure_step,
            referral_id=referral_id,
            reported_by=reported_by,
            recorded_at=self._time.now(),
            points_deducted=self._points_for(payload, escalation),
        )

    async def commit_record(self, record: ViolationRecord) -> None:
        """Persist a record produced by build_record()."""
        await self._violation_repo.save(record)
        logger.info(
            "Violation recorded",
            violation_id=str(record.violation_id),
            student_id=record.student_id,
            degree=record.degree,
            violation_type=record.violation_type,
            occurrence=record.occurrence,
            procedure_step=record.procedure_step,
            points_deducted=record.points_deducted,
        )

    async def discard_record(self, record: ViolationRecord) -> None:
        """Remove a record whose referral link could not be committed."""
        await self._violation_repo.delete(record.violation_id)
        logger.warning(
            "Violation record discarded",
            violation_id=str(record.violation_id),
            student_id=record.student_id,
            referral_id=str(record.referral_id) if record.referral_id else None,
        )

    async def record(
        self,
        student_id: int,
        payload: ViolationPayload,
        reported_by: int | None = None,
    ) -> ViolationRecord:
        """Record a violation that is not tied to a referral.

        Returns:
            The persisted ViolationRecord.

        Raises:
            ValidationError: Invalid payload.
        """
        record = await self.build_record(
            student_id=student_id, payload=payload, reported_by=reported_by
        )
        await self.commit_record(record)
        return record

    async def _resolve(
        self, student_id: int, payload: ViolationPayload
    ) -> ViolationEscalation:
        history = await self._violation_repo.list_for_student(student_id)
        definitions = await self._catalog.get_procedures(payload.degree)
        ladder = ProcedureLadder.for_degree(payload.degree, definitions)

        escalation = resolve_violation_escalation(
            student_id=student_id,
            degree=payload.degree,
            violation_type=payload.violation_type,
            history=history,
            ladder=ladder,
        )
        if escalation.procedure is None:
            logger.warning(
                "No procedure ladder defined for degree",
                degree=payload.degree,
                student_id=student_id,
            )
        return escalation

    @staticmethod
    def _points_for(payload: ViolationPayload, escalation: ViolationEscalation) -> int:
        if payload.points_to_deduct is not None:
            return payload.points_to_deduct
        if escalation.procedure is None:
            return 0
        return escalation.procedure.points_to_deduct
