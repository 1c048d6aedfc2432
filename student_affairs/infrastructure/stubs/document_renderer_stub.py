"""Document renderer stub producing plain-text documents."""

from __future__ import annotations

from student_affairs.domain.errors.workflow import DependencyFailureError
from student_affairs.domain.models.referral import Referral
from student_affairs.domain.models.referral_document import (
    DocumentType,
    RenderedDocument,
)


class DocumentRendererStub:
    """Renders a short plain-text summary of the referral."""

    def __init__(self) -> None:
        """Initialize the stub."""
        self._should_fail = False
        self._failure_message = "Simulated render failure"
        self._render_count = 0

    @property
    def render_count(self) -> int:
        return self._render_count

    def configure_failure(
        self,
        should_fail: bool,
        message: str = "Simulated render failure",
    ) -> None:
        """Configure whether render() raises DependencyFailureError."""
        self._should_fail = should_fail
        self._failure_message = message

    async def render(
        self, referral: Referral, document_type: DocumentType
    ) -> RenderedDocument:
        """Render the document.

        Raises:
            DependencyFailureError: If configured to fail.
        """
        self._render_count += 1
        if self._should_fail:
            raise DependencyFailureError("document_renderer", self._failure_message)

        lines = [
            f"{document_type.label} {referral.referral_number}",
            f"Student: {referral.student_id}",
            f"Type: {referral.referral_type.value}",
            f"Routed to: {referral.target_role.value}",
            f"Status: {referral.status.value}",
            "",
            referral.description,
        ]
        return RenderedDocument(
            title=f"{document_type.label} {referral.referral_number}",
            content="\n".join(lines),
        )
