"""Document renderer port."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from student_affairs.domain.models.referral import Referral
    from student_affairs.domain.models.referral_document import (
        DocumentType,
        RenderedDocument,
    )


class DocumentRendererProtocol(Protocol):
    """Protocol for rendering referral documents."""

    @abstractmethod
    async def render(
        self, referral: Referral, document_type: DocumentType
    ) -> RenderedDocument:
        """Render a document for a referral.

        Raises:
            DependencyFailureError: Rendering failed.
        """
        ...
