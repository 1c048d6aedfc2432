"""Procedure catalog port."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from student_affairs.domain.models.procedure import ProcedureDefinition


class ProcedureCatalogProtocol(Protocol):
    """Read-only source of disciplinary procedure definitions."""

    @abstractmethod
    async def get_procedures(self, degree: int) -> list[ProcedureDefinition]:
        """Return the procedure definitions of a degree, in any order."""
        ...

    @abstractmethod
    async def violation_types(self, degree: int) -> frozenset[str]:
        """Return the violation type keys defined for a degree.

        An empty set means the catalog does not restrict types.
        """
        ...
