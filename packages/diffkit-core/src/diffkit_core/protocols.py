"""Loader protocol for the diffkit framework.

The diff engine never parses files itself.  Anything that can turn a path
into a :class:`~diffkit_core.models.Workbook` satisfies
:class:`WorkbookLoader`; the protocol is ``@runtime_checkable`` so callers
can optionally verify conformance with ``isinstance`` checks.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from diffkit_core.models import LoadResult


@runtime_checkable
class WorkbookLoader(Protocol):
    """Interface for workbook loaders (e.g. openpyxl, xlrd)."""

    def can_handle(self, file_path: str) -> bool:
        """Return True if this loader understands the file's format."""
        ...

    def load(self, file_path: str) -> LoadResult:
        """Load *file_path* into a fully materialized workbook."""
        ...
