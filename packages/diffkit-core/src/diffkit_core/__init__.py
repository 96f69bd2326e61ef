"""diffkit-core -- Shared primitives for the diffkit framework.

Re-exports all public types: errors, workbook models, and the loader protocol.
"""

from diffkit_core.errors import BaseDiffError, CoreErrorCode
from diffkit_core.models import (
    Cell,
    CellKind,
    CellValue,
    LoadResult,
    Row,
    Sheet,
    Workbook,
)
from diffkit_core.protocols import WorkbookLoader

__all__ = [
    # Errors
    "CoreErrorCode",
    "BaseDiffError",
    # Models
    "CellKind",
    "CellValue",
    "Cell",
    "Row",
    "Sheet",
    "Workbook",
    "LoadResult",
    # Protocols
    "WorkbookLoader",
]
