"""diffkit-excel -- Excel workbook comparison for the diffkit framework.

Public API exports for the loader, the comparison engine, the orchestrator,
result models, errors and configuration.
"""

from diffkit_excel.aligner import align_rows, align_sheets
from diffkit_excel.comparator import check_size_limits, compare
from diffkit_excel.config import DiffOptions, ExcelDiffConfig
from diffkit_excel.differ import ExcelDiffer
from diffkit_excel.equivalence import cells_equivalent, modified_columns, rows_equivalent
from diffkit_excel.errors import DiffError, ErrorCode
from diffkit_excel.loader import ExcelWorkbookLoader
from diffkit_excel.models import (
    CompareResult,
    DiffSummary,
    RowDiff,
    RowDiffType,
    SheetDiff,
    SheetStats,
    WorkbookDiff,
)
from diffkit_excel.report import render_summary
from diffkit_excel.security import SUPPORTED_EXTENSIONS, ExcelSecurityScanner
from diffkit_excel.serializer import from_json, load_diff, save_diff, to_json

__all__ = [
    # Enums
    "RowDiffType",
    # Diff models
    "RowDiff",
    "SheetStats",
    "SheetDiff",
    "DiffSummary",
    "WorkbookDiff",
    "CompareResult",
    # Engine
    "compare",
    "check_size_limits",
    "align_sheets",
    "align_rows",
    "cells_equivalent",
    "modified_columns",
    "rows_equivalent",
    # Loading
    "ExcelWorkbookLoader",
    "ExcelSecurityScanner",
    "SUPPORTED_EXTENSIONS",
    # Orchestrator
    "ExcelDiffer",
    # Output
    "render_summary",
    "to_json",
    "from_json",
    "save_diff",
    "load_diff",
    # Errors
    "ErrorCode",
    "DiffError",
    # Config
    "DiffOptions",
    "ExcelDiffConfig",
]
