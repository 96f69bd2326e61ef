"""Top-level comparison entry point.

:func:`compare` is the only place where exceptions raised during a
comparison are trapped; the aligners and the equivalence predicate below it
let everything propagate.  A failed comparison returns a
:class:`~diffkit_excel.models.CompareResult` with ``E_COMPARE_FAILED`` and no
diff -- it never raises into the caller.
"""

from __future__ import annotations

import logging
import time

from diffkit_core.models import Workbook

from diffkit_excel.aligner import align_sheets
from diffkit_excel.config import DiffOptions
from diffkit_excel.errors import DiffError, ErrorCode
from diffkit_excel.models import CompareResult, WorkbookDiff
from diffkit_excel.stats import summarize

logger = logging.getLogger("diffkit_excel")


def compare(
    old: Workbook,
    new: Workbook,
    options: DiffOptions | None = None,
) -> CompareResult:
    """Compare two fully loaded workbooks.

    Args:
        old: The baseline workbook.
        new: The workbook compared against the baseline.
        options: Equivalence rules.  Uses defaults when *None*.

    Returns:
        A :class:`CompareResult` holding the :class:`WorkbookDiff` on
        success, or a ``E_COMPARE_FAILED`` error carrying the underlying
        message on failure.
    """
    options = options or DiffOptions()
    start = time.monotonic()

    try:
        sheets = align_sheets(old, new, options)
        diff = WorkbookDiff(
            old_file_name=old.file_name,
            new_file_name=new.file_name,
            sheets=sheets,
            summary=summarize(sheets),
        )
    except Exception as exc:
        elapsed = time.monotonic() - start
        logger.error(
            "diffkit_excel | file=%s | code=%s | detail=%s",
            new.file_name,
            ErrorCode.E_COMPARE_FAILED.value,
            exc,
        )
        return CompareResult(
            success=False,
            error=DiffError(
                code=ErrorCode.E_COMPARE_FAILED,
                message=str(exc) or type(exc).__name__,
                stage="compare",
            ),
            processing_time_seconds=elapsed,
        )

    elapsed = time.monotonic() - start
    logger.info(
        "Compared %s -> %s: sheets=%d added=%d deleted=%d modified=%d time=%.3fs",
        old.file_name,
        new.file_name,
        len(diff.sheets),
        diff.summary.total_added,
        diff.summary.total_deleted,
        diff.summary.total_modified,
        elapsed,
    )
    return CompareResult(success=True, diff=diff, processing_time_seconds=elapsed)


def check_size_limits(workbook: Workbook, options: DiffOptions) -> list[DiffError]:
    """Report every sheet that exceeds ``max_rows`` / ``max_cols``.

    The engine itself ignores the limits; callers that want to bound
    comparison cost run this first and refuse to compare on any error.
    Nothing is truncated.
    """
    errors: list[DiffError] = []
    for sheet in workbook.sheets:
        if options.max_rows is not None and sheet.row_count > options.max_rows:
            errors.append(
                DiffError(
                    code=ErrorCode.E_COMPARE_TOO_LARGE,
                    message=(
                        f"Sheet '{sheet.name}' in {workbook.file_name} has "
                        f"{sheet.row_count} rows, exceeding max_rows "
                        f"({options.max_rows})."
                    ),
                    sheet_name=sheet.name,
                    stage="limits",
                )
            )
        if options.max_cols is not None and sheet.col_count > options.max_cols:
            errors.append(
                DiffError(
                    code=ErrorCode.E_COMPARE_TOO_LARGE,
                    message=(
                        f"Sheet '{sheet.name}' in {workbook.file_name} has "
                        f"{sheet.col_count} columns, exceeding max_cols "
                        f"({options.max_cols})."
                    ),
                    sheet_name=sheet.name,
                    stage="limits",
                )
            )
    return errors
