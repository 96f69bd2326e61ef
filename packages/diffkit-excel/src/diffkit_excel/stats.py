"""Roll row-level classifications up to sheet and workbook totals."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable

from diffkit_excel.models import DiffSummary, RowDiff, RowDiffType, SheetDiff, SheetStats


def tally_rows(rows: Iterable[RowDiff]) -> SheetStats:
    """Partition *rows* by type and count each bucket."""
    counts = Counter(r.type for r in rows)
    return SheetStats(
        added=counts[RowDiffType.ADDED],
        deleted=counts[RowDiffType.DELETED],
        modified=counts[RowDiffType.MODIFIED],
        unchanged=counts[RowDiffType.UNCHANGED],
    )


def summarize(sheets: Iterable[SheetDiff]) -> DiffSummary:
    """Sum added/deleted/modified across every sheet.

    Unchanged rows are not part of the workbook summary.
    """
    added = deleted = modified = 0
    for sheet in sheets:
        added += sheet.stats.added
        deleted += sheet.stats.deleted
        modified += sheet.stats.modified
    return DiffSummary(
        total_added=added,
        total_deleted=deleted,
        total_modified=modified,
    )
