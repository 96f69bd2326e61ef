"""Sheet and row alignment.

Sheets are matched by name and rows by index -- never by content.  An
inserted row therefore shows up as a run of modified rows below it; that
is the accepted cost of positional matching.

Sheet order in the output is the old workbook's order followed by sheets
that exist only in the new workbook, in the new workbook's order.  Row
order is ascending ``row_index``.
"""

from __future__ import annotations

import logging

from diffkit_core.models import Row, Sheet, Workbook

from diffkit_excel.config import DiffOptions
from diffkit_excel.equivalence import modified_columns
from diffkit_excel.models import RowDiff, RowDiffType, SheetDiff
from diffkit_excel.stats import tally_rows

logger = logging.getLogger("diffkit_excel")


def align_rows(old_sheet: Sheet, new_sheet: Sheet, options: DiffOptions) -> SheetDiff:
    """Align two same-named sheets row by row.

    If a sheet lists the same index twice, the later row wins.
    """
    old_rows: dict[int, Row] = {row.index: row for row in old_sheet.rows}
    new_rows: dict[int, Row] = {row.index: row for row in new_sheet.rows}

    row_diffs: list[RowDiff] = []
    for index in sorted(old_rows.keys() | new_rows.keys()):
        old_row = old_rows.get(index)
        new_row = new_rows.get(index)

        if old_row is None:
            row_diffs.append(
                RowDiff(row_index=index, type=RowDiffType.ADDED, new_cells=new_row.cells)
            )
        elif new_row is None:
            row_diffs.append(
                RowDiff(row_index=index, type=RowDiffType.DELETED, old_cells=old_row.cells)
            )
        else:
            changed = modified_columns(old_row.cells, new_row.cells, options)
            if changed:
                row_diffs.append(
                    RowDiff(
                        row_index=index,
                        type=RowDiffType.MODIFIED,
                        old_cells=old_row.cells,
                        new_cells=new_row.cells,
                        modified_column_indices=changed,
                    )
                )
            else:
                row_diffs.append(
                    RowDiff(
                        row_index=index,
                        type=RowDiffType.UNCHANGED,
                        old_cells=old_row.cells,
                        new_cells=new_row.cells,
                    )
                )

    stats = tally_rows(row_diffs)
    logger.debug(
        "Sheet '%s': added=%d deleted=%d modified=%d unchanged=%d",
        new_sheet.name,
        stats.added,
        stats.deleted,
        stats.modified,
        stats.unchanged,
    )
    return SheetDiff(sheet_name=new_sheet.name, rows=row_diffs, stats=stats)


def align_sheets(old: Workbook, new: Workbook, options: DiffOptions) -> list[SheetDiff]:
    """Produce one :class:`SheetDiff` per distinct sheet name.

    A sheet present on one side only is aligned against an empty sheet of
    the same name, which yields all-added or all-deleted rows.
    """
    old_sheets = {sheet.name: sheet for sheet in old.sheets}
    new_sheets = {sheet.name: sheet for sheet in new.sheets}

    # dict preserves insertion order: old names first, then new-only names.
    names = list(dict.fromkeys([*old_sheets, *new_sheets]))

    sheet_diffs: list[SheetDiff] = []
    for name in names:
        old_sheet = old_sheets.get(name) or Sheet(name=name)
        new_sheet = new_sheets.get(name) or Sheet(name=name)
        if name not in old_sheets:
            logger.debug("Sheet '%s' only in new workbook", name)
        elif name not in new_sheets:
            logger.debug("Sheet '%s' only in old workbook", name)
        sheet_diffs.append(align_rows(old_sheet, new_sheet, options))
    return sheet_diffs
