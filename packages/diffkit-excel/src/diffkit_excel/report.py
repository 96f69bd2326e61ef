"""Plain-text rendering of a :class:`~diffkit_excel.models.WorkbookDiff`.

Row numbers and column letters are shown the way Excel shows them: row
index ``0`` is row ``1`` and column index ``0`` is column ``A``.
"""

from __future__ import annotations

from openpyxl.utils import get_column_letter

from diffkit_excel.models import RowDiff, RowDiffType, SheetDiff, WorkbookDiff

_ROW_MARKERS = {
    RowDiffType.ADDED: "+",
    RowDiffType.DELETED: "-",
    RowDiffType.MODIFIED: "~",
}


def _format_row(row_diff: RowDiff) -> str:
    line = f"    {_ROW_MARKERS[row_diff.type]} row {row_diff.row_index + 1}"
    if row_diff.modified_column_indices:
        letters = ", ".join(get_column_letter(c + 1) for c in row_diff.modified_column_indices)
        line += f": {letters}"
    return line


def _render_sheet(sheet_diff: SheetDiff, show_rows: bool) -> list[str]:
    stats = sheet_diff.stats
    status = "changed" if sheet_diff.has_changes else "unchanged"
    lines = [
        f"  Sheet: {sheet_diff.sheet_name} ({status})",
        (
            f"    added={stats.added} deleted={stats.deleted} "
            f"modified={stats.modified} unchanged={stats.unchanged} "
            f"cells_modified={sheet_diff.modified_cell_count}"
        ),
    ]
    if show_rows:
        lines.extend(_format_row(r) for r in sheet_diff.changed_rows())
    return lines


def render_summary(diff: WorkbookDiff, show_rows: bool = False) -> str:
    """Render *diff* as a human-readable report.

    Args:
        diff: The diff to render.
        show_rows: Also list every changed row, with the letters of the
            modified columns for modified rows.
    """
    summary = diff.summary
    lines = [
        f"=== {diff.old_file_name} -> {diff.new_file_name} ===",
        f"Rows added:    {summary.total_added}",
        f"Rows deleted:  {summary.total_deleted}",
        f"Rows modified: {summary.total_modified}",
    ]
    if not diff.has_changes:
        lines.append("No differences.")

    if diff.sheets:
        lines.append("")
        lines.append("Sheets:")
        for sheet_diff in diff.sheets:
            lines.extend(_render_sheet(sheet_diff, show_rows))

    return "\n".join(lines)
