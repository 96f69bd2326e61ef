"""Pydantic diff models and result envelopes for diffkit-excel.

The diff is hierarchical: a :class:`WorkbookDiff` holds one
:class:`SheetDiff` per sheet name, each holding one :class:`RowDiff` per
aligned row index.  Every model is frozen; the engine builds the whole tree
in one call and nothing mutates it afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from diffkit_core.models import Cell

from diffkit_excel.errors import DiffError


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class RowDiffType(str, Enum):
    """Classification of one aligned row."""

    ADDED = "added"
    DELETED = "deleted"
    MODIFIED = "modified"
    UNCHANGED = "unchanged"


# ---------------------------------------------------------------------------
# Diff tree
# ---------------------------------------------------------------------------


class RowDiff(BaseModel):
    """One row position compared across the two sheets.

    ``old_cells`` is set for deleted, modified and unchanged rows;
    ``new_cells`` for added, modified and unchanged rows.
    ``modified_column_indices`` is set only for modified rows and lists,
    in ascending order, every column whose cells are not equivalent.
    """

    model_config = ConfigDict(frozen=True)

    row_index: int
    type: RowDiffType
    old_cells: list[Cell] | None = None
    new_cells: list[Cell] | None = None
    modified_column_indices: list[int] | None = None

    def is_modified_column(self, col_index: int) -> bool:
        """True if *col_index* should be highlighted as changed."""
        return bool(self.modified_column_indices) and col_index in self.modified_column_indices


class SheetStats(BaseModel):
    """Row counts of a sheet diff, partitioned by row type."""

    model_config = ConfigDict(frozen=True)

    added: int = 0
    deleted: int = 0
    modified: int = 0
    unchanged: int = 0

    @property
    def changed(self) -> int:
        return self.added + self.deleted + self.modified


class SheetDiff(BaseModel):
    """Row-level differences for one sheet name."""

    model_config = ConfigDict(frozen=True)

    sheet_name: str
    rows: list[RowDiff] = []
    stats: SheetStats = SheetStats()

    @property
    def has_changes(self) -> bool:
        return self.stats.changed > 0

    @property
    def modified_cell_count(self) -> int:
        """Total number of highlighted cells across modified rows."""
        return sum(len(r.modified_column_indices or ()) for r in self.rows)

    def changed_rows(self) -> list[RowDiff]:
        """Rows that are not ``unchanged``, in row order."""
        return [r for r in self.rows if r.type != RowDiffType.UNCHANGED]

    def row(self, row_index: int) -> RowDiff | None:
        for row_diff in self.rows:
            if row_diff.row_index == row_index:
                return row_diff
        return None


class DiffSummary(BaseModel):
    """Workbook-level totals of actionable row changes.

    Unchanged rows are tracked per sheet only.
    """

    model_config = ConfigDict(frozen=True)

    total_added: int = 0
    total_deleted: int = 0
    total_modified: int = 0


class WorkbookDiff(BaseModel):
    """Complete difference between two workbooks."""

    model_config = ConfigDict(frozen=True)

    old_file_name: str
    new_file_name: str
    sheets: list[SheetDiff] = []
    summary: DiffSummary = DiffSummary()

    @property
    def sheet_names(self) -> list[str]:
        return [s.sheet_name for s in self.sheets]

    @property
    def has_changes(self) -> bool:
        s = self.summary
        return (s.total_added + s.total_deleted + s.total_modified) > 0

    def sheet(self, name: str) -> SheetDiff | None:
        """Return the diff for sheet *name*, or ``None``."""
        for sheet_diff in self.sheets:
            if sheet_diff.sheet_name == name:
                return sheet_diff
        return None


# ---------------------------------------------------------------------------
# Result envelope
# ---------------------------------------------------------------------------


class CompareResult(BaseModel):
    """Final result returned by a comparison.

    Exactly one of ``diff`` / ``error`` is set: a failed comparison never
    carries a partial diff.
    """

    success: bool
    diff: WorkbookDiff | None = None
    error: DiffError | None = None
    warnings: list[DiffError] = []
    processing_time_seconds: float = 0.0
