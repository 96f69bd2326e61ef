"""Cell and row equivalence rules.

Decides whether two cells at the same row and column are "the same" under a
:class:`~diffkit_excel.config.DiffOptions`, and lifts that decision to whole
rows.  Everything here is a pure, total function of its arguments: no
logging, no state, no exception handling.  Callers may memoize per
``(old, new, options)``.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from diffkit_core.models import Cell, CellValue

from diffkit_excel.config import DiffOptions


def normalize_value(value: CellValue, options: DiffOptions) -> CellValue:
    """Apply whitespace and case folding to string values; pass others through."""
    if isinstance(value, str):
        if options.ignore_whitespace:
            value = value.strip()
        if not options.case_sensitive:
            value = value.lower()
    return value


def values_equal(a: CellValue, b: CellValue) -> bool:
    """Strict value equality.

    Booleans only equal booleans (``True`` is not ``1``), and NaN equals
    NaN so that every cell is equivalent to itself.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


def cells_equivalent(old: Cell | None, new: Cell | None, options: DiffOptions) -> bool:
    """Return True if *old* and *new* count as the same cell.

    ``None`` stands for an absent cell, i.e. a column beyond the end of
    that side's row.
    """
    if old is None and new is None:
        return True

    if old is None or new is None:
        if not options.ignore_empty_cells:
            return False
        present = new if old is None else old
        return present.is_empty(options.treat_zero_as_empty)

    if options.compare_formulas and old.formula != new.formula:
        return False

    if options.compare_cell_kinds and old.kind != new.kind:
        return False

    zero_empty = options.treat_zero_as_empty
    if old.is_empty(zero_empty) and new.is_empty(zero_empty):
        return True

    return values_equal(
        normalize_value(old.value, options),
        normalize_value(new.value, options),
    )


def modified_columns(
    old_cells: Sequence[Cell],
    new_cells: Sequence[Cell],
    options: DiffOptions,
) -> list[int]:
    """Column indices, ascending, where the two rows are not equivalent."""
    width = max(len(old_cells), len(new_cells))
    changed: list[int] = []
    for col in range(width):
        old = old_cells[col] if col < len(old_cells) else None
        new = new_cells[col] if col < len(new_cells) else None
        if not cells_equivalent(old, new, options):
            changed.append(col)
    return changed


def rows_equivalent(
    old_cells: Sequence[Cell],
    new_cells: Sequence[Cell],
    options: DiffOptions,
) -> bool:
    """True if every column position is cell-equivalent."""
    return not modified_columns(old_cells, new_cells, options)
