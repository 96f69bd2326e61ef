"""Workbook data model shared by every diffkit package.

A loader turns a spreadsheet file into a :class:`Workbook`: an ordered list
of :class:`Sheet` objects, each an ordered list of :class:`Row` objects made
of typed :class:`Cell` values.  All models are frozen -- once a loader has
produced a workbook, nothing downstream may mutate it.
"""

from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from diffkit_core.errors import BaseDiffError

CellValue = str | bool | int | float | datetime | None


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class CellKind(str, Enum):
    """Closed set of cell kinds a loader may produce.

    ``FORMULA`` cells carry their cached value in ``Cell.value`` and the
    formula text in ``Cell.formula``.
    """

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    FORMULA = "formula"
    ERROR = "error"
    EMPTY = "empty"


# ---------------------------------------------------------------------------
# Workbook model
# ---------------------------------------------------------------------------


class Cell(BaseModel):
    """A single typed cell value.

    In JSON, values without a native JSON form are written as one-key
    objects: ``{"datetime": "<ISO 8601>"}`` and ``{"float": "nan"}`` (or
    ``"inf"`` / ``"-inf"``).  Validation turns them back into Python values,
    so a cell survives a round trip whatever its ``kind``.
    """

    model_config = ConfigDict(frozen=True)

    value: CellValue = None
    kind: CellKind = CellKind.EMPTY
    formula: str | None = None

    @field_serializer("value", when_used="json")
    def _tag_value(self, value: CellValue) -> Any:
        if isinstance(value, datetime):
            return {"datetime": value.isoformat()}
        if isinstance(value, float) and not math.isfinite(value):
            return {"float": repr(value)}
        return value

    @field_validator("value", mode="before")
    @classmethod
    def _untag_value(cls, value: Any) -> Any:
        if isinstance(value, dict) and len(value) == 1:
            if "datetime" in value:
                return datetime.fromisoformat(value["datetime"])
            if "float" in value:
                return float(value["float"])
        return value

    def is_empty(self, treat_zero_as_empty: bool = False) -> bool:
        """Return True if the cell holds no meaningful value.

        A cell is empty when its kind is ``empty`` or its value is ``None``
        or the empty string.  With *treat_zero_as_empty* a numeric zero
        also counts as empty.
        """
        if self.kind == CellKind.EMPTY or self.value is None or self.value == "":
            return True
        if treat_zero_as_empty and not isinstance(self.value, bool):
            return isinstance(self.value, (int, float)) and self.value == 0
        return False


class Row(BaseModel):
    """A row of cells at a fixed position in its source sheet."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    cells: list[Cell] = []


class Sheet(BaseModel):
    """A named worksheet."""

    model_config = ConfigDict(frozen=True)

    name: str
    rows: list[Row] = []

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def col_count(self) -> int:
        """Width of the widest row."""
        return max((len(row.cells) for row in self.rows), default=0)


class Workbook(BaseModel):
    """An in-memory workbook produced once per file by a loader."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    sheets: list[Sheet] = []

    @field_validator("sheets")
    @classmethod
    def _unique_sheet_names(cls, sheets: list[Sheet]) -> list[Sheet]:
        seen: set[str] = set()
        for sheet in sheets:
            if sheet.name in seen:
                raise ValueError(f"Duplicate sheet name: {sheet.name!r}")
            seen.add(sheet.name)
        return sheets

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    def get_sheet(self, name: str) -> Sheet | None:
        """Return the sheet called *name*, or ``None``."""
        for sheet in self.sheets:
            if sheet.name == name:
                return sheet
        return None


# ---------------------------------------------------------------------------
# Loader result
# ---------------------------------------------------------------------------


class LoadResult(BaseModel):
    """Outcome of loading one workbook file.

    Either ``workbook`` is set and ``errors`` holds no fatal entries, or
    ``workbook`` is ``None`` and at least one ``E_*`` error explains why.
    Warnings (``W_*``) may accompany a successful load.
    """

    file_path: str
    workbook: Workbook | None = None
    errors: list[BaseDiffError] = []

    @property
    def ok(self) -> bool:
        return self.workbook is not None and not any(e.is_fatal for e in self.errors)

    @property
    def fatal_errors(self) -> list[BaseDiffError]:
        return [e for e in self.errors if e.is_fatal]

    @property
    def warnings(self) -> list[BaseDiffError]:
        return [e for e in self.errors if not e.is_fatal]
