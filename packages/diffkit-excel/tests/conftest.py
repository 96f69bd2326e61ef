"""Shared test fixtures for diffkit-excel tests.

Provides a default ``config`` fixture, factories that build in-memory
workbooks from plain Python values, and a factory that writes real .xlsx
files with openpyxl into ``tmp_path``.
"""

from __future__ import annotations

import pathlib
from typing import Any, Callable

import openpyxl
import pytest

from diffkit_core.models import Cell, Row, Sheet, Workbook

from diffkit_excel.config import DiffOptions, ExcelDiffConfig
from diffkit_excel.loader import convert_value


def _cell(value: Any) -> Cell:
    if isinstance(value, Cell):
        return value
    kind, converted = convert_value(value)
    return Cell(value=converted, kind=kind)


@pytest.fixture()
def config() -> ExcelDiffConfig:
    """Return an ExcelDiffConfig with all defaults."""
    return ExcelDiffConfig()


@pytest.fixture()
def options() -> DiffOptions:
    """Return the default equivalence rules."""
    return DiffOptions()


@pytest.fixture()
def make_sheet() -> Callable[..., Sheet]:
    """Factory: ``make_sheet("S", [[1, 2], [3]])`` or ``rows={0: [...], 5: [...]}``.

    A list of rows gets consecutive indices from zero; a dict maps explicit
    row indices to cell values.  Raw values are typed via ``convert_value``;
    ready-made :class:`Cell` objects are passed through.
    """

    def _make(name: str, rows: list[list[Any]] | dict[int, list[Any]] | None = None) -> Sheet:
        rows = rows or []
        items = rows.items() if isinstance(rows, dict) else enumerate(rows)
        return Sheet(
            name=name,
            rows=[Row(index=i, cells=[_cell(v) for v in values]) for i, values in items],
        )

    return _make


@pytest.fixture()
def make_workbook(make_sheet) -> Callable[..., Workbook]:
    """Factory: ``make_workbook({"Sheet1": [[1, 2]]}, file_name="a.xlsx")``."""

    def _make(sheets: dict[str, Any], file_name: str = "book.xlsx") -> Workbook:
        return Workbook(
            file_name=file_name,
            sheets=[make_sheet(name, rows) for name, rows in sheets.items()],
        )

    return _make


@pytest.fixture()
def write_xlsx(tmp_path: pathlib.Path) -> Callable[..., pathlib.Path]:
    """Factory that writes ``{sheet_name: [[row values], ...]}`` to an .xlsx.

    ``None`` leaves a cell blank; strings starting with ``=`` become
    formulas (openpyxl stores no cached value for them).
    """

    def _write(name: str, sheets: dict[str, list[list[Any]]]) -> pathlib.Path:
        wb = openpyxl.Workbook()
        wb.remove(wb.active)
        for sheet_name, rows in sheets.items():
            ws = wb.create_sheet(sheet_name)
            for r, values in enumerate(rows, start=1):
                for c, value in enumerate(values, start=1):
                    if value is not None:
                        ws.cell(row=r, column=c, value=value)
        path = tmp_path / name
        wb.save(path)
        return path

    return _write


@pytest.fixture()
def write_xls(tmp_path: pathlib.Path) -> Callable[..., pathlib.Path]:
    """Factory like :func:`write_xlsx` for legacy ``.xls`` files (via xlwt)."""
    import xlwt

    def _write(name: str, sheets: dict[str, list[list[Any]]]) -> pathlib.Path:
        wb = xlwt.Workbook()
        for sheet_name, rows in sheets.items():
            ws = wb.add_sheet(sheet_name)
            for r, values in enumerate(rows):
                for c, value in enumerate(values):
                    if value is not None:
                        ws.write(r, c, value)
        path = tmp_path / name
        wb.save(str(path))
        return path

    return _write
