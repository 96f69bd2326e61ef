"""Excel workbook loader with a parser fallback chain.

Turns a spreadsheet file into a fully materialized
:class:`~diffkit_core.models.Workbook`:

1. **openpyxl** for ``.xlsx`` / ``.xlsm`` -- cached values plus formula text
   (the workbook is opened twice, once with ``data_only=True``).
2. **xlrd** for legacy ``.xls`` -- values only, dates decoded with the
   workbook's datemode.
3. **pandas** ``read_excel`` when the primary parser cannot open the file --
   values only, recorded as ``W_PARSER_FALLBACK``.

Row indices are zero-based absolute positions in the sheet, and cell lists
always start at column ``A`` so that column indices line up between two
workbooks.  Rows whose cells are all empty are dropped unless
``include_empty_rows`` is set; the indices of the remaining rows are kept.
"""

from __future__ import annotations

import logging
import math
import os
import time
from datetime import date, datetime, time as dt_time, timedelta
from typing import TYPE_CHECKING

import openpyxl
import pandas as pd
import xlrd
from openpyxl.chartsheet import Chartsheet
from openpyxl.worksheet.formula import ArrayFormula
from openpyxl.worksheet.worksheet import Worksheet

from diffkit_core.models import Cell, CellKind, CellValue, LoadResult, Row, Sheet, Workbook

from diffkit_excel.config import ExcelDiffConfig
from diffkit_excel.errors import DiffError, ErrorCode
from diffkit_excel.security import SUPPORTED_EXTENSIONS, ExcelSecurityScanner, file_extension

if TYPE_CHECKING:
    from openpyxl.cell.cell import Cell as XlsxCell, MergedCell
    from xlrd.sheet import Cell as XlsCell

logger = logging.getLogger("diffkit_excel")


# ---------------------------------------------------------------------------
# Value conversion
# ---------------------------------------------------------------------------


def convert_value(value: object, is_error: bool = False) -> tuple[CellKind, CellValue]:
    """Map a raw parser value onto a ``(kind, value)`` pair.

    Dates become ``datetime``; times and durations have no cell kind of
    their own and are kept as their ISO text.
    """
    if value is None:
        return CellKind.EMPTY, None
    if isinstance(value, bool):
        return CellKind.BOOLEAN, value
    if isinstance(value, (int, float)):
        return CellKind.NUMBER, value
    if isinstance(value, datetime):
        return CellKind.DATE, value
    if isinstance(value, date):
        return CellKind.DATE, datetime.combine(value, dt_time.min)
    if isinstance(value, dt_time):
        return CellKind.STRING, value.isoformat()
    if isinstance(value, timedelta):
        return CellKind.STRING, str(value)
    if isinstance(value, str):
        if is_error:
            return CellKind.ERROR, value
        if value == "":
            return CellKind.EMPTY, value
        return CellKind.STRING, value
    return CellKind.STRING, str(value)


def _is_blank_row(cells: list[Cell]) -> bool:
    return all(cell.kind == CellKind.EMPTY for cell in cells)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


class ExcelWorkbookLoader:
    """Load ``.xlsx``, ``.xlsm`` and ``.xls`` files into workbooks.

    Satisfies :class:`~diffkit_core.protocols.WorkbookLoader`.  Every file
    first passes :class:`ExcelSecurityScanner`; any fatal finding there, or
    a file no parser can open, yields a failed :class:`LoadResult` rather
    than an exception.

    Parameters
    ----------
    config:
        Loader configuration.  Uses defaults when *None*.
    """

    def __init__(self, config: ExcelDiffConfig | None = None) -> None:
        self._config = config or ExcelDiffConfig()
        self._scanner = ExcelSecurityScanner(self._config)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def can_handle(self, file_path: str) -> bool:
        """Return True if the extension is one this loader reads."""
        return file_extension(file_path) in SUPPORTED_EXTENSIONS

    def load(self, file_path: str) -> LoadResult:
        """Load *file_path* into a :class:`Workbook`.

        Returns
        -------
        LoadResult
            The workbook plus any warnings, or no workbook and the fatal
            error(s) explaining why.
        """
        start = time.monotonic()
        filename = os.path.basename(file_path)

        errors = self._scanner.scan(file_path)
        fatal = [e for e in errors if e.is_fatal]
        if fatal:
            logger.error(
                "diffkit_excel | file=%s | code=%s | detail=%s",
                filename,
                fatal[0].code,
                fatal[0].message,
            )
            return LoadResult(file_path=file_path, errors=errors)

        try:
            if file_extension(file_path) == ".xls":
                sheets = self._read_xls(file_path)
            else:
                sheets = self._read_openpyxl(file_path, errors)
        except Exception as exc:
            exc_msg = str(exc).lower()
            if "password" in exc_msg or "encrypted" in exc_msg:
                return self._fail(
                    file_path,
                    errors,
                    ErrorCode.E_PARSE_PASSWORD,
                    f"Workbook is password-protected: {exc}",
                )

            logger.warning(
                "Primary parser could not open %s (%s); trying pandas fallback",
                filename,
                exc,
            )
            try:
                sheets = self._read_pandas(file_path)
            except Exception as fallback_exc:
                return self._fail(
                    file_path,
                    errors,
                    ErrorCode.E_PARSE_CORRUPT,
                    f"All parsers failed. File may be corrupt: {fallback_exc}",
                )
            errors.append(
                DiffError(
                    code=ErrorCode.W_PARSER_FALLBACK,
                    message=f"Parsed via pandas fallback. Reason: {exc}",
                    stage="load",
                    recoverable=True,
                )
            )

        if not sheets:
            return self._fail(
                file_path,
                errors,
                ErrorCode.E_PARSE_EMPTY,
                "No worksheets found in workbook.",
            )

        workbook = Workbook(file_name=filename, sheets=sheets)
        duration = time.monotonic() - start
        logger.info(
            "Loaded %s: %d sheets, %d rows in %.3fs",
            filename,
            len(sheets),
            sum(s.row_count for s in sheets),
            duration,
        )
        return LoadResult(file_path=file_path, workbook=workbook, errors=errors)

    def list_sheet_names(self, file_path: str) -> list[str]:
        """Return the workbook's sheet names without loading any cells.

        The file goes through the same security scan as :meth:`load`.  A
        file that fails the scan or that the parser cannot open yields an
        empty list; the reason is logged at ERROR.
        """
        filename = os.path.basename(file_path)
        fatal = [e for e in self._scanner.scan(file_path) if e.is_fatal]
        if fatal:
            logger.error(
                "diffkit_excel | file=%s | code=%s | detail=%s",
                filename,
                fatal[0].code,
                fatal[0].message,
            )
            return []

        try:
            if file_extension(file_path) == ".xls":
                book = xlrd.open_workbook(file_path, on_demand=True)
                try:
                    return book.sheet_names()
                finally:
                    book.release_resources()
            wb = openpyxl.load_workbook(file_path, read_only=True)
            try:
                return list(wb.sheetnames)
            finally:
                wb.close()
        except Exception as exc:
            logger.error(
                "diffkit_excel | file=%s | code=%s | detail=%s",
                filename,
                ErrorCode.E_PARSE_CORRUPT.value,
                exc,
            )
            return []

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _fail(
        self,
        file_path: str,
        errors: list[DiffError],
        code: ErrorCode,
        message: str,
    ) -> LoadResult:
        logger.error(
            "diffkit_excel | file=%s | code=%s | detail=%s",
            os.path.basename(file_path),
            code.value,
            message,
        )
        errors.append(DiffError(code=code, message=message, stage="load"))
        return LoadResult(file_path=file_path, errors=errors)

    def _wanted(self, sheet_name: str) -> bool:
        wanted = self._config.sheet_names
        return wanted is None or sheet_name in wanted

    def _build_sheet(self, name: str, rows: list[tuple[int, list[Cell]]]) -> Sheet:
        include_empty = self._config.include_empty_rows
        kept = [
            Row(index=index, cells=cells)
            for index, cells in rows
            if include_empty or not _is_blank_row(cells)
        ]
        if self._config.log_sample_data and kept:
            logger.debug("Sheet '%s' first row: %s", name, [c.value for c in kept[0].cells])
        return Sheet(name=name, rows=kept)

    # -- openpyxl ------------------------------------------------------

    def _read_openpyxl(self, file_path: str, errors: list[DiffError]) -> list[Sheet]:
        values_wb = openpyxl.load_workbook(file_path, data_only=True)
        formula_wb = (
            openpyxl.load_workbook(file_path, data_only=False)
            if self._config.read_formulas
            else None
        )
        sheets: list[Sheet] = []
        try:
            for sheet_name in values_wb.sheetnames:
                if not self._wanted(sheet_name):
                    continue
                ws = values_wb[sheet_name]
                if isinstance(ws, Chartsheet):
                    errors.append(
                        DiffError(
                            code=ErrorCode.W_SHEET_SKIPPED_CHART,
                            message=f"Sheet '{sheet_name}' is chart-only; skipped.",
                            sheet_name=sheet_name,
                            stage="load",
                            recoverable=True,
                        )
                    )
                    logger.info(
                        "Skipped chart-only sheet '%s' in %s",
                        sheet_name,
                        os.path.basename(file_path),
                    )
                    continue
                if not isinstance(ws, Worksheet):
                    continue
                formula_ws = formula_wb[sheet_name] if formula_wb is not None else None
                sheets.append(self._sheet_from_openpyxl(sheet_name, ws, formula_ws))
        finally:
            values_wb.close()
            if formula_wb is not None:
                formula_wb.close()
        return sheets

    def _sheet_from_openpyxl(
        self,
        sheet_name: str,
        ws: Worksheet,
        formula_ws: Worksheet | None,
    ) -> Sheet:
        # A brand-new sheet reports a 1x1 dimension with nothing in it.
        if ws.max_row == 1 and ws.max_column == 1 and ws.cell(row=1, column=1).value is None:
            return Sheet(name=sheet_name)

        bounds = dict(min_row=ws.min_row, max_row=ws.max_row, min_col=1, max_col=ws.max_column)
        value_rows = ws.iter_rows(**bounds)
        formula_rows = formula_ws.iter_rows(**bounds) if formula_ws is not None else None

        rows: list[tuple[int, list[Cell]]] = []
        for value_row in value_rows:
            formula_row = next(formula_rows) if formula_rows is not None else None
            cells: list[Cell] = []
            for col, value_cell in enumerate(value_row):
                formula_cell = formula_row[col] if formula_row is not None else None
                cells.append(self._cell_from_openpyxl(value_cell, formula_cell))
            rows.append((value_row[0].row - 1, cells))
        return self._build_sheet(sheet_name, rows)

    @staticmethod
    def _cell_from_openpyxl(
        value_cell: XlsxCell | MergedCell, formula_cell: XlsxCell | MergedCell | None
    ) -> Cell:
        """Build a cell from the cached-value and formula views of one position.

        A formula whose cached result is an Excel error keeps the ERROR kind
        and carries the formula text alongside it.
        """
        is_error = value_cell.data_type == "e"
        kind, value = convert_value(value_cell.value, is_error=is_error)
        formula: str | None = None
        if formula_cell is not None and formula_cell.data_type == "f":
            raw = formula_cell.value
            formula = raw.text if isinstance(raw, ArrayFormula) else str(raw)
        if formula:
            if is_error:
                return Cell(value=value, kind=CellKind.ERROR, formula=formula)
            return Cell(value=value, kind=CellKind.FORMULA, formula=formula)
        return Cell(value=value, kind=kind)

    # -- xlrd ----------------------------------------------------------

    def _read_xls(self, file_path: str) -> list[Sheet]:
        book = xlrd.open_workbook(file_path, on_demand=True)
        sheets: list[Sheet] = []
        try:
            for sheet_name in book.sheet_names():
                if not self._wanted(sheet_name):
                    continue
                sh = book.sheet_by_name(sheet_name)
                rows = [
                    (r, [self._cell_from_xlrd(sh.cell(r, c), book.datemode) for c in range(sh.ncols)])
                    for r in range(sh.nrows)
                ]
                sheets.append(self._build_sheet(sheet_name, rows))
                book.unload_sheet(sheet_name)
        finally:
            book.release_resources()
        return sheets

    @staticmethod
    def _cell_from_xlrd(cell: XlsCell, datemode: int) -> Cell:
        if cell.ctype in (xlrd.XL_CELL_EMPTY, xlrd.XL_CELL_BLANK):
            return Cell()
        if cell.ctype == xlrd.XL_CELL_DATE:
            try:
                return Cell(value=xlrd.xldate_as_datetime(cell.value, datemode), kind=CellKind.DATE)
            except (ValueError, OverflowError, xlrd.xldate.XLDateError) as exc:
                logger.warning("xls date conversion failed: %s | keeping serial number", exc)
                return Cell(value=cell.value, kind=CellKind.NUMBER)
        if cell.ctype == xlrd.XL_CELL_BOOLEAN:
            return Cell(value=bool(cell.value), kind=CellKind.BOOLEAN)
        if cell.ctype == xlrd.XL_CELL_ERROR:
            text = xlrd.error_text_from_code.get(cell.value, "#ERROR")
            return Cell(value=text, kind=CellKind.ERROR)
        kind, value = convert_value(cell.value)
        return Cell(value=value, kind=kind)

    # -- pandas fallback -----------------------------------------------

    def _read_pandas(self, file_path: str) -> list[Sheet]:
        frames: dict[str, pd.DataFrame] = pd.read_excel(file_path, sheet_name=None, header=None)
        sheets: list[Sheet] = []
        for sheet_name, df in frames.items():
            if not self._wanted(str(sheet_name)):
                continue
            rows = [
                (pos, [self._cell_from_pandas(v) for v in values])
                for pos, values in enumerate(df.itertuples(index=False, name=None))
            ]
            sheets.append(self._build_sheet(str(sheet_name), rows))
        return sheets

    @staticmethod
    def _cell_from_pandas(value: object) -> Cell:
        if value is None or (isinstance(value, float) and math.isnan(value)) or value is pd.NaT:
            return Cell()
        if isinstance(value, pd.Timestamp):
            value = value.to_pydatetime()
        elif hasattr(value, "item"):
            # numpy scalar
            value = value.item()
        kind, converted = convert_value(value)
        return Cell(value=converted, kind=kind)
