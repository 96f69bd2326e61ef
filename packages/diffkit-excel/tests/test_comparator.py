"""Tests for diffkit_excel.comparator -- the compare() entry point."""

from __future__ import annotations

import logging
from datetime import datetime

import pytest

from diffkit_core.models import Cell, CellKind, Row, Sheet, Workbook

from diffkit_excel import comparator
from diffkit_excel.comparator import check_size_limits, compare
from diffkit_excel.config import DiffOptions
from diffkit_excel.errors import ErrorCode
from diffkit_excel.models import RowDiffType


@pytest.fixture()
def rich_workbook(make_workbook) -> Workbook:
    return make_workbook(
        {
            "Data": {
                0: ["ID", "Name", "When", "Flag"],
                1: [1, "Alice", datetime(2024, 1, 1), True],
                2: [2, " bob ", datetime(2024, 2, 1), False],
                7: [None, "", float("nan"), Cell(value="#REF!", kind=CellKind.ERROR)],
                8: [Cell(value=None, kind=CellKind.FORMULA, formula="=A2+A3")],
            },
            "Empty": [],
        },
        file_name="rich.xlsx",
    )


class TestIdentity:
    def test_self_compare_is_all_unchanged(self, rich_workbook):
        result = compare(rich_workbook, rich_workbook)
        assert result.success
        assert result.error is None
        diff = result.diff
        assert diff.summary.total_added == 0
        assert diff.summary.total_deleted == 0
        assert diff.summary.total_modified == 0
        assert not diff.has_changes
        for sheet_diff in diff.sheets:
            assert all(r.type == RowDiffType.UNCHANGED for r in sheet_diff.rows)

    def test_identity_under_strict_options(self, rich_workbook):
        strict = DiffOptions(
            ignore_empty_cells=False,
            ignore_whitespace=False,
            case_sensitive=True,
            compare_formulas=True,
            compare_cell_kinds=True,
        )
        assert not compare(rich_workbook, rich_workbook, strict).diff.has_changes


class TestSymmetry:
    def test_added_and_deleted_swap(self, make_workbook):
        a = make_workbook({"S": {0: [1], 1: [2]}, "OnlyA": [[1]]}, file_name="a.xlsx")
        b = make_workbook({"S": {0: [1], 5: [3]}, "OnlyB": [[1], [2]]}, file_name="b.xlsx")
        ab = compare(a, b).diff
        ba = compare(b, a).diff
        assert ab.summary.total_added == ba.summary.total_deleted
        assert ab.summary.total_deleted == ba.summary.total_added
        assert ab.summary.total_modified == ba.summary.total_modified
        assert ab.old_file_name == "a.xlsx" and ba.old_file_name == "b.xlsx"


class TestConservation:
    def test_row_counts(self, make_workbook):
        old = make_workbook({"S": {0: [1], 1: [2], 2: [3], 4: [5]}})
        new = make_workbook({"S": {0: [1], 1: [9], 3: [4], 4: [5], 6: [7]}})
        stats = compare(old, new).diff.sheet("S").stats
        assert stats.deleted + stats.modified + stats.unchanged == 4
        assert stats.added + stats.modified + stats.unchanged == 5


class TestOptions:
    def test_whitespace(self, make_workbook):
        old = make_workbook({"S": [["abc"]]})
        new = make_workbook({"S": [["  abc  "]]})
        assert not compare(old, new).diff.has_changes
        diff = compare(old, new, DiffOptions(ignore_whitespace=False)).diff
        assert diff.summary.total_modified == 1

    def test_case(self, make_workbook):
        old = make_workbook({"S": [["ABC"]]})
        new = make_workbook({"S": [["abc"]]})
        assert not compare(old, new).diff.has_changes
        diff = compare(old, new, DiffOptions(case_sensitive=True)).diff
        assert diff.sheet("S").rows[0].modified_column_indices == [0]

    def test_empty_cells(self, make_workbook):
        old = make_workbook({"S": [[1, 2]]})
        new = make_workbook({"S": [[1, 2, None]]})
        assert compare(old, new).diff.sheet("S").rows[0].type == RowDiffType.UNCHANGED
        row = compare(old, new, DiffOptions(ignore_empty_cells=False)).diff.sheet("S").rows[0]
        assert row.type == RowDiffType.MODIFIED
        assert row.modified_column_indices == [2]

    def test_formulas(self):
        def book(formula):
            return Workbook(
                file_name="f.xlsx",
                sheets=[
                    Sheet(
                        name="S",
                        rows=[Row(index=0, cells=[Cell(value=10, kind=CellKind.FORMULA, formula=formula)])],
                    )
                ],
            )

        old, new = book("=A1+A2"), book("=SUM(A1:A2)")
        assert compare(old, new).diff.summary.total_modified == 0
        diff = compare(old, new, DiffOptions(compare_formulas=True)).diff
        assert diff.summary.total_modified == 1
        assert diff.sheet("S").rows[0].modified_column_indices == [0]

    def test_kind_toggles(self, make_workbook):
        old = make_workbook({"S": [[Cell(value=3, kind=CellKind.FORMULA, formula="=1+2"), 0]]})
        new = make_workbook({"S": [[3, None]]})
        assert compare(old, new).diff.sheet("S").rows[0].modified_column_indices == [1]
        kinds = compare(old, new, DiffOptions(compare_cell_kinds=True)).diff
        assert kinds.sheet("S").rows[0].modified_column_indices == [0, 1]
        zero = compare(old, new, DiffOptions(treat_zero_as_empty=True)).diff
        assert zero.sheet("S").rows[0].type == RowDiffType.UNCHANGED


class TestScenarios:
    def test_pure_addition(self, make_workbook):
        old = make_workbook({"Sheet1": [["a", "b"]]})
        new = make_workbook({"Sheet1": [["a", "b"], ["c", "d"]], "Sheet2": [["x"]]})
        diff = compare(old, new).diff

        assert diff.sheet_names == ["Sheet1", "Sheet2"]
        s1 = diff.sheet("Sheet1").stats
        assert (s1.added, s1.deleted, s1.modified, s1.unchanged) == (1, 0, 0, 1)
        s2 = diff.sheet("Sheet2").stats
        assert (s2.added, s2.deleted, s2.modified, s2.unchanged) == (1, 0, 0, 0)
        assert diff.summary.total_added == 2
        assert diff.summary.total_deleted == 0
        assert diff.summary.total_modified == 0

    def test_empty_workbooks(self):
        diff = compare(Workbook(file_name="a"), Workbook(file_name="b")).diff
        assert diff.sheets == []
        assert not diff.has_changes


class TestFailure:
    def test_exception_becomes_compare_failed(self, monkeypatch, make_workbook, caplog):
        def boom(*args, **kwargs):
            raise RuntimeError("aligner exploded")

        monkeypatch.setattr(comparator, "align_sheets", boom)
        book = make_workbook({"S": [[1]]})
        with caplog.at_level(logging.ERROR, logger="diffkit_excel"):
            result = compare(book, book)

        assert not result.success
        assert result.diff is None
        assert result.error.code == ErrorCode.E_COMPARE_FAILED
        assert result.error.message == "aligner exploded"
        assert "E_COMPARE_FAILED" in caplog.text

    def test_message_falls_back_to_type_name(self, monkeypatch, make_workbook):
        def boom(*args, **kwargs):
            raise KeyError()

        monkeypatch.setattr(comparator, "align_sheets", boom)
        book = make_workbook({"S": [[1]]})
        assert compare(book, book).error.message == "KeyError"


class TestSizeLimits:
    def test_within_limits(self, make_workbook):
        book = make_workbook({"S": [[1, 2], [3, 4]]})
        assert check_size_limits(book, DiffOptions(max_rows=2, max_cols=2)) == []

    def test_no_limits(self, make_workbook):
        book = make_workbook({"S": [[1] * 50] * 50})
        assert check_size_limits(book, DiffOptions()) == []

    def test_exceeds(self, make_workbook):
        book = make_workbook({"Wide": [[1, 2, 3]], "Tall": [[1], [2], [3]]})
        errors = check_size_limits(book, DiffOptions(max_rows=2, max_cols=2))
        assert [(e.code, e.sheet_name) for e in errors] == [
            (ErrorCode.E_COMPARE_TOO_LARGE, "Wide"),
            (ErrorCode.E_COMPARE_TOO_LARGE, "Tall"),
        ]
        assert all(e.is_fatal for e in errors)

    def test_engine_ignores_limits(self, make_workbook):
        old = make_workbook({"S": [[1], [2], [3]]})
        new = make_workbook({"S": [[1], [2], [3], [4]]})
        result = compare(old, new, DiffOptions(max_rows=1, max_cols=1))
        assert result.success
        assert result.diff.summary.total_added == 1
