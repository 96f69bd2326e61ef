"""Shared test fixtures for diffkit-core tests."""

from __future__ import annotations

from datetime import datetime

import pytest

from diffkit_core.models import Cell, CellKind, Row, Sheet, Workbook


@pytest.fixture()
def sample_workbook() -> Workbook:
    """Small two-sheet workbook covering every non-empty cell kind."""
    return Workbook(
        file_name="sample.xlsx",
        sheets=[
            Sheet(
                name="Data",
                rows=[
                    Row(
                        index=0,
                        cells=[
                            Cell(value="ID", kind=CellKind.STRING),
                            Cell(value="When", kind=CellKind.STRING),
                            Cell(value="Total", kind=CellKind.STRING),
                        ],
                    ),
                    Row(
                        index=1,
                        cells=[
                            Cell(value=1, kind=CellKind.NUMBER),
                            Cell(value=datetime(2024, 3, 1, 9, 30), kind=CellKind.DATE),
                            Cell(value=3, kind=CellKind.FORMULA, formula="=1+2"),
                        ],
                    ),
                    Row(
                        index=3,
                        cells=[
                            Cell(value=True, kind=CellKind.BOOLEAN),
                            Cell(value="#DIV/0!", kind=CellKind.ERROR),
                            Cell(),
                        ],
                    ),
                ],
            ),
            Sheet(name="Empty"),
        ],
    )
