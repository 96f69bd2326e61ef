"""JSON serialization for diff results.

Thin wrappers over pydantic's ``model_dump_json`` / ``model_validate_json``.
Datetimes and non-finite floats survive the round trip because
:class:`~diffkit_core.models.Cell` writes them as tagged JSON objects and
restores them on validation, independent of the cell kind.
"""

from __future__ import annotations

import pathlib

from diffkit_excel.models import CompareResult, WorkbookDiff


def to_json(diff: WorkbookDiff, indent: int | None = 2) -> str:
    """Serialize a :class:`WorkbookDiff` to a JSON string."""
    return diff.model_dump_json(indent=indent)


def from_json(data: str | bytes) -> WorkbookDiff:
    """Parse a JSON string produced by :func:`to_json`."""
    return WorkbookDiff.model_validate_json(data)


def result_to_json(result: CompareResult, indent: int | None = 2) -> str:
    return result.model_dump_json(indent=indent)


def result_from_json(data: str | bytes) -> CompareResult:
    return CompareResult.model_validate_json(data)


def save_diff(diff: WorkbookDiff, path: str) -> None:
    """Write *diff* as UTF-8 JSON to *path*, creating parent directories."""
    out = pathlib.Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(to_json(diff), encoding="utf-8")


def load_diff(path: str) -> WorkbookDiff:
    """Read a diff previously written by :func:`save_diff`.

    Raises:
        FileNotFoundError: If *path* does not exist.
    """
    return from_json(pathlib.Path(path).read_text(encoding="utf-8"))
