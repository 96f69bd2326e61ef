"""Error codes and structured error model for the diffkit-excel package.

``ErrorCode`` contains all error/warning codes relevant to loading and
comparing Excel workbooks.  ``DiffError`` extends ``BaseDiffError`` with a
``sheet_name`` field for location context.
"""

from __future__ import annotations

from enum import Enum

from diffkit_core.errors import BaseDiffError


class ErrorCode(str, Enum):
    """Error codes for Excel workbook comparison.

    Values equal their names so they are stable strings suitable for
    metrics and alerting.  ``E_`` prefix = fatal, ``W_`` prefix = warning.
    """

    # Security
    E_SECURITY_BAD_EXTENSION = "E_SECURITY_BAD_EXTENSION"
    E_SECURITY_TOO_LARGE = "E_SECURITY_TOO_LARGE"
    E_SECURITY_BAD_MAGIC = "E_SECURITY_BAD_MAGIC"

    # Load
    E_LOAD_NOT_FOUND = "E_LOAD_NOT_FOUND"
    E_PARSE_CORRUPT = "E_PARSE_CORRUPT"
    E_PARSE_PASSWORD = "E_PARSE_PASSWORD"
    E_PARSE_EMPTY = "E_PARSE_EMPTY"

    # Compare
    E_COMPARE_FAILED = "E_COMPARE_FAILED"
    E_COMPARE_TOO_LARGE = "E_COMPARE_TOO_LARGE"

    # Warnings (non-fatal)
    W_PARSER_FALLBACK = "W_PARSER_FALLBACK"
    W_SHEET_SKIPPED_CHART = "W_SHEET_SKIPPED_CHART"
    W_LARGE_FILE = "W_LARGE_FILE"


class DiffError(BaseDiffError):
    """Structured error with Excel-specific location context.

    Extends the core ``BaseDiffError`` with a ``sheet_name`` field
    indicating which sheet of the workbook caused the issue.
    """

    sheet_name: str | None = None
