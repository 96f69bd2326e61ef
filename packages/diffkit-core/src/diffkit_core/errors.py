"""Shared error codes and base error model for the diffkit framework.

``CoreErrorCode`` contains the error/warning codes common to every diffkit
package.  ``BaseDiffError`` is a Pydantic model that each package extends
with its own location field (e.g. ``sheet_name`` for Excel).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class CoreErrorCode(str, Enum):
    """Error codes shared across all diffkit packages.

    Each package maintains its own *complete* ``ErrorCode`` enum that includes
    both the shared codes here and package-specific codes.  Values equal their
    names so they are stable strings suitable for metrics and alerting.
    """

    # Load errors
    E_LOAD_NOT_FOUND = "E_LOAD_NOT_FOUND"
    E_PARSE_CORRUPT = "E_PARSE_CORRUPT"
    E_PARSE_PASSWORD = "E_PARSE_PASSWORD"
    E_PARSE_EMPTY = "E_PARSE_EMPTY"

    # Compare errors
    E_COMPARE_FAILED = "E_COMPARE_FAILED"
    E_COMPARE_TOO_LARGE = "E_COMPARE_TOO_LARGE"

    # Warnings (non-fatal)
    W_PARSER_FALLBACK = "W_PARSER_FALLBACK"


class BaseDiffError(BaseModel):
    """Base structured error with code, message, and context.

    The ``code`` field is typed as ``str`` so it accepts any package-specific
    ``ErrorCode`` enum member.
    """

    code: str
    message: str
    stage: str | None = None
    recoverable: bool = False

    @property
    def is_fatal(self) -> bool:
        """True for ``E_*`` codes, False for ``W_*`` warnings."""
        return self.code.startswith("E_")
