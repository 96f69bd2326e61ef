"""Pre-flight security scanner for Excel workbooks.

Rejects unsupported, missing, empty, oversized or mislabelled files before
any parser touches them.  Checks file extension, existence, emptiness, size
and magic bytes.
"""

from __future__ import annotations

import logging
import os

from diffkit_excel.config import ExcelDiffConfig
from diffkit_excel.errors import DiffError, ErrorCode

logger = logging.getLogger("diffkit_excel")

_LARGE_FILE_THRESHOLD_MB = 10

# OOXML workbooks are ZIP archives; legacy .xls files are OLE2 compound documents.
_ZIP_MAGIC = b"PK\x03\x04"
_OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"

_MAGIC_BYTES: dict[str, bytes] = {
    ".xlsx": _ZIP_MAGIC,
    ".xlsm": _ZIP_MAGIC,
    ".xls": _OLE2_MAGIC,
}

SUPPORTED_EXTENSIONS: tuple[str, ...] = tuple(_MAGIC_BYTES)


def file_extension(file_path: str) -> str:
    """Lower-cased extension of *file_path*, including the dot."""
    return os.path.splitext(file_path)[1].lower()


class ExcelSecurityScanner:
    """Run pre-flight security checks on an Excel file.

    Returns a list of errors/warnings.  Fatal errors (``E_*`` codes) mean
    the file should not be loaded.
    """

    def __init__(self, config: ExcelDiffConfig) -> None:
        self.config = config

    def scan(self, file_path: str) -> list[DiffError]:
        """Run all pre-flight checks.

        Returns:
            List of errors/warnings.  Fatal errors have codes starting
            with ``E_``.
        """
        errors: list[DiffError] = []
        ext = file_extension(file_path)

        # --- 1. Extension check ---
        if ext not in _MAGIC_BYTES:
            errors.append(
                DiffError(
                    code=ErrorCode.E_SECURITY_BAD_EXTENSION,
                    message=(
                        f"Unsupported file extension '{ext}': {file_path}. "
                        f"Expected one of {', '.join(SUPPORTED_EXTENSIONS)}."
                    ),
                    stage="security",
                )
            )
            return errors

        # --- 2. File existence ---
        if not os.path.isfile(file_path):
            errors.append(
                DiffError(
                    code=ErrorCode.E_LOAD_NOT_FOUND,
                    message=f"File not found: {file_path}",
                    stage="security",
                )
            )
            return errors

        # --- 3. Empty file ---
        file_size = os.path.getsize(file_path)
        if file_size == 0:
            errors.append(
                DiffError(
                    code=ErrorCode.E_PARSE_EMPTY,
                    message=f"File is empty (0 bytes): {file_path}",
                    stage="security",
                )
            )
            return errors

        # --- 4. File size limit ---
        max_bytes = self.config.max_file_size_mb * 1024 * 1024
        if file_size > max_bytes:
            errors.append(
                DiffError(
                    code=ErrorCode.E_SECURITY_TOO_LARGE,
                    message=(
                        f"File size {file_size} bytes exceeds limit of "
                        f"{max_bytes} bytes ({self.config.max_file_size_mb} MB)"
                    ),
                    stage="security",
                )
            )
            return errors

        # --- 5. Large file warning ---
        large_threshold = _LARGE_FILE_THRESHOLD_MB * 1024 * 1024
        if file_size > large_threshold:
            errors.append(
                DiffError(
                    code=ErrorCode.W_LARGE_FILE,
                    message=(
                        f"File is {file_size / (1024 * 1024):.1f} MB "
                        f"(> {_LARGE_FILE_THRESHOLD_MB} MB)"
                    ),
                    stage="security",
                    recoverable=True,
                )
            )

        # --- 6. Magic bytes ---
        header = self._read_header(file_path)
        if ext != ".xls" and header == _OLE2_MAGIC:
            # Encrypted OOXML workbooks are wrapped in an OLE2 container.
            errors.append(
                DiffError(
                    code=ErrorCode.E_PARSE_PASSWORD,
                    message=f"Workbook appears to be password-protected: {file_path}",
                    stage="security",
                )
            )
        elif header[: len(_MAGIC_BYTES[ext])] != _MAGIC_BYTES[ext]:
            errors.append(
                DiffError(
                    code=ErrorCode.E_SECURITY_BAD_MAGIC,
                    message=(
                        f"File content does not match its '{ext}' extension: "
                        f"{file_path}"
                    ),
                    stage="security",
                )
            )

        if errors:
            logger.debug(
                "Security scan of %s: %s",
                os.path.basename(file_path),
                ", ".join(str(e.code) for e in errors),
            )
        return errors

    @staticmethod
    def _read_header(file_path: str) -> bytes:
        """Read enough leading bytes to identify ZIP and OLE2 signatures."""
        try:
            with open(file_path, "rb") as fh:
                return fh.read(len(_OLE2_MAGIC))
        except OSError:
            return b""
