"""ExcelDiffer -- orchestrator and public API for the diffkit-excel pipeline.

Drives a file-to-file comparison:

1. Load both workbooks concurrently through a
   :class:`~diffkit_core.protocols.WorkbookLoader`.
2. Fail closed if either load failed -- no partial diff is ever produced.
3. Optionally enforce the advisory ``max_rows`` / ``max_cols`` limits.
4. Run :func:`~diffkit_excel.comparator.compare` and return its
   :class:`~diffkit_excel.models.CompareResult`, with load warnings attached.
"""

from __future__ import annotations

import asyncio
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor

from diffkit_core.errors import BaseDiffError
from diffkit_core.models import LoadResult, Workbook
from diffkit_core.protocols import WorkbookLoader

from diffkit_excel.comparator import check_size_limits, compare
from diffkit_excel.config import DiffOptions, ExcelDiffConfig
from diffkit_excel.errors import DiffError, ErrorCode
from diffkit_excel.loader import ExcelWorkbookLoader
from diffkit_excel.models import CompareResult

logger = logging.getLogger("diffkit_excel")


def _as_diff_error(error: BaseDiffError) -> DiffError:
    if isinstance(error, DiffError):
        return error
    return DiffError(**error.model_dump())


class ExcelDiffer:
    """Orchestrator that loads two workbooks and compares them.

    Parameters
    ----------
    loader:
        Workbook loader.  Defaults to :class:`ExcelWorkbookLoader` built
        from *config*.
    config:
        Pipeline configuration.  Uses defaults when *None*.
    """

    def __init__(
        self,
        loader: WorkbookLoader | None = None,
        config: ExcelDiffConfig | None = None,
    ) -> None:
        self._config = config or ExcelDiffConfig()
        self._loader = loader or ExcelWorkbookLoader(self._config)

    @property
    def config(self) -> ExcelDiffConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def load(self, file_path: str) -> LoadResult:
        """Load a single workbook with the configured loader."""
        return self._loader.load(file_path)

    def compare_workbooks(
        self,
        old: Workbook,
        new: Workbook,
        options: DiffOptions | None = None,
    ) -> CompareResult:
        """Compare two already-loaded workbooks, enforcing limits if configured."""
        options = options or self._config.options
        if self._config.enforce_size_limits:
            limit_errors = check_size_limits(old, options) + check_size_limits(new, options)
            if limit_errors:
                first = limit_errors[0]
                logger.error(
                    "diffkit_excel | file=%s | code=%s | detail=%s",
                    new.file_name,
                    first.code,
                    first.message,
                )
                return CompareResult(success=False, error=first)
        return compare(old, new, options)

    def compare_files(
        self,
        old_path: str,
        new_path: str,
        options: DiffOptions | None = None,
    ) -> CompareResult:
        """Load *old_path* and *new_path* concurrently, then compare them.

        Returns
        -------
        CompareResult
            On any load failure, ``success`` is False and ``error`` holds
            the first fatal load error (old file first).
        """
        start = time.monotonic()

        with ThreadPoolExecutor(
            max_workers=self._config.max_workers,
            thread_name_prefix="diffkit-load",
        ) as pool:
            old_future = pool.submit(self._loader.load, old_path)
            new_future = pool.submit(self._loader.load, new_path)
            old_result = old_future.result()
            new_result = new_future.result()

        warnings = [
            _as_diff_error(e)
            for e in (*old_result.warnings, *new_result.warnings)
        ]

        for result in (old_result, new_result):
            if not result.ok:
                error = (
                    _as_diff_error(result.fatal_errors[0])
                    if result.fatal_errors
                    else DiffError(
                        code=ErrorCode.E_PARSE_CORRUPT,
                        message=f"Loader returned no workbook for {result.file_path}",
                        stage="load",
                    )
                )
                logger.error(
                    "Comparison of %s -> %s aborted: %s",
                    os.path.basename(old_path),
                    os.path.basename(new_path),
                    error.message,
                )
                return CompareResult(
                    success=False,
                    error=error,
                    warnings=warnings,
                    processing_time_seconds=time.monotonic() - start,
                )

        assert old_result.workbook is not None and new_result.workbook is not None
        result = self.compare_workbooks(old_result.workbook, new_result.workbook, options)
        return result.model_copy(
            update={
                "warnings": warnings + result.warnings,
                "processing_time_seconds": time.monotonic() - start,
            }
        )

    async def acompare_files(
        self,
        old_path: str,
        new_path: str,
        options: DiffOptions | None = None,
    ) -> CompareResult:
        """Async wrapper around :meth:`compare_files`.

        Runs the comparison in a worker thread via ``asyncio.to_thread()``
        so an event loop (e.g. a viewer) stays responsive.  Abandoning the
        awaiting task simply discards the result.
        """
        return await asyncio.to_thread(self.compare_files, old_path, new_path, options)

    def compare_batch(
        self,
        pairs: list[tuple[str, str]],
        options: DiffOptions | None = None,
    ) -> list[CompareResult]:
        """Compare several ``(old_path, new_path)`` pairs sequentially.

        Returns one result per pair, in the same order.
        """
        results: list[CompareResult] = []
        for old_path, new_path in pairs:
            results.append(self.compare_files(old_path, new_path, options))
        return results
