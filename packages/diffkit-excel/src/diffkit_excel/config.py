"""Configuration models for the diffkit-excel pipeline.

``DiffOptions`` holds the equivalence rules the engine applies to every
cell pair.  ``ExcelDiffConfig`` wraps them together with loader, logging and
limit settings, and supports loading overrides from YAML or JSON files via
the ``from_file()`` classmethod.
"""

from __future__ import annotations

import json
import pathlib

from pydantic import BaseModel, ConfigDict, Field


class DiffOptions(BaseModel):
    """Equivalence rules for a single comparison.

    ``compare_cell_kinds`` makes a kind mismatch alone (e.g. a number ``3``
    against a formula whose cached value is ``3``) count as a change.
    ``treat_zero_as_empty`` widens the empty-cell rule to numeric zero, so
    that ``0`` and a blank cell can be equivalent.  Both are off by default.

    ``max_rows`` / ``max_cols`` are advisory caps.  The engine never reads
    them; :func:`~diffkit_excel.comparator.check_size_limits` lets callers
    fail fast when a workbook exceeds them.
    """

    model_config = ConfigDict(frozen=True)

    ignore_empty_cells: bool = True
    ignore_whitespace: bool = True
    case_sensitive: bool = False
    compare_formulas: bool = False
    compare_cell_kinds: bool = False
    treat_zero_as_empty: bool = False
    max_rows: int | None = Field(default=None, ge=0)
    max_cols: int | None = Field(default=None, ge=0)


class ExcelDiffConfig(BaseModel):
    """All tunable parameters with sensible defaults.

    Override individual values via constructor kwargs or load a complete
    config from a file with ``ExcelDiffConfig.from_file(path)``.
    """

    # --- Equivalence rules ---
    options: DiffOptions = DiffOptions()

    # --- Security / Resource Limits ---
    max_file_size_mb: int = 100
    enforce_size_limits: bool = False

    # --- Loader ---
    include_empty_rows: bool = False
    sheet_names: list[str] | None = None
    read_formulas: bool = True

    # --- Concurrency ---
    max_workers: int = Field(default=2, ge=1)

    # --- Logging / PII safety ---
    log_sample_data: bool = False

    @classmethod
    def from_file(cls, path: str) -> ExcelDiffConfig:
        """Load configuration from a YAML or JSON file.

        File format is detected by extension: ``.yaml`` / ``.yml`` for YAML,
        ``.json`` for JSON.  Any keys present in the file override the
        corresponding defaults; keys not present retain their defaults.
        Equivalence rules live under an ``options`` mapping.

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the file extension is not recognized.
        """
        file_path = pathlib.Path(path)
        if not file_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        suffix = file_path.suffix.lower()

        if suffix in (".yaml", ".yml"):
            import yaml

            with open(file_path) as fh:
                data = yaml.safe_load(fh)
        elif suffix == ".json":
            with open(file_path) as fh:
                data = json.load(fh)
        else:
            raise ValueError(
                f"Unsupported config file extension '{suffix}'. "
                "Use .yaml, .yml, or .json."
            )

        if data is None:
            data = {}

        return cls(**data)
