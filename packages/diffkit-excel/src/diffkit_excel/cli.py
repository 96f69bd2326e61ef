"""Command-line entry point: ``diffkit-excel OLD NEW``.

Exit codes: ``0`` no differences, ``1`` differences found, ``2`` error.
"""

from __future__ import annotations

import argparse
import logging
import sys

from diffkit_excel.config import ExcelDiffConfig
from diffkit_excel.differ import ExcelDiffer
from diffkit_excel.report import render_summary
from diffkit_excel.serializer import save_diff

EXIT_SAME = 0
EXIT_DIFFERENT = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="diffkit-excel",
        description="Compare two Excel workbooks row by row and report the differences.",
    )
    parser.add_argument("old", help="Baseline workbook (.xlsx, .xlsm or .xls)")
    parser.add_argument("new", help="Workbook to compare against the baseline")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML or JSON config file; command-line flags override it",
    )
    parser.add_argument(
        "--json",
        type=str,
        default=None,
        metavar="OUT",
        help="Also write the full diff as JSON to OUT",
    )
    parser.add_argument(
        "--case-sensitive",
        action="store_true",
        help="Treat 'Foo' and 'foo' as different",
    )
    parser.add_argument(
        "--keep-whitespace",
        action="store_true",
        help="Do not strip leading/trailing whitespace before comparing",
    )
    parser.add_argument(
        "--keep-empty-cells",
        action="store_true",
        help="A missing cell and an empty cell count as different",
    )
    parser.add_argument(
        "--compare-formulas",
        action="store_true",
        help="Cells with different formula text count as changed",
    )
    parser.add_argument(
        "--compare-kinds",
        action="store_true",
        help="Cells with different kinds count as changed even if values match",
    )
    parser.add_argument(
        "--zero-is-empty",
        action="store_true",
        help="Treat numeric zero as an empty cell",
    )
    parser.add_argument("--max-rows", type=int, default=None, help="Advisory row limit per sheet")
    parser.add_argument("--max-cols", type=int, default=None, help="Advisory column limit per sheet")
    parser.add_argument(
        "--enforce-limits",
        action="store_true",
        help="Refuse to compare when a sheet exceeds --max-rows/--max-cols",
    )
    parser.add_argument(
        "--show-rows",
        action="store_true",
        help="List every changed row in the report",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v INFO, -vv DEBUG)",
    )
    return parser


def _build_config(args: argparse.Namespace) -> ExcelDiffConfig:
    config = ExcelDiffConfig.from_file(args.config) if args.config else ExcelDiffConfig()

    overrides: dict = {}
    if args.case_sensitive:
        overrides["case_sensitive"] = True
    if args.keep_whitespace:
        overrides["ignore_whitespace"] = False
    if args.keep_empty_cells:
        overrides["ignore_empty_cells"] = False
    if args.compare_formulas:
        overrides["compare_formulas"] = True
    if args.compare_kinds:
        overrides["compare_cell_kinds"] = True
    if args.zero_is_empty:
        overrides["treat_zero_as_empty"] = True
    if args.max_rows is not None:
        overrides["max_rows"] = args.max_rows
    if args.max_cols is not None:
        overrides["max_cols"] = args.max_cols

    # Re-validate so bad values from the command line are rejected.
    options = type(config.options).model_validate(
        {**config.options.model_dump(), **overrides}
    )
    update: dict = {"options": options}
    if args.enforce_limits:
        update["enforce_size_limits"] = True
    return config.model_copy(update=update)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    try:
        config = _build_config(args)
    except (OSError, ValueError) as exc:
        print(f"ERROR: invalid configuration: {exc}", file=sys.stderr)
        return EXIT_ERROR

    result = ExcelDiffer(config=config).compare_files(args.old, args.new)

    for warning in result.warnings:
        print(f"WARNING [{warning.code}]: {warning.message}", file=sys.stderr)

    if not result.success or result.diff is None:
        if result.error is not None:
            print(f"ERROR [{result.error.code}]: {result.error.message}", file=sys.stderr)
        else:
            print("ERROR: comparison failed", file=sys.stderr)
        return EXIT_ERROR

    print(render_summary(result.diff, show_rows=args.show_rows))

    if args.json:
        try:
            save_diff(result.diff, args.json)
        except OSError as exc:
            print(f"ERROR: could not write {args.json}: {exc}", file=sys.stderr)
            return EXIT_ERROR

    return EXIT_DIFFERENT if result.diff.has_changes else EXIT_SAME


if __name__ == "__main__":
    sys.exit(main())
