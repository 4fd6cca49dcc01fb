"""
Table builder: CLI entry point.

Usage:
    python build_table.py <input.json|input.xlsx> [--output <snapshot.json>]
        [--sheet <sheet_name>] [--theme box|zebra|booktabs]
        [--merge-v <column> ...] [--footer <line> ...] [--no-autofit]

Loads column data (a JSON object of columns, a JSON list of records, or a
worksheet), builds a table, applies an optional theme, vertical merges and
footer lines, computes the layout, and writes the read-only snapshot as
JSON for a rendering backend.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

import dotenv

from engine import content, layout, merging, styling
from engine.errors import TableError
from engine.model import Table
from sources.columns import columns_from_json
from sources.worksheet import load_workbook_table

dotenv.load_dotenv()

logger = logging.getLogger(__name__)

_WORKBOOK_SUFFIXES = (".xlsx", ".xlsm")


# -------------------------------------------------------------------
# Pipeline
# -------------------------------------------------------------------


def load_table(input_path: str, sheet_name: Optional[str] = None) -> Table:
    """Build a Table from a workbook or a JSON file, chosen by extension."""
    if Path(input_path).suffix.lower() in _WORKBOOK_SUFFIXES:
        return load_workbook_table(input_path, sheet_name=sheet_name)
    return Table.from_columns(columns_from_json(input_path))


def build_table(
    input_path: str,
    sheet_name: Optional[str] = None,
    theme: Optional[str] = None,
    merge_columns: Optional[List[str]] = None,
    footer_lines: Optional[List[str]] = None,
    autofit: bool = True,
) -> Table:
    table = load_table(input_path, sheet_name=sheet_name)
    logger.info("Loaded %r", table)

    if theme:
        styling.THEMES[theme](table)
        logger.info("Applied theme: %s", theme)

    if merge_columns:
        merging.merge_v(table, j=merge_columns)
        logger.info("  -> %d merged region(s)", len(table.regions("body")))

    if footer_lines:
        content.add_footer_lines(table, footer_lines)

    if autofit:
        layout.apply_autofit(table)
    return table


# -------------------------------------------------------------------
# CLI
# -------------------------------------------------------------------


def main(argv: Optional[List[str]] = None) -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Build a styled table and write its snapshot as JSON.",
    )
    parser.add_argument(
        "input_file",
        help="Path to a .json column/record file or an .xlsx workbook",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=None,
        help="Output JSON file path (default: <input_name>_table.json)",
    )
    parser.add_argument(
        "-s",
        "--sheet",
        default=None,
        help="Worksheet to read from a workbook (default: the active sheet)",
    )
    parser.add_argument(
        "--theme",
        choices=sorted(styling.THEMES),
        default=None,
        help="Theme applied after loading",
    )
    parser.add_argument(
        "--merge-v",
        nargs="+",
        default=None,
        metavar="COLUMN",
        help="Column keys whose repeated body values are merged vertically",
    )
    parser.add_argument(
        "--footer",
        nargs="+",
        default=None,
        metavar="LINE",
        help="Footer lines spanning the whole table",
    )
    parser.add_argument(
        "--no-autofit",
        action="store_true",
        help="Skip computing column widths and row heights",
    )
    args = parser.parse_args(argv)

    input_path = args.input_file
    if not os.path.isfile(input_path):
        logger.error("File not found: %s", input_path)
        sys.exit(1)

    output_path = args.output or f"{Path(input_path).stem}_table.json"

    try:
        table = build_table(
            input_path,
            sheet_name=args.sheet,
            theme=args.theme,
            merge_columns=args.merge_v,
            footer_lines=args.footer,
            autofit=not args.no_autofit,
        )
    except (TableError, ValueError) as exc:
        logger.error("Could not build table from %s: %s", input_path, exc)
        sys.exit(1)

    json_str = table.snapshot().model_dump_json(indent=2)
    with open(output_path, "w", encoding="utf-8") as f:
        f.write(json_str)

    logger.info("Output written to %s", output_path)


if __name__ == "__main__":
    main()
