"""Convert a JSON export of blocks (and optional record properties) to markup.

Accepted inputs:

* a list of block payloads,
* ``{"results": [...]}`` as returned by the children endpoint,
* ``{"blocks": [...], "properties": {...}, "schema": {...}}`` to also format
  one record's properties and emit its grid columns.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

CURRENT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = CURRENT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from block_markup import (
    ConversionContext,
    PropertyFormatter,
    build_columns,
    convert_blocks,
    format_row,
    load_settings,
)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Convert exported blocks to block-comment markup.")
    parser.add_argument("path", type=Path, help="Path to a JSON export.")
    parser.add_argument(
        "--env-file",
        type=Path,
        default=None,
        help="Optional .env file with BLOCK_MARKUP_* settings.",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=None,
        help="Override the nesting limit (defaults to BLOCK_MARKUP_MAX_DEPTH or 12).",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path for the markup (defaults to stdout).",
    )
    parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Print the diagnostics summary as JSON on stderr.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args()


def load_export(path: Path) -> dict[str, Any]:
    data = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(data, list):
        return {"blocks": data}
    if not isinstance(data, dict):
        raise SystemExit(f"Unsupported export shape in {path}: expected a list or an object.")
    if "blocks" not in data and "results" in data:
        return {**data, "blocks": data["results"]}
    return data


def record_payload(export: dict[str, Any], formatter: PropertyFormatter) -> dict[str, Any] | None:
    properties = export.get("properties")
    if not isinstance(properties, dict):
        return None
    schema = export.get("schema") if isinstance(export.get("schema"), dict) else None
    cells = format_row(properties, schema, formatter=formatter)
    return {
        "columns": [column.to_grid() for column in build_columns(properties, schema)],
        "cells": {name: {"text": cell.text, "html": cell.html, "inferred": cell.inferred} for name, cell in cells.items()},
    }


def main() -> None:
    args = parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )
    logger = logging.getLogger("convert_export")

    overrides: dict[str, Any] = {}
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    settings = load_settings(args.env_file, **overrides)
    context = ConversionContext.from_settings(settings)
    formatter = PropertyFormatter.from_settings(settings)

    export = load_export(args.path)
    result = convert_blocks(export.get("blocks") or [], context)
    logger.info(
        "Converted %d block(s): %d unsupported, %d error(s), %d truncated",
        sum(result.diagnostics.block_type_counts.values()),
        result.diagnostics.unsupported_count,
        result.diagnostics.error_count,
        result.diagnostics.truncated_count,
    )

    if args.output:
        args.output.write_text(result.markup + "\n", encoding="utf-8")
    else:
        print(result.markup)

    record = record_payload(export, formatter)
    if record is not None:
        print(json.dumps(record, indent=2, ensure_ascii=False))

    if args.diagnostics:
        print(json.dumps(result.diagnostics.as_dict(), indent=2), file=sys.stderr)


if __name__ == "__main__":
    main()
