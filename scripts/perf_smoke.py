"""Conversion performance smoke test.

Builds a synthetic document of repeated sections (headings, annotated
paragraphs, list runs, a table, nested toggles, code) and a matching set of
records, then times block conversion and property formatting at
configurable size checkpoints. Answers the question: "does conversion stay
linear as documents grow?"
"""

from __future__ import annotations

import argparse
import json
import logging
import statistics
import sys
import time
from pathlib import Path
from typing import Any

CURRENT_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = CURRENT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from block_markup import ConversionContext, MarkupRenderer, PropertyFormatter, build_columns, format_row


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Conversion performance smoke test")
    parser.add_argument(
        "--steps",
        type=str,
        default="1,10,100,500",
        help="Comma-separated section counts to measure (e.g. 1,10,100,500).",
    )
    parser.add_argument(
        "--repeats",
        type=int,
        default=5,
        help="Conversions per checkpoint used for the averages (default 5).",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=12,
        help="Nesting limit passed to the conversion context.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional JSON output path (defaults to stdout).",
    )
    parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress progress logs; only emit JSON telemetry.",
    )
    return parser.parse_args()


def average(values: list[float]) -> float:
    return statistics.fmean(values) if values else 0.0


def _run(content: str, **annotations: Any) -> dict[str, Any]:
    return {
        "type": "text",
        "text": {"content": content, "link": None},
        "annotations": {"color": "default", **annotations},
        "plain_text": content,
    }


def _block(block_type: str, block_id: str, children: list[dict[str, Any]] | None = None, **payload: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "object": "block",
        "id": block_id,
        "type": block_type,
        "has_children": bool(children),
        block_type: payload,
    }
    if children:
        data["children"] = children
    return data


def build_section(index: int) -> list[dict[str, Any]]:
    prefix = f"s{index}"
    rows = [
        _block("table_row", f"{prefix}-row{row}", cells=[[_run(f"r{row}c{col}")] for col in range(3)])
        for row in range(4)
    ]
    nested = _block(
        "toggle",
        f"{prefix}-toggle",
        rich_text=[_run("Details")],
        children=[
            _block("paragraph", f"{prefix}-nested-p", rich_text=[_run("Nested <detail>", italic=True)]),
            _block("bulleted_list_item", f"{prefix}-nested-li", rich_text=[_run("Nested item")]),
        ],
    )
    return [
        _block("heading_2", f"{prefix}-h", rich_text=[_run(f"Section {index}")]),
        _block(
            "paragraph",
            f"{prefix}-p",
            rich_text=[_run("Plain text, "), _run("bold", bold=True), _run(" and "), _run("code", code=True)],
        ),
        *[
            _block("numbered_list_item", f"{prefix}-li{item}", rich_text=[_run(f"Step {item}")])
            for item in range(5)
        ],
        _block("table", f"{prefix}-table", table_width=3, has_column_header=True, children=rows),
        nested,
        _block("code", f"{prefix}-code", language="python", rich_text=[_run("print('hello')")]),
        _block("unknown_widget", f"{prefix}-widget"),
    ]


def build_records(count: int) -> list[dict[str, Any]]:
    return [
        {
            "Name": {"type": "title", "title": [_run(f"Record {index}")]},
            "Status": {"type": "status", "status": {"name": "Done" if index % 2 else "Open", "color": "green"}},
            "Amount": index * 1234.5,
            "Due": {"start": "2025-11-15", "end": "2025-11-20"},
            "Website": "https://example.com/records",
            "Done": bool(index % 3),
        }
        for index in range(count)
    ]


def measure(
    renderer: MarkupRenderer,
    context: ConversionContext,
    formatter: PropertyFormatter,
    blocks: list[dict[str, Any]],
    records: list[dict[str, Any]],
    repeats: int,
) -> dict[str, float]:
    convert_times: list[float] = []
    format_times: list[float] = []
    markup_lengths: list[int] = []
    unsupported_counts: list[int] = []

    for _ in range(repeats):
        convert_start = time.perf_counter()
        result = renderer.convert_blocks(blocks, context)
        convert_times.append((time.perf_counter() - convert_start) * 1000)
        markup_lengths.append(len(result.markup))
        unsupported_counts.append(result.diagnostics.unsupported_count)

        format_start = time.perf_counter()
        for record in records:
            format_row(record, formatter=formatter)
        if records:
            build_columns(records[0])
        format_times.append((time.perf_counter() - format_start) * 1000)

    return {
        "avg_convert_ms": average(convert_times),
        "max_convert_ms": max(convert_times) if convert_times else 0.0,
        "avg_format_ms": average(format_times),
        "avg_markup_length": average(markup_lengths),
        "avg_unsupported_count": average(unsupported_counts),
    }


def main() -> None:
    args = parse_args()

    logging.basicConfig(
        level=logging.INFO if not args.quiet else logging.WARNING,
        format="[%(levelname)s] %(message)s",
    )
    logger = logging.getLogger("perf_smoke")
    # One warning per unknown block would drown the progress output.
    logging.getLogger("block_markup").setLevel(logging.ERROR)

    steps = sorted({int(chunk.strip()) for chunk in args.steps.split(",") if chunk.strip()})
    if not steps:
        raise ValueError("No valid checkpoints provided via --steps")
    if args.repeats < 1:
        raise ValueError("--repeats must be at least 1")

    renderer = MarkupRenderer()
    context = ConversionContext(max_depth=args.max_depth)
    formatter = PropertyFormatter()

    checkpoints: list[dict[str, Any]] = []
    for sections in steps:
        blocks = [block for index in range(sections) for block in build_section(index)]
        records = build_records(sections)
        metrics = measure(renderer, context, formatter, blocks, records, args.repeats)
        if not args.quiet:
            logger.info(
                "Sections %d | blocks=%d convert=%.3fms format=%.3fms",
                sections,
                len(blocks),
                metrics["avg_convert_ms"],
                metrics["avg_format_ms"],
            )
        checkpoints.append(
            {
                "sections": sections,
                "top_level_blocks": len(blocks),
                "records": len(records),
                **metrics,
            }
        )

    payload = {
        "checkpoints": checkpoints,
        "steps": steps,
        "repeats": args.repeats,
        "max_depth": args.max_depth,
    }

    output = json.dumps(payload, indent=2)
    if args.output:
        args.output.write_text(output)
    else:
        print(output)


if __name__ == "__main__":
    main()
