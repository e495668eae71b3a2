"""Small markup helpers shared by the converters."""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from typing import Any

from block_markup.models.blocks import Block
from block_markup.models.rich_text import text_runs
from block_markup.renderers.base import ConversionContext
from block_markup.renderers.rich_text import css_class

# Keys in unrecognised payloads that may still carry readable text.
RECOVERABLE_TEXT_FIELDS = ("rich_text", "title", "caption", "text")


def block_attributes(attrs: Mapping[str, Any] | None) -> str:
    """Serialise block attributes so they cannot terminate the comment."""
    if not attrs:
        return ""
    encoded = json.dumps(dict(attrs), separators=(",", ":"), ensure_ascii=False)
    return (
        encoded.replace("--", "\\u002d\\u002d")
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def wrap_block(name: str, inner: str, attrs: Mapping[str, Any] | None = None) -> str:
    serialized = block_attributes(attrs)
    opener = f"<!-- wp:{name} {serialized} -->" if serialized else f"<!-- wp:{name} -->"
    return f"{opener}\n{inner}\n<!-- /wp:{name} -->"


def class_attr(*classes: str) -> str:
    names = " ".join(name for name in classes if name)
    return f' class="{names}"' if names else ""


def color_class(color: str | None, prefix: str = "notion-color") -> str:
    if not color or color == "default":
        return ""
    cleaned = css_class(color)
    return f"{prefix}-{cleaned}" if cleaned else ""


def join_sections(sections: Sequence[str]) -> str:
    cleaned = [section.strip() for section in sections if section and section.strip()]
    return "\n\n".join(cleaned)


def indented_children(block: Block, context: ConversionContext) -> str:
    children = context.render_children(block)
    if not children:
        return ""
    return wrap_block(
        "group",
        f'<div class="wp-block-group notion-indent">\n{children}\n</div>',
        {"className": "notion-indent"},
    )


def recoverable_text(block: Block) -> str:
    for name in RECOVERABLE_TEXT_FIELDS:
        value = getattr(block, name, None)
        if value is None:
            value = block.extra_field(name)
        if isinstance(value, str):
            text = value
        else:
            try:
                text = "".join(run.content for run in text_runs(value))
            except (TypeError, ValueError):
                continue
        if text.strip():
            return text.strip()
    url = getattr(block, "url", None) or block.extra_field("url")
    return url.strip() if isinstance(url, str) else ""


def caption_html(text: str, css: str = "wp-element-caption") -> str:
    return f'<figcaption class="{css}">{text}</figcaption>' if text else ""


__all__ = [
    "RECOVERABLE_TEXT_FIELDS",
    "block_attributes",
    "caption_html",
    "class_attr",
    "color_class",
    "indented_children",
    "join_sections",
    "recoverable_text",
    "wrap_block",
]
