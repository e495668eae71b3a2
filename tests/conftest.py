from __future__ import annotations

from collections.abc import Callable
from typing import Any
from uuid import uuid4

import pytest

from block_markup.models.blocks import Block, parse_block
from block_markup.models.rich_text import Annotations, TextRun
from block_markup.renderers import ConversionContext, MarkupRenderer


@pytest.fixture
def run_factory() -> Callable[..., dict[str, Any]]:
    """Build upstream-shaped rich text items."""

    def _factory(
        content: str,
        *,
        bold: bool = False,
        italic: bool = False,
        strikethrough: bool = False,
        underline: bool = False,
        code: bool = False,
        color: str = "default",
        link: str | None = None,
    ) -> dict[str, Any]:
        return {
            "type": "text",
            "text": {"content": content, "link": {"url": link} if link else None},
            "annotations": {
                "bold": bold,
                "italic": italic,
                "strikethrough": strikethrough,
                "underline": underline,
                "code": code,
                "color": color,
            },
            "plain_text": content,
            "href": link,
        }

    return _factory


@pytest.fixture
def block_factory(run_factory) -> Callable[..., Block]:
    """Build typed blocks from the upstream payload shape.

    ``text`` may be a string or a list of run payloads; ``payload`` adds
    type-specific fields.
    """

    def _factory(
        block_type: str,
        text: str | list[Any] | None = None,
        *,
        block_id: str | None = None,
        children: list[Block | dict[str, Any]] | None = None,
        **payload: Any,
    ) -> Block:
        body = dict(payload)
        if text is not None:
            body["rich_text"] = [run_factory(text)] if isinstance(text, str) else text
        data: dict[str, Any] = {
            "object": "block",
            "id": block_id or str(uuid4()),
            "type": block_type,
            "has_children": bool(children),
            block_type: body,
        }
        if children:
            data["children"] = children
        return parse_block(data)

    return _factory


@pytest.fixture
def renderer() -> MarkupRenderer:
    return MarkupRenderer()


@pytest.fixture
def context() -> ConversionContext:
    return ConversionContext()


@pytest.fixture
def convert(renderer: MarkupRenderer, context: ConversionContext):
    """Convert blocks and return only the markup."""

    def _convert(*blocks: Block | dict[str, Any], ctx: ConversionContext | None = None) -> str:
        return renderer.convert_blocks(list(blocks), ctx or context).markup

    return _convert


@pytest.fixture
def text_run() -> Callable[..., TextRun]:
    def _factory(content: str, *annotations: str, **kwargs: Any) -> TextRun:
        return TextRun(content=content, annotations=Annotations.of(annotations), **kwargs)

    return _factory
