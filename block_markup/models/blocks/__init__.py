"""Typed block exports and helpers."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from block_markup.config import MAX_NESTING_DEPTH

from .base import Block, BlockType, type_key
from .layout import (
    ChildDatabaseBlock,
    ChildPageBlock,
    ColumnBlock,
    ColumnListBlock,
    DividerBlock,
    LinkToPageBlock,
    SyncedBlock,
    TableBlock,
    TableRowBlock,
)
from .media import (
    AudioBlock,
    BookmarkBlock,
    EmbedBlock,
    FileBlock,
    FileReference,
    Icon,
    ImageBlock,
    LinkEmbedBlock,
    LinkPreviewBlock,
    MediaBlock,
    PdfBlock,
    VideoBlock,
)
from .text import (
    BulletedListItemBlock,
    CalloutBlock,
    CodeBlock,
    EquationBlock,
    HeadingBlock,
    NumberedListItemBlock,
    ParagraphBlock,
    QuoteBlock,
    RichTextBlock,
    ToDoBlock,
    ToggleBlock,
)

logger = logging.getLogger(__name__)

BLOCK_CLASS_MAP: dict[BlockType, type[Block]] = {
    BlockType.PARAGRAPH: ParagraphBlock,
    BlockType.HEADING_1: HeadingBlock,
    BlockType.HEADING_2: HeadingBlock,
    BlockType.HEADING_3: HeadingBlock,
    BlockType.BULLETED_LIST_ITEM: BulletedListItemBlock,
    BlockType.NUMBERED_LIST_ITEM: NumberedListItemBlock,
    BlockType.TO_DO: ToDoBlock,
    BlockType.TOGGLE: ToggleBlock,
    BlockType.QUOTE: QuoteBlock,
    BlockType.CALLOUT: CalloutBlock,
    BlockType.CODE: CodeBlock,
    BlockType.EQUATION: EquationBlock,
    BlockType.DIVIDER: DividerBlock,
    BlockType.TABLE: TableBlock,
    BlockType.TABLE_ROW: TableRowBlock,
    BlockType.IMAGE: ImageBlock,
    BlockType.FILE: FileBlock,
    BlockType.PDF: PdfBlock,
    BlockType.VIDEO: VideoBlock,
    BlockType.AUDIO: AudioBlock,
    BlockType.EMBED: EmbedBlock,
    BlockType.BOOKMARK: BookmarkBlock,
    BlockType.LINK_PREVIEW: LinkPreviewBlock,
    BlockType.COLUMN_LIST: ColumnListBlock,
    BlockType.COLUMN: ColumnBlock,
    BlockType.CHILD_PAGE: ChildPageBlock,
    BlockType.CHILD_DATABASE: ChildDatabaseBlock,
    BlockType.LINK_TO_PAGE: LinkToPageBlock,
    BlockType.SYNCED_BLOCK: SyncedBlock,
}


def block_class_for(block_type: BlockType | str) -> type[Block]:
    try:
        normalized = BlockType(type_key(block_type))
    except ValueError:
        return Block
    return BLOCK_CLASS_MAP.get(normalized, Block)


def parse_block(
    payload: Block | dict[str, Any],
    *,
    depth: int = 0,
    max_depth: int = MAX_NESTING_DEPTH,
) -> Block:
    """Build a typed block from an upstream payload.

    Unknown types become plain ``Block`` instances. Payloads that fail
    validation for their declared type are kept as plain blocks flagged
    ``malformed`` so conversion can degrade instead of aborting. Nesting is
    parsed down to ``max_depth`` only; see ``Block``.
    """
    if isinstance(payload, Block):
        return payload
    if not isinstance(payload, dict):
        logger.debug("Skipping non-mapping block payload of type %s", type(payload).__name__)
        return Block(type="unknown", malformed=True)
    block_cls = block_class_for(payload.get("type") or "unknown")
    try:
        return block_cls.model_validate(payload, context={"depth": depth, "max_depth": max_depth})
    except ValidationError as exc:
        logger.debug("Malformed %s block %s: %s", payload.get("type"), payload.get("id"), exc)
        salvage = {
            "id": str(payload.get("id") or ""),
            "type": str(payload.get("type") or "unknown"),
            "malformed": True,
        }
        return Block.model_validate(salvage)


def parse_blocks(
    payloads: list[Block | dict[str, Any]],
    *,
    depth: int = 0,
    max_depth: int = MAX_NESTING_DEPTH,
) -> list[Block]:
    return [parse_block(payload, depth=depth, max_depth=max_depth) for payload in payloads if payload is not None]


__all__ = [
    "AudioBlock",
    "BLOCK_CLASS_MAP",
    "Block",
    "BlockType",
    "BookmarkBlock",
    "BulletedListItemBlock",
    "CalloutBlock",
    "ChildDatabaseBlock",
    "ChildPageBlock",
    "CodeBlock",
    "ColumnBlock",
    "ColumnListBlock",
    "DividerBlock",
    "EmbedBlock",
    "EquationBlock",
    "FileBlock",
    "FileReference",
    "HeadingBlock",
    "Icon",
    "ImageBlock",
    "LinkEmbedBlock",
    "LinkPreviewBlock",
    "LinkToPageBlock",
    "MediaBlock",
    "NumberedListItemBlock",
    "ParagraphBlock",
    "PdfBlock",
    "QuoteBlock",
    "RichTextBlock",
    "SyncedBlock",
    "TableBlock",
    "TableRowBlock",
    "ToDoBlock",
    "ToggleBlock",
    "VideoBlock",
    "block_class_for",
    "parse_block",
    "parse_blocks",
    "type_key",
]
