"""Shared building blocks for typed content blocks."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator

from block_markup.config import MAX_NESTING_DEPTH


class BlockType(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading_1"
    HEADING_2 = "heading_2"
    HEADING_3 = "heading_3"
    BULLETED_LIST_ITEM = "bulleted_list_item"
    NUMBERED_LIST_ITEM = "numbered_list_item"
    TO_DO = "to_do"
    TOGGLE = "toggle"
    QUOTE = "quote"
    CALLOUT = "callout"
    CODE = "code"
    EQUATION = "equation"
    DIVIDER = "divider"
    TABLE = "table"
    TABLE_ROW = "table_row"
    IMAGE = "image"
    FILE = "file"
    PDF = "pdf"
    VIDEO = "video"
    AUDIO = "audio"
    EMBED = "embed"
    BOOKMARK = "bookmark"
    LINK_PREVIEW = "link_preview"
    COLUMN_LIST = "column_list"
    COLUMN = "column"
    CHILD_PAGE = "child_page"
    CHILD_DATABASE = "child_database"
    LINK_TO_PAGE = "link_to_page"
    SYNCED_BLOCK = "synced_block"
    TABLE_OF_CONTENTS = "table_of_contents"
    BREADCRUMB = "breadcrumb"
    TEMPLATE = "template"
    UNSUPPORTED = "unsupported"


def type_key(block_type: BlockType | str | None) -> str:
    """Normalise enum members and raw strings to the plain type tag."""
    if block_type is None:
        return "unknown"
    return block_type.value if isinstance(block_type, Enum) else str(block_type)


class Block(BaseModel):
    """Immutable representation of a block node.

    Accepts the upstream payload shape where type-specific fields live under
    a key named after the type (``{"type": "quote", "quote": {...}}``); those
    fields are lifted onto the model. Unknown keys are kept as extras so the
    fallback converter can still recover text from unrecognised variants.

    Validation context may carry ``depth`` and ``max_depth``; children of a
    block at ``max_depth`` are dropped and the block is flagged
    ``children_truncated``.
    """

    id: str = ""
    type: str = "unknown"
    has_children: bool = False
    children: tuple[Block, ...] = ()

    model_config = ConfigDict(frozen=True, extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _flatten_payload(cls, data: Any, info: ValidationInfo) -> Any:
        if not isinstance(data, dict):
            return data
        block_type = data.get("type")
        inner = data.get(block_type) if isinstance(block_type, str) else None
        merged = dict(data)
        if isinstance(inner, dict):
            merged = {key: value for key, value in data.items() if key != block_type}
            merged.update(cls._unpack_payload(inner))
        depth, max_depth = _nesting(info)
        if merged.get("children") and depth >= max_depth:
            # Children past the limit are never validated.
            del merged["children"]
            merged["children_truncated"] = True
        return merged

    @classmethod
    def _unpack_payload(cls, payload: dict[str, Any]) -> dict[str, Any]:
        return {key: value for key, value in payload.items() if key != "type"}

    @field_validator("children", mode="before")
    @classmethod
    def _parse_children(cls, value: Any, info: ValidationInfo) -> Any:
        if not value:
            return ()
        from . import parse_block

        depth, max_depth = _nesting(info)
        return tuple(
            parse_block(child, depth=depth + 1, max_depth=max_depth) for child in value if child is not None
        )

    @property
    def type_tag(self) -> str:
        return type_key(self.type)

    def extra_field(self, name: str, default: Any = None) -> Any:
        extras = self.model_extra or {}
        return extras.get(name, default)


def _nesting(info: ValidationInfo) -> tuple[int, int]:
    context = info.context or {}
    return context.get("depth", 0), context.get("max_depth", MAX_NESTING_DEPTH)


__all__ = ["Block", "BlockType", "type_key"]
