"""Text-bearing block definitions."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from block_markup.models.rich_text import TextRun, text_runs

from .base import Block, BlockType
from .media import Icon


class RichTextBlock(Block):
    rich_text: tuple[TextRun, ...] = ()
    color: str = "default"

    @field_validator("rich_text", mode="before")
    @classmethod
    def _coerce_runs(cls, value: Any) -> tuple[TextRun, ...]:
        return text_runs(value)

    @field_validator("color", mode="before")
    @classmethod
    def _coerce_color(cls, value: Any) -> str:
        return value if isinstance(value, str) and value else "default"


class ParagraphBlock(RichTextBlock):
    type: BlockType = Field(default=BlockType.PARAGRAPH, frozen=True)


class HeadingBlock(RichTextBlock):
    type: BlockType = Field(default=BlockType.HEADING_2, frozen=True)
    is_toggleable: bool = False

    @property
    def level(self) -> int:
        return {
            BlockType.HEADING_1: 1,
            BlockType.HEADING_2: 2,
            BlockType.HEADING_3: 3,
        }.get(self.type, 2)


class BulletedListItemBlock(RichTextBlock):
    type: BlockType = Field(default=BlockType.BULLETED_LIST_ITEM, frozen=True)


class NumberedListItemBlock(RichTextBlock):
    type: BlockType = Field(default=BlockType.NUMBERED_LIST_ITEM, frozen=True)


class ToDoBlock(RichTextBlock):
    type: BlockType = Field(default=BlockType.TO_DO, frozen=True)
    checked: bool = False


class ToggleBlock(RichTextBlock):
    type: BlockType = Field(default=BlockType.TOGGLE, frozen=True)


class QuoteBlock(RichTextBlock):
    type: BlockType = Field(default=BlockType.QUOTE, frozen=True)


class CalloutBlock(RichTextBlock):
    type: BlockType = Field(default=BlockType.CALLOUT, frozen=True)
    icon: Icon | None = None


class CodeBlock(Block):
    type: BlockType = Field(default=BlockType.CODE, frozen=True)
    rich_text: tuple[TextRun, ...] = ()
    caption: tuple[TextRun, ...] = ()
    language: str = "plain text"

    @field_validator("rich_text", "caption", mode="before")
    @classmethod
    def _coerce_runs(cls, value: Any) -> tuple[TextRun, ...]:
        return text_runs(value)

    @field_validator("language", mode="before")
    @classmethod
    def _coerce_language(cls, value: Any) -> str:
        return value if isinstance(value, str) and value else "plain text"


class EquationBlock(Block):
    type: BlockType = Field(default=BlockType.EQUATION, frozen=True)
    expression: str = ""

    @field_validator("expression", mode="before")
    @classmethod
    def _coerce_expression(cls, value: Any) -> str:
        return value if isinstance(value, str) else ""


__all__ = [
    "BulletedListItemBlock",
    "CalloutBlock",
    "CodeBlock",
    "EquationBlock",
    "HeadingBlock",
    "NumberedListItemBlock",
    "ParagraphBlock",
    "QuoteBlock",
    "RichTextBlock",
    "ToDoBlock",
    "ToggleBlock",
]
