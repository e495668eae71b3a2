"""Structural block definitions: tables, columns, dividers and page links."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from block_markup.models.rich_text import TextRun, text_runs

from .base import Block, BlockType


class TableBlock(Block):
    type: BlockType = Field(default=BlockType.TABLE, frozen=True)
    table_width: int = Field(default=0, ge=0)
    has_column_header: bool = False
    has_row_header: bool = False


class TableRowBlock(Block):
    type: BlockType = Field(default=BlockType.TABLE_ROW, frozen=True)
    cells: tuple[tuple[TextRun, ...], ...] = ()

    @field_validator("cells", mode="before")
    @classmethod
    def _coerce_cells(cls, value: Any) -> tuple[tuple[TextRun, ...], ...]:
        if not value:
            return ()
        return tuple(text_runs(cell) for cell in value)


class DividerBlock(Block):
    type: BlockType = Field(default=BlockType.DIVIDER, frozen=True)


class ColumnListBlock(Block):
    type: BlockType = Field(default=BlockType.COLUMN_LIST, frozen=True)


class ColumnBlock(Block):
    type: BlockType = Field(default=BlockType.COLUMN, frozen=True)
    width_ratio: float | None = None


class SyncedBlock(Block):
    type: BlockType = Field(default=BlockType.SYNCED_BLOCK, frozen=True)
    synced_from: dict[str, Any] | None = None


class ChildPageBlock(Block):
    type: BlockType = Field(default=BlockType.CHILD_PAGE, frozen=True)
    title: str = ""


class ChildDatabaseBlock(Block):
    type: BlockType = Field(default=BlockType.CHILD_DATABASE, frozen=True)
    title: str = ""


class LinkToPageBlock(Block):
    type: BlockType = Field(default=BlockType.LINK_TO_PAGE, frozen=True)
    page_id: str | None = None
    database_id: str | None = None

    @property
    def target_id(self) -> str | None:
        return self.page_id or self.database_id

    @property
    def target_kind(self) -> str:
        return "database" if self.database_id and not self.page_id else "page"


__all__ = [
    "ChildDatabaseBlock",
    "ChildPageBlock",
    "ColumnBlock",
    "ColumnListBlock",
    "DividerBlock",
    "LinkToPageBlock",
    "SyncedBlock",
    "TableBlock",
    "TableRowBlock",
]
