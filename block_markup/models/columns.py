"""Declarative grid column descriptors."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SorterKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATETIME = "datetime"
    BOOLEAN = "boolean"
    ALPHANUM = "alphanum"


class FilterKind(str, Enum):
    INPUT = "input"
    LIST = "list"
    TICK_CROSS = "tickCross"
    NONE = "none"


class FormatterKind(str, Enum):
    HTML = "html"
    PLAINTEXT = "plaintext"
    MONEY = "money"
    TICK_CROSS = "tickCross"
    DATETIME = "datetime"
    BADGE = "badge"
    LINK = "link"


class Alignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class ColumnConfig(BaseModel):
    field: str
    title: str
    width: int = Field(default=180, gt=0)
    sorter: SorterKind = SorterKind.STRING
    filter: FilterKind = FilterKind.INPUT
    formatter: FormatterKind = FormatterKind.PLAINTEXT
    formatter_params: dict[str, Any] = Field(default_factory=dict)
    filter_params: dict[str, Any] = Field(default_factory=dict)
    align: Alignment = Alignment.LEFT
    frozen: bool = False

    model_config = ConfigDict(frozen=True)

    def to_grid(self) -> dict[str, Any]:
        """Return the grid client's column definition (camelCase keys).

        Badge and link cells arrive pre-rendered, so the client renders them
        with its ``html`` formatter.
        """
        formatter = self.formatter.value
        if self.formatter in (FormatterKind.BADGE, FormatterKind.LINK):
            formatter = FormatterKind.HTML.value
        column: dict[str, Any] = {
            "field": self.field,
            "title": self.title,
            "width": self.width,
            "sorter": self.sorter.value,
            "hozAlign": self.align.value,
            "formatter": formatter,
        }
        if self.filter is not FilterKind.NONE:
            column["headerFilter"] = self.filter.value
        if self.formatter_params:
            column["formatterParams"] = dict(self.formatter_params)
        if self.filter_params:
            column["headerFilterParams"] = dict(self.filter_params)
        if self.frozen:
            column["frozen"] = True
        return column


__all__ = ["Alignment", "ColumnConfig", "FilterKind", "FormatterKind", "SorterKind"]
