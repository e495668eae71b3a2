"""Grid column descriptors derived from property types."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from block_markup.models.columns import Alignment, ColumnConfig, FilterKind, FormatterKind, SorterKind
from block_markup.models.properties import (
    DATE_TYPES,
    LINK_TYPES,
    TEXT_TYPES,
    USER_TYPES,
    PropertyType,
    property_type_for,
)

from .formatter import unwrap_property
from .inference import resolve_property_type

NUMBER_FORMAT_PARAMS: dict[str, Any] = {
    "thousand": ",",
    "precision": False,
    "symbol": "",
    "symbolAfter": False,
}
DATE_FORMAT_PARAMS: dict[str, Any] = {"outputFormat": "MMM DD, YYYY"}

ID_FIELD = "notion_id"
TITLE_FIELD = "title"
PROPERTY_FIELD_PREFIX = "properties."


def column_config_for(property_type: PropertyType | str | None, field: str, title: str) -> ColumnConfig:
    """Return the column descriptor for one property; unknown types get text defaults."""
    known = property_type_for(property_type)
    base: dict[str, Any] = {"field": field, "title": title}

    if known in TEXT_TYPES:
        return ColumnConfig(**base, width=250, formatter=FormatterKind.HTML)
    if known is PropertyType.NUMBER:
        return ColumnConfig(
            **base,
            width=120,
            sorter=SorterKind.NUMBER,
            align=Alignment.RIGHT,
            formatter=FormatterKind.MONEY,
            formatter_params=dict(NUMBER_FORMAT_PARAMS),
        )
    if known in (PropertyType.SELECT, PropertyType.STATUS):
        return ColumnConfig(
            **base,
            width=150,
            formatter=FormatterKind.BADGE,
            filter=FilterKind.LIST,
            filter_params={"valuesLookup": True},
        )
    if known is PropertyType.MULTI_SELECT:
        return ColumnConfig(**base, width=200, formatter=FormatterKind.BADGE)
    if known is PropertyType.CHECKBOX:
        return ColumnConfig(
            **base,
            width=100,
            sorter=SorterKind.BOOLEAN,
            formatter=FormatterKind.TICK_CROSS,
            align=Alignment.CENTER,
            filter=FilterKind.TICK_CROSS,
            filter_params={"tristate": True},
        )
    if known in DATE_TYPES:
        return ColumnConfig(
            **base,
            width=160,
            sorter=SorterKind.DATETIME,
            formatter=FormatterKind.DATETIME,
            formatter_params=dict(DATE_FORMAT_PARAMS),
        )
    if known in USER_TYPES:
        return ColumnConfig(**base, width=180, formatter=FormatterKind.HTML)
    if known in LINK_TYPES:
        return ColumnConfig(**base, width=200, formatter=FormatterKind.LINK)
    if known is PropertyType.FILES:
        return ColumnConfig(**base, width=150, formatter=FormatterKind.HTML)
    if known is PropertyType.RELATION:
        return ColumnConfig(**base, width=180, formatter=FormatterKind.HTML)
    if known in (PropertyType.ROLLUP, PropertyType.FORMULA):
        return ColumnConfig(**base, width=150, formatter=FormatterKind.HTML)
    return ColumnConfig(**base, width=180)


def build_columns(
    properties: Mapping[str, Any],
    schema: Mapping[str, PropertyType | str] | None = None,
) -> list[ColumnConfig]:
    """Column set for a record listing.

    Fixed id and title columns come first, then one column per property
    (the title property is already covered), then the created and edited
    timestamps.
    """
    schema = schema or {}
    columns = [
        ColumnConfig(field=ID_FIELD, title="ID", width=100, frozen=True, formatter=FormatterKind.HTML),
        ColumnConfig(field=TITLE_FIELD, title="Title", width=250, frozen=True, formatter=FormatterKind.HTML),
    ]
    for name, raw in properties.items():
        if name.lower() == TITLE_FIELD:
            continue
        declared, value = unwrap_property(raw)
        property_type, _ = resolve_property_type(value, schema.get(name) or declared)
        columns.append(column_config_for(property_type, f"{PROPERTY_FIELD_PREFIX}{name}", name))
    columns.append(column_config_for(PropertyType.CREATED_TIME, "created_time", "Created"))
    columns.append(column_config_for(PropertyType.LAST_EDITED_TIME, "last_edited_time", "Last Edited"))
    return columns


__all__ = ["build_columns", "column_config_for"]
