"""Best-effort property type inference from value shapes.

Used only when a record arrives without schema metadata. Rules run in a
fixed order and the first match wins; callers should treat the result as
lower confidence than an explicit type.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping, Sequence
from decimal import Decimal
from typing import Any
from urllib.parse import urlsplit

from block_markup.models.properties import PropertyType, property_type_for
from block_markup.models.rich_text import TextRun

logger = logging.getLogger(__name__)

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
EMAIL_RE = re.compile(
    r"^[A-Za-z0-9.!#$%&'*+/=?^_`{|}~-]+"
    r"@[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?"
    r"(?:\.[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?)+$"
)
ROLLUP_RESULT_TYPES = frozenset({"number", "date", "array"})


def is_url(value: str) -> bool:
    if not value or any(char.isspace() for char in value.strip()):
        return False
    try:
        parts = urlsplit(value.strip())
    except ValueError:
        return False
    return parts.scheme.lower() in ("http", "https") and bool(parts.netloc)


def is_email(value: str) -> bool:
    return bool(value) and len(value) <= 254 and EMAIL_RE.match(value.strip()) is not None


def is_iso_date(value: str) -> bool:
    return ISO_DATE_RE.match(value.strip()) is not None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_option(item: Any) -> bool:
    return isinstance(item, Mapping) and "name" in item and "color" in item


def _is_rich_text_item(item: Any) -> bool:
    if isinstance(item, TextRun):
        return True
    return isinstance(item, Mapping) and ("plain_text" in item or "text" in item)


def _infer_string(value: str) -> PropertyType:
    if is_url(value):
        return PropertyType.URL
    if is_email(value):
        return PropertyType.EMAIL
    if is_iso_date(value):
        return PropertyType.DATE
    return PropertyType.TEXT


def _infer_mapping(value: Mapping[str, Any]) -> PropertyType:
    if _is_option(value):
        return PropertyType.SELECT
    if "start" in value:
        return PropertyType.DATE
    if value.get("type") in ROLLUP_RESULT_TYPES:
        return PropertyType.ROLLUP
    return PropertyType.TEXT


def _infer_sequence(value: Sequence[Any]) -> PropertyType:
    first = value[0]
    if _is_option(first):
        return PropertyType.MULTI_SELECT
    if _is_rich_text_item(first):
        return PropertyType.RICH_TEXT
    if isinstance(first, Mapping):
        if first.get("object") == "user":
            return PropertyType.PEOPLE
        if "url" in first or "file" in first or "external" in first:
            return PropertyType.FILES
        if "id" in first and not first.get("name"):
            return PropertyType.RELATION
    return PropertyType.TEXT


def infer_type(value: Any) -> PropertyType | None:
    """Guess a property type from ``value``; ``None`` when there is nothing to inspect."""
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return PropertyType.CHECKBOX
    if _is_number(value):
        return PropertyType.NUMBER
    if isinstance(value, Mapping):
        return _infer_mapping(value)
    if isinstance(value, (list, tuple)):
        return _infer_sequence(value) if value else PropertyType.TEXT
    if isinstance(value, str):
        return _infer_string(value)
    return PropertyType.TEXT


def resolve_property_type(
    value: Any,
    declared: PropertyType | str | None = None,
) -> tuple[str | None, bool]:
    """Return ``(type, inferred)``: the declared type when present, else an inferred one."""
    if declared:
        known = property_type_for(declared)
        return (known.value if known else str(declared)), False
    inferred = infer_type(value)
    if inferred is not None:
        logger.debug("Inferred property type %s from value shape", inferred.value)
    return (inferred.value if inferred else None), True


__all__ = [
    "ISO_DATE_RE",
    "infer_type",
    "is_email",
    "is_iso_date",
    "is_url",
    "resolve_property_type",
]
