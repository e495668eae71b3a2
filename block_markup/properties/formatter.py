"""Property formatting for grid cells.

``PropertyFormatter.format`` maps a property type tag and its raw value to a
``FormattedValue`` holding the structured value, a plain-text label and
escaped markup. It never raises for odd input: absent values become
``EMPTY`` and anything that fails validation is stringified.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import ValidationError

from block_markup.config import EngineSettings
from block_markup.locales import LocaleConventions, get_conventions
from block_markup.models.formatted import (
    EMPTY,
    Badge,
    FileLink,
    FormattedValue,
    LinkValue,
    PersonBadge,
    RelationSummary,
)
from block_markup.models.properties import (
    DateValue,
    FileValue,
    FormulaValue,
    PersonValue,
    PropertyType,
    RelationRef,
    RollupValue,
    SelectOption,
    parse_property,
    property_type_for,
)
from block_markup.models.rich_text import text_runs
from block_markup.renderers.rich_text import TextRunRenderer, css_class, escape, safe_url

from .inference import is_email, is_url, resolve_property_type

logger = logging.getLogger(__name__)

RelationLookup = Callable[[str], "str | None"]
ResourceResolver = Callable[[str], "str | None"]

DATE_RANGE_SEPARATOR = " → "
CHECK_MARK = "✓"
CROSS_MARK = "✗"

_PHONE_STRIP_RE = re.compile(r"[^0-9+]")

_HANDLERS: dict[PropertyType, str] = {
    PropertyType.TITLE: "_format_title",
    PropertyType.RICH_TEXT: "_format_rich_text",
    PropertyType.TEXT: "_format_text",
    PropertyType.NUMBER: "_format_number",
    PropertyType.SELECT: "_format_select",
    PropertyType.STATUS: "_format_status",
    PropertyType.MULTI_SELECT: "_format_multi_select",
    PropertyType.CHECKBOX: "_format_checkbox",
    PropertyType.DATE: "_format_date",
    PropertyType.CREATED_TIME: "_format_timestamp",
    PropertyType.LAST_EDITED_TIME: "_format_timestamp",
    PropertyType.PEOPLE: "_format_people",
    PropertyType.CREATED_BY: "_format_people",
    PropertyType.LAST_EDITED_BY: "_format_people",
    PropertyType.FILES: "_format_files",
    PropertyType.URL: "_format_url",
    PropertyType.EMAIL: "_format_email",
    PropertyType.PHONE_NUMBER: "_format_phone",
    PropertyType.RELATION: "_format_relation",
    PropertyType.ROLLUP: "_format_rollup",
    PropertyType.FORMULA: "_format_formula",
}


def is_absent(value: Any) -> bool:
    if value is None or value == "":
        return True
    return isinstance(value, (list, tuple, dict)) and not value


def _stringify(value: Any) -> FormattedValue:
    text = str(value)
    return FormattedValue(kind="text", value=text, text=text, html=escape(text))


def _as_list(value: Any) -> list[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


@dataclass(frozen=True, slots=True)
class PropertyFormatter:
    """Stateless formatter configured with locale and optional lookups.

    ``relation_lookup`` maps a related record id to its title; without one
    relations are summarised by count. ``resolve_resource`` rewrites file
    URLs the same way the block converters do.
    """

    locale: str = "en_US"
    time_zone: str | None = None
    relation_lookup: RelationLookup | None = None
    resolve_resource: ResourceResolver | None = None

    def __post_init__(self) -> None:
        if self.time_zone:
            try:
                ZoneInfo(self.time_zone)
            except (ZoneInfoNotFoundError, ValueError) as exc:
                raise ValueError(f"Unknown time zone: {self.time_zone!r}") from exc

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None, **kwargs: Any) -> PropertyFormatter:
        settings = settings or EngineSettings()
        return cls(locale=settings.locale or "en_US", time_zone=settings.time_zone, **kwargs)

    @property
    def conventions(self) -> LocaleConventions:
        return get_conventions(self.locale)

    @staticmethod
    def _callback(callback: Callable[[str], "str | None"], key: str) -> str | None:
        """Call a caller-supplied lookup; failures count as unresolved."""
        try:
            result = callback(key)
        except Exception:
            logger.warning("Lookup %r failed for %s", callback, key, exc_info=True)
            return None
        return result if isinstance(result, str) else None

    def format(self, property_type: PropertyType | str | None, value: Any) -> FormattedValue:
        if is_absent(value):
            return EMPTY
        known = property_type_for(property_type)
        handler_name = _HANDLERS.get(known) if known is not None else None
        if handler_name is None:
            return _stringify(value)
        try:
            return getattr(self, handler_name)(value)
        except (ValidationError, TypeError, ValueError, ArithmeticError) as exc:
            logger.debug("Malformed %s property value %r: %s", known.value, value, exc)
            return _stringify(value)

    # Text ---------------------------------------------------------------
    def _render_runs(self, value: Any) -> tuple[str, str]:
        if isinstance(value, str):
            return value, escape(value)
        runs = text_runs(value)
        renderer = TextRunRenderer()
        return renderer.plain_text(runs), "".join(renderer.render_run(run) for run in runs)

    def _format_title(self, value: Any) -> FormattedValue:
        text, markup = self._render_runs(value)
        if not text:
            return EMPTY
        return FormattedValue(kind="title", value=text, text=text, html=f"<strong>{markup}</strong>")

    def _format_rich_text(self, value: Any) -> FormattedValue:
        text, markup = self._render_runs(value)
        if not text:
            return EMPTY
        return FormattedValue(kind="rich_text", value=text, text=text, html=markup)

    def _format_text(self, value: Any) -> FormattedValue:
        if not isinstance(value, str):
            return self._format_rich_text(value)
        return FormattedValue(kind="text", value=value, text=value, html=escape(value))

    # Numbers --------------------------------------------------------------
    def format_number(self, value: Any) -> str:
        if isinstance(value, bool):
            raise TypeError("booleans are not numbers")
        number = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(str(value))
        if not number.is_finite():
            raise ValueError(f"non-finite number {value!r}")
        decimals = 0 if number == number.to_integral_value() else 2
        return self.conventions.format_number(number, decimals)

    def _format_number(self, value: Any) -> FormattedValue:
        text = self.format_number(value)
        number = float(value) if isinstance(value, (str, Decimal)) else value
        return FormattedValue(kind="number", value=number, text=text, html=escape(text))

    # Options ------------------------------------------------------------
    def _badge(self, value: Any, css: str) -> tuple[Badge, str] | None:
        option = SelectOption.model_validate(value if not isinstance(value, str) else {"name": value})
        if not option.name:
            return None
        color = css_class(option.color) or "default"
        badge = Badge(label=option.name, color=color)
        return badge, f'<span class="{css} notion-{color}">{escape(option.name)}</span>'

    def _format_select(self, value: Any) -> FormattedValue:
        return self._format_option(value, "select", "notion-select")

    def _format_status(self, value: Any) -> FormattedValue:
        return self._format_option(value, "status", "notion-status")

    def _format_option(self, value: Any, kind: str, css: str) -> FormattedValue:
        rendered = self._badge(value, css)
        if rendered is None:
            return EMPTY
        badge, markup = rendered
        return FormattedValue(kind=kind, value=badge, text=badge.label, html=markup)

    def _format_multi_select(self, value: Any) -> FormattedValue:
        badges: list[Badge] = []
        parts: list[str] = []
        for item in _as_list(value):
            rendered = self._badge(item, "notion-select")
            if rendered is not None:
                badges.append(rendered[0])
                parts.append(rendered[1])
        if not badges:
            return EMPTY
        return FormattedValue(
            kind="multi_select",
            value=tuple(badges),
            text=", ".join(badge.label for badge in badges),
            html=" ".join(parts),
        )

    def _format_checkbox(self, value: Any) -> FormattedValue:
        if isinstance(value, str):
            checked = value.strip().lower() in ("true", "1", "yes")
        else:
            checked = bool(value)
        mark = CHECK_MARK if checked else CROSS_MARK
        return FormattedValue(kind="checkbox", value=checked, text=mark, html=mark)

    # Dates --------------------------------------------------------------
    def _parse_moment(self, raw: str) -> datetime:
        moment = datetime.fromisoformat(raw.strip())
        if self.time_zone and moment.tzinfo is not None:
            moment = moment.astimezone(ZoneInfo(self.time_zone))
        return moment

    def format_datetime(self, raw: str, *, with_time: bool) -> str:
        try:
            moment = self._parse_moment(raw)
        except ValueError:
            return raw
        return self.conventions.format_date(moment, with_time=with_time)

    def format_date_value(self, value: Any) -> str:
        date = DateValue.model_validate(value)
        if not date.start:
            return ""
        with_time = date.has_time
        start = self.format_datetime(date.start, with_time=with_time)
        if date.end:
            return f"{start}{DATE_RANGE_SEPARATOR}{self.format_datetime(date.end, with_time=with_time)}"
        return start

    def _format_date(self, value: Any) -> FormattedValue:
        text = self.format_date_value(value)
        if not text:
            return EMPTY
        return FormattedValue(kind="date", value=DateValue.model_validate(value), text=text, html=escape(text))

    def _format_timestamp(self, value: Any) -> FormattedValue:
        if not isinstance(value, str):
            raise TypeError("timestamps must be ISO strings")
        text = self.format_datetime(value, with_time=True)
        return FormattedValue(kind="timestamp", value=value, text=text, html=escape(text))

    # People and files ---------------------------------------------------
    def _format_people(self, value: Any) -> FormattedValue:
        people: list[PersonBadge] = []
        parts: list[str] = []
        for item in _as_list(value):
            person = PersonValue.model_validate(item)
            if not person.name:
                continue
            avatar = safe_url(person.avatar_url)
            people.append(PersonBadge(name=person.name, avatar_url=avatar))
            name = escape(person.name)
            if avatar:
                parts.append(
                    f'<img src="{escape(avatar)}" alt="{name}" class="notion-avatar" width="20" height="20"> {name}'
                )
            else:
                parts.append(name)
        if not people:
            return EMPTY
        return FormattedValue(
            kind="people",
            value=tuple(people),
            text=", ".join(person.name for person in people),
            html=", ".join(parts),
        )

    def _format_files(self, value: Any) -> FormattedValue:
        files: list[FileLink] = []
        parts: list[str] = []
        for item in _as_list(value):
            file = FileValue.model_validate(item)
            url = file.url
            if url and self.resolve_resource is not None:
                url = self._callback(self.resolve_resource, url) or ""
            href = safe_url(url)
            if not href:
                continue
            name = file.name or "File"
            files.append(FileLink(name=name, url=href))
            parts.append(
                f'<a href="{escape(href)}" target="_blank" rel="noopener noreferrer" '
                f'class="notion-file">{escape(name)}</a>'
            )
        if not files:
            return EMPTY
        return FormattedValue(
            kind="files",
            value=tuple(files),
            text=", ".join(file.name for file in files),
            html=", ".join(parts),
        )

    # Links --------------------------------------------------------------
    def _plain_link(self, kind: str, text: str) -> FormattedValue:
        return FormattedValue(kind=kind, value=LinkValue(text=text), text=text, html=escape(text))

    def _format_url(self, value: Any) -> FormattedValue:
        if not isinstance(value, str):
            raise TypeError("url values must be strings")
        url = value.strip()
        if not is_url(url):
            return self._plain_link("url", value)
        link = LinkValue(text=value, href=url, scheme="https" if url.lower().startswith("https") else "http")
        markup = (
            f'<a href="{escape(url)}" target="_blank" rel="noopener noreferrer" '
            f'class="notion-url">{escape(value)}</a>'
        )
        return FormattedValue(kind="url", value=link, text=value, html=markup)

    def _format_email(self, value: Any) -> FormattedValue:
        if not isinstance(value, str):
            raise TypeError("email values must be strings")
        address = value.strip()
        if not is_email(address):
            return self._plain_link("email", value)
        link = LinkValue(text=value, href=f"mailto:{address}", scheme="mailto")
        markup = f'<a href="mailto:{escape(address)}" class="notion-email">{escape(value)}</a>'
        return FormattedValue(kind="email", value=link, text=value, html=markup)

    def _format_phone(self, value: Any) -> FormattedValue:
        if not isinstance(value, (str, int)) or isinstance(value, bool):
            raise TypeError("phone values must be strings")
        text = str(value)
        cleaned = _PHONE_STRIP_RE.sub("", text)
        if sum(char.isdigit() for char in cleaned) < 3:
            return self._plain_link("phone_number", text)
        link = LinkValue(text=text, href=f"tel:{cleaned}", scheme="tel")
        markup = f'<a href="tel:{escape(cleaned)}" class="notion-phone">{escape(text)}</a>'
        return FormattedValue(kind="phone_number", value=link, text=text, html=markup)

    # Relations, rollups and formulas -------------------------------------
    def _format_relation(self, value: Any) -> FormattedValue:
        ids = tuple(RelationRef.model_validate(item).id for item in _as_list(value))
        if not ids:
            return EMPTY
        count = len(ids)
        noun = "relation" if count == 1 else "relations"
        if self.relation_lookup is None:
            summary = RelationSummary(count=count, ids=ids)
            text = f"{count} {noun}"
            return FormattedValue(
                kind="relation",
                value=summary,
                text=text,
                html=f'<span class="notion-relation">{escape(text)}</span>',
            )

        titles: list[str] = []
        unresolved: list[str] = []
        labels: list[str] = []
        for related_id in ids:
            title = self._callback(self.relation_lookup, related_id)
            if title:
                titles.append(title)
                labels.append(title)
            else:
                unresolved.append(related_id)
                labels.append(related_id)
        if unresolved:
            logger.debug("Relation lookup left %d of %d id(s) unresolved", len(unresolved), count)
        summary = RelationSummary(count=count, ids=ids, titles=tuple(titles), unresolved=tuple(unresolved))
        text = ", ".join(labels)
        return FormattedValue(
            kind="relation",
            value=summary,
            text=text,
            html=f'<span class="notion-relation">{escape(text)}</span>',
        )

    def _wrap(self, kind: str, inner: FormattedValue) -> FormattedValue:
        if inner.is_empty:
            return EMPTY
        return FormattedValue(kind=kind, value=inner.value, text=inner.text, html=inner.html)

    def _format_rollup(self, value: Any) -> FormattedValue:
        rollup = RollupValue.model_validate(value)
        if rollup.type == "number":
            if rollup.number is None:
                return EMPTY
            return self._wrap("rollup", self._format_number(rollup.number))
        if rollup.type == "date":
            if rollup.date is None:
                return EMPTY
            return self._wrap("rollup", self._format_date(rollup.date.model_dump()))
        if rollup.type == "array":
            return self._wrap("rollup", self._format_array(rollup.array))
        return EMPTY

    def _format_array(self, items: Iterable[Any]) -> FormattedValue:
        formatted: list[FormattedValue] = []
        for item in items:
            if isinstance(item, Mapping) and isinstance(item.get("type"), str):
                item_type, item_value = parse_property(dict(item))
                cell = self.format(item_type, item_value)
            else:
                cell = self.format(PropertyType.TEXT, item if isinstance(item, str) else str(item))
            if not cell.is_empty:
                formatted.append(cell)
        if not formatted:
            return EMPTY
        return FormattedValue(
            kind="array",
            value=tuple(formatted),
            text=", ".join(cell.text for cell in formatted),
            html=", ".join(cell.html for cell in formatted),
        )

    def _format_formula(self, value: Any) -> FormattedValue:
        formula = FormulaValue.model_validate(value)
        if formula.type == "string":
            if not formula.string:
                return EMPTY
            return self._wrap("formula", self._format_text(formula.string))
        if formula.type == "number":
            if formula.number is None:
                return EMPTY
            return self._wrap("formula", self._format_number(formula.number))
        if formula.type == "boolean":
            if formula.boolean is None:
                return EMPTY
            return self._wrap("formula", self._format_checkbox(formula.boolean))
        if formula.type == "date":
            if formula.date is None:
                return EMPTY
            return self._wrap("formula", self._format_date(formula.date.model_dump()))
        return EMPTY


DEFAULT_FORMATTER = PropertyFormatter()


def format_property(
    property_type: PropertyType | str | None,
    value: Any,
    *,
    formatter: PropertyFormatter | None = None,
) -> FormattedValue:
    """Format ``value`` as a ``property_type`` cell."""
    return (formatter or DEFAULT_FORMATTER).format(property_type, value)


def unwrap_property(value: Any) -> tuple[str | None, Any]:
    """Split an upstream ``{"type": t, t: value}`` payload; other values pass through."""
    if isinstance(value, Mapping):
        declared = value.get("type")
        if isinstance(declared, str) and declared in value and property_type_for(declared) is not None:
            return parse_property(dict(value))
    return None, value


def format_row(
    properties: Mapping[str, Any],
    schema: Mapping[str, PropertyType | str] | None = None,
    *,
    formatter: PropertyFormatter | None = None,
) -> dict[str, FormattedValue]:
    """Format every property of one record.

    Types come from ``schema`` first, then from upstream payload tags, and
    only then from inference; inferred cells carry ``inferred=True``.
    """
    schema = schema or {}
    active = formatter or DEFAULT_FORMATTER
    row: dict[str, FormattedValue] = {}
    for name, raw in properties.items():
        declared, value = unwrap_property(raw)
        property_type, inferred = resolve_property_type(value, schema.get(name) or declared)
        cell = active.format(property_type, value)
        if inferred and not cell.is_empty:
            cell = cell.model_copy(update={"inferred": True})
        row[name] = cell
    return row


def format_values(
    pairs: Sequence[tuple[PropertyType | str, Any]],
    *,
    formatter: PropertyFormatter | None = None,
) -> list[FormattedValue]:
    active = formatter or DEFAULT_FORMATTER
    return [active.format(property_type, value) for property_type, value in pairs]


__all__ = [
    "DEFAULT_FORMATTER",
    "PropertyFormatter",
    "format_property",
    "format_row",
    "format_values",
    "is_absent",
    "unwrap_property",
]
