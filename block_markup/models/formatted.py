"""Display-ready values produced by the property formatter."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class _Display(BaseModel):
    model_config = ConfigDict(frozen=True)


class Badge(_Display):
    label: str
    color: str = "default"


class LinkValue(_Display):
    """A validated link; ``href`` is ``None`` when validation failed."""

    text: str
    href: str | None = None
    scheme: str | None = None

    @property
    def is_link(self) -> bool:
        return self.href is not None


class FileLink(_Display):
    name: str
    url: str


class PersonBadge(_Display):
    name: str
    avatar_url: str | None = None


class RelationSummary(_Display):
    count: int
    ids: tuple[str, ...] = ()
    titles: tuple[str, ...] = ()
    unresolved: tuple[str, ...] = ()


class FormattedValue(_Display):
    """Formatted cell: structured ``value`` plus its text and markup renderings.

    ``inferred`` is set when the property type was guessed from the value's
    shape rather than read from schema metadata.
    """

    kind: str
    value: Any = None
    text: str = ""
    html: str = ""
    inferred: bool = False

    @property
    def is_empty(self) -> bool:
        return self.value is None and not self.text and not self.html


EMPTY = FormattedValue(kind="empty")


__all__ = [
    "Badge",
    "EMPTY",
    "FileLink",
    "FormattedValue",
    "LinkValue",
    "PersonBadge",
    "RelationSummary",
]
