"""Converter interfaces and the per-conversion context."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

from block_markup.config import DEFAULT_LOCALE, DEFAULT_MAX_DEPTH, MAX_NESTING_DEPTH, EngineSettings
from block_markup.diagnostics import DiagnosticKind, Diagnostics
from block_markup.models.blocks import Block, type_key
from block_markup.models.rich_text import TextRun

from .rich_text import PageResolver, TextRunRenderer, escape

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from .markup.renderer import MarkupRenderer

ResourceResolver = Callable[[str], "str | None"]


class ConversionResult(NamedTuple):
    markup: str
    diagnostics: Diagnostics


@dataclass(frozen=True, slots=True)
class ConversionContext:
    """Read-only inputs threaded through every converter call.

    ``resolve_resource`` maps media URLs to their final location and
    ``resolve_page`` maps workspace page ids to public URLs. Both are
    optional; converters degrade to the raw URL or a plain label.

    ``locale`` is not read by the built-in converters, which emit no numbers
    or dates. It is carried for converters registered by callers, so they
    can format values the same way ``PropertyFormatter`` does.

    ``max_depth`` is capped at ``MAX_NESTING_DEPTH``.
    """

    depth: int = 0
    max_depth: int = DEFAULT_MAX_DEPTH
    locale: str = DEFAULT_LOCALE
    resolve_resource: ResourceResolver | None = None
    resolve_page: PageResolver | None = None
    engine: MarkupRenderer | None = field(default=None, compare=False, repr=False)
    diagnostics: Diagnostics | None = field(default=None, compare=False, repr=False)

    @classmethod
    def from_settings(cls, settings: EngineSettings | None = None, **kwargs) -> ConversionContext:
        settings = settings or EngineSettings()
        return cls(max_depth=settings.max_depth, locale=settings.locale, **kwargs)

    def descend(self) -> ConversionContext:
        return replace(self, depth=self.depth + 1)

    @property
    def depth_limit(self) -> int:
        return min(self.max_depth, MAX_NESTING_DEPTH)

    @property
    def children_allowed(self) -> bool:
        return self.depth + 1 <= self.depth_limit

    @property
    def text_renderer(self) -> TextRunRenderer:
        return TextRunRenderer(resolve_page=self.resolve_page)

    def rich_text(self, runs: Sequence[TextRun] | None) -> str:
        return self.text_renderer.render(runs)

    def plain_text(self, runs: Sequence[TextRun] | None) -> str:
        return self.text_renderer.plain_text(runs)

    def resource_url(self, url: str) -> str | None:
        if not url:
            return None
        if self.resolve_resource is None:
            return url
        return self.resolve_resource(url) or None

    def page_url(self, page_id: str | None) -> str | None:
        if not page_id or self.resolve_page is None:
            return None
        return self.resolve_page(page_id.replace("-", "")) or None

    def render_children(self, block: Block) -> str:
        if self.engine is None or not (block.children or block.extra_field("children_truncated")):
            return ""
        return self.engine.render_children(block, self)

    def report(self, kind: DiagnosticKind, block: Block, message: str = "") -> None:
        if self.diagnostics is not None:
            self.diagnostics.record(kind, type_key(block.type), block.id, message)

    def truncated(self, block: Block) -> str:
        self.report(
            DiagnosticKind.RECURSION_LIMIT_EXCEEDED,
            block,
            f"children deeper than {self.depth_limit} levels were omitted",
        )
        return placeholder_comment("Nested content truncated", block)


@runtime_checkable
class Converter(Protocol):
    def supports(self, block_type: str) -> bool:
        ...

    def convert(self, block: Block, context: ConversionContext) -> str:
        ...


@runtime_checkable
class GroupConverter(Converter, Protocol):
    """Converter that renders a run of consecutive sibling blocks at once."""

    def convert_group(self, blocks: Sequence[Block], context: ConversionContext) -> str:
        ...


class BaseConverter:
    block_types: tuple[str, ...] = ()

    def supports(self, block_type: str) -> bool:
        return type_key(block_type) in self.block_types

    def convert(self, block: Block, context: ConversionContext) -> str:  # pragma: no cover - abstract
        raise NotImplementedError


def placeholder_comment(label: str, block: Block) -> str:
    block_id = block.id or "unknown"
    return f"<!-- {label}: {escape(type_key(block.type))} (ID: {escape(block_id)}) -->"


__all__ = [
    "BaseConverter",
    "ConversionContext",
    "ConversionResult",
    "Converter",
    "GroupConverter",
    "ResourceResolver",
    "placeholder_comment",
]
