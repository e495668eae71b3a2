"""Conversion entry point wiring the converter registry."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, replace
from functools import lru_cache
from typing import Any

from block_markup.diagnostics import BlockMarkupError, DiagnosticKind, Diagnostics
from block_markup.models.blocks import Block, parse_blocks, type_key
from block_markup.renderers.base import (
    ConversionContext,
    ConversionResult,
    Converter,
    GroupConverter,
    placeholder_comment,
)
from block_markup.renderers.registry import ConverterRegistry, default_registry

from .components import FallbackConverter
from .helpers import join_sections

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MarkupRenderer:
    """Walks a block tree and dispatches each node to its converter.

    Failures inside a converter never escape: the offending block becomes a
    visible placeholder, a diagnostic is recorded and its siblings are
    converted as usual.
    """

    registry: ConverterRegistry = field(default_factory=default_registry)
    _fallback: Converter = field(default_factory=FallbackConverter)

    def __post_init__(self) -> None:
        if self.registry.fallback is not None:
            self._fallback = self.registry.fallback

    def convert_blocks(
        self,
        blocks: Iterable[Block | dict[str, Any]],
        context: ConversionContext | None = None,
    ) -> ConversionResult:
        diagnostics = Diagnostics()
        ctx = replace(context or ConversionContext(), engine=self, diagnostics=diagnostics)
        parsed = parse_blocks(list(blocks or ()), depth=ctx.depth, max_depth=ctx.depth_limit)
        markup = self.render_sequence(parsed, ctx)
        if diagnostics.block_type_counts:
            logger.debug("Block type distribution: %s", dict(diagnostics.block_type_counts))
        if diagnostics.unsupported_count:
            logger.info("Converted with %d unsupported block(s)", diagnostics.unsupported_count)
        return ConversionResult(markup=markup, diagnostics=diagnostics)

    def render_sequence(self, blocks: Sequence[Block], context: ConversionContext) -> str:
        sections: list[str] = []
        index = 0
        while index < len(blocks):
            block = blocks[index]
            converter = self._groupable(block)
            if converter is None:
                sections.append(self.render_block(block, context))
                index += 1
                continue
            end = index + 1
            while end < len(blocks) and self._same_run(block, blocks[end]):
                end += 1
            sections.append(self._render_group(converter, blocks[index:end], context))
            index = end
        return join_sections(sections)

    def render_block(self, block: Block, context: ConversionContext) -> str:
        block_type = type_key(block.type)
        self._count(block_type, context)

        if block.extra_field("malformed"):
            context.report(DiagnosticKind.MALFORMED_INPUT, block, "payload failed validation")
            logger.warning("Malformed block payload: %s (ID: %s)", block_type, block.id)
            return placeholder_comment("Malformed block", block)

        converter = self.registry.find(block_type)
        if converter is None:
            logger.warning("Unsupported block type: %s (ID: %s)", block_type, block.id)
            context.report(DiagnosticKind.UNSUPPORTED_TYPE, block, f"no converter registered for {block_type}")
            converter = self._fallback

        try:
            output = converter.convert(block, context)
        except BlockMarkupError as exc:
            logger.warning("Block %s (ID: %s) could not be converted: %s", block_type, block.id, exc)
            context.report(exc.kind, block, str(exc))
            return placeholder_comment("Block conversion failed", block)
        except Exception as exc:
            logger.warning(
                "Converter for %s (ID: %s) raised %s",
                block_type,
                block.id,
                type(exc).__name__,
                exc_info=True,
            )
            context.report(DiagnosticKind.CONVERTER_FAILURE, block, f"{type(exc).__name__}: {exc}")
            return placeholder_comment("Block conversion failed", block)

        if not output or not output.strip():
            return placeholder_comment("Empty block", block)
        return output.strip()

    def render_children(self, block: Block, context: ConversionContext) -> str:
        if not block.children and not block.extra_field("children_truncated"):
            return ""
        if not context.children_allowed or block.extra_field("children_truncated"):
            return context.truncated(block)
        return self.render_sequence(block.children, context.descend())

    # Internal helpers -------------------------------------------------
    def _groupable(self, block: Block) -> GroupConverter | None:
        if block.extra_field("malformed"):
            return None
        converter = self.registry.find(block.type)
        if isinstance(converter, GroupConverter):
            return converter
        return None

    @staticmethod
    def _same_run(first: Block, candidate: Block) -> bool:
        return type_key(first.type) == type_key(candidate.type) and not candidate.extra_field("malformed")

    def _render_group(
        self,
        converter: GroupConverter,
        blocks: Sequence[Block],
        context: ConversionContext,
    ) -> str:
        block_type = type_key(blocks[0].type)
        for _ in blocks:
            self._count(block_type, context)
        try:
            output = converter.convert_group(blocks, context)
        except Exception as exc:
            logger.warning("Grouped %s conversion raised %s", block_type, type(exc).__name__, exc_info=True)
            kind = exc.kind if isinstance(exc, BlockMarkupError) else DiagnosticKind.CONVERTER_FAILURE
            for block in blocks:
                context.report(kind, block, f"{type(exc).__name__}: {exc}")
            return join_sections([placeholder_comment("Block conversion failed", block) for block in blocks])
        if not output or not output.strip():
            return join_sections([placeholder_comment("Empty block", block) for block in blocks])
        return output.strip()

    @staticmethod
    def _count(block_type: str, context: ConversionContext) -> None:
        if context.diagnostics is not None:
            context.diagnostics.count_block(block_type)


@lru_cache(maxsize=1)
def default_renderer() -> MarkupRenderer:
    return MarkupRenderer()


def convert_blocks(
    blocks: Iterable[Block | dict[str, Any]],
    context: ConversionContext | None = None,
    *,
    registry: ConverterRegistry | None = None,
) -> ConversionResult:
    """Convert a block sequence to markup plus the diagnostics gathered on the way."""
    renderer = MarkupRenderer(registry) if registry is not None else default_renderer()
    return renderer.convert_blocks(blocks, context)


__all__ = ["MarkupRenderer", "convert_blocks", "default_renderer"]
