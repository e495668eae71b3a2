from __future__ import annotations

from block_markup.models.blocks import BlockType
from block_markup.renderers import BaseConverter, ConverterRegistry, MarkupRenderer, default_registry
from block_markup.renderers.markup.components import FallbackConverter, ParagraphConverter


class StaticConverter(BaseConverter):
    def __init__(self, output: str, block_types=("paragraph",), enabled: bool = True) -> None:
        self.output = output
        self.block_types = tuple(block_types)
        self.enabled = enabled

    def supports(self, block_type: str) -> bool:
        return self.enabled and super().supports(block_type)

    def convert(self, block, context):
        return self.output


def test_register_returns_new_registry():
    empty = ConverterRegistry()

    extended = empty.register("paragraph", StaticConverter("<p>x</p>"))

    assert "paragraph" not in empty
    assert "paragraph" in extended
    assert len(empty) == 0
    assert len(extended) == 1


def test_default_registry_is_shared_and_unchanged_by_extension():
    base = default_registry()
    extended = base.register("paragraph", StaticConverter("override"), priority=5)

    assert default_registry() is base
    assert isinstance(base.find("paragraph"), ParagraphConverter)
    assert isinstance(extended.find("paragraph"), StaticConverter)


def test_higher_priority_wins_regardless_of_order():
    high = StaticConverter("high")
    low = StaticConverter("low")

    registry = ConverterRegistry().register("paragraph", high, priority=10).register("paragraph", low)

    assert registry.find("paragraph") is high


def test_latest_registration_wins_on_equal_priority():
    first = StaticConverter("first")
    second = StaticConverter("second")

    registry = ConverterRegistry().register("paragraph", first).register("paragraph", second)

    assert registry.find(BlockType.PARAGRAPH) is second


def test_converter_that_declines_is_skipped():
    declining = StaticConverter("declined", enabled=False)
    accepting = StaticConverter("accepted")

    registry = ConverterRegistry().register("paragraph", accepting).register("paragraph", declining, priority=3)

    assert registry.find("paragraph") is accepting


def test_resolve_uses_fallback_for_unknown_types():
    fallback = FallbackConverter()
    registry = ConverterRegistry().with_fallback(fallback)

    assert registry.find("widget") is None
    assert registry.resolve("widget") is fallback


def test_default_registry_covers_builtin_types():
    registry = default_registry()

    for block_type in (
        "paragraph",
        "heading_1",
        "heading_2",
        "heading_3",
        "bulleted_list_item",
        "numbered_list_item",
        "to_do",
        "toggle",
        "quote",
        "callout",
        "code",
        "equation",
        "divider",
        "table",
        "image",
        "file",
        "pdf",
        "video",
        "audio",
        "embed",
        "bookmark",
        "link_preview",
        "column_list",
        "column",
        "child_page",
        "child_database",
        "link_to_page",
        "synced_block",
    ):
        assert block_type in registry, block_type
    assert "table_of_contents" not in registry
    assert isinstance(registry.fallback, FallbackConverter)


def test_custom_registry_changes_rendering(block_factory):
    registry = default_registry().register("divider", StaticConverter("<hr class=\"custom\"/>", ("divider",)))

    result = MarkupRenderer(registry).convert_blocks([block_factory("divider")])

    assert result.markup == '<hr class="custom"/>'
