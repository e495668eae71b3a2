from __future__ import annotations

import pytest
from pydantic import ValidationError

from block_markup.models.blocks import (
    Block,
    BlockType,
    CalloutBlock,
    FileReference,
    HeadingBlock,
    ImageBlock,
    LinkToPageBlock,
    ParagraphBlock,
    TableRowBlock,
    ToDoBlock,
    parse_block,
    parse_blocks,
)


def test_payload_fields_are_lifted(run_factory):
    block = parse_block(
        {
            "object": "block",
            "id": "p1",
            "type": "paragraph",
            "has_children": False,
            "paragraph": {"rich_text": [run_factory("Hi")], "color": "red"},
        }
    )

    assert isinstance(block, ParagraphBlock)
    assert block.type is BlockType.PARAGRAPH
    assert block.rich_text[0].content == "Hi"
    assert block.color == "red"


def test_heading_level_follows_type():
    heading = parse_block({"id": "h", "type": "heading_3", "heading_3": {"rich_text": [], "is_toggleable": True}})

    assert isinstance(heading, HeadingBlock)
    assert heading.level == 3
    assert heading.is_toggleable


def test_nested_children_are_parsed(run_factory):
    block = parse_block(
        {
            "id": "t",
            "type": "toggle",
            "toggle": {"rich_text": [run_factory("Outer")]},
            "children": [{"id": "c", "type": "to_do", "to_do": {"rich_text": [], "checked": True}}],
        }
    )

    assert isinstance(block.children[0], ToDoBlock)
    assert block.children[0].checked


def test_unknown_type_keeps_extras(run_factory):
    block = parse_block({"id": "w", "type": "widget", "widget": {"rich_text": [run_factory("x")], "size": 3}})

    assert type(block) is Block
    assert block.type == "widget"
    assert block.extra_field("size") == 3
    assert block.extra_field("missing", "default") == "default"


def test_invalid_payload_is_salvaged():
    block = parse_block({"id": "bad", "type": "table", "table": {"table_width": -2}})

    assert type(block) is Block
    assert block.id == "bad"
    assert block.type == "table"
    assert block.extra_field("malformed") is True


def test_non_mapping_payload_is_salvaged():
    block = parse_block("not a block")

    assert block.type == "unknown"
    assert block.extra_field("malformed") is True


def test_children_past_max_depth_are_not_parsed():
    payload = {"id": "leaf", "type": "divider", "divider": {}}
    for level in range(5000):
        payload = {"id": f"t{level}", "type": "toggle", "toggle": {}, "children": [payload]}

    block = parse_block(payload, max_depth=2)

    assert block.extra_field("children_truncated") is None
    grandchild = block.children[0].children[0]
    assert grandchild.children == ()
    assert grandchild.extra_field("children_truncated") is True


def test_parse_depth_starts_from_the_given_level():
    child = {"id": "c", "type": "paragraph", "paragraph": {}}
    block = parse_block(
        {"id": "p", "type": "toggle", "toggle": {}, "children": [child]},
        depth=3,
        max_depth=3,
    )

    assert block.children == ()
    assert block.extra_field("children_truncated") is True


def test_parse_blocks_skips_none_and_passes_models_through():
    existing = ParagraphBlock(id="keep")

    parsed = parse_blocks([existing, None, {"id": "d", "type": "divider", "divider": {}}])

    assert parsed[0] is existing
    assert [block.type_tag for block in parsed] == ["paragraph", "divider"]


def test_blocks_are_frozen():
    block = ParagraphBlock(id="p")

    with pytest.raises(ValidationError):
        block.color = "red"


def test_file_reference_shapes():
    hosted = FileReference.model_validate(
        {"type": "file", "file": {"url": "https://s3/x.png", "expiry_time": "2025-01-01T00:00:00Z"}}
    )
    external = FileReference.model_validate({"type": "external", "external": {"url": "https://cdn/y.png"}})
    bare = FileReference.model_validate("https://cdn/z.png")

    assert (hosted.kind, hosted.url, hosted.expiry_time) == ("file", "https://s3/x.png", "2025-01-01T00:00:00Z")
    assert (external.kind, external.url) == ("external", "https://cdn/y.png")
    assert bare.url == "https://cdn/z.png"


def test_media_block_exposes_url_and_caption(run_factory):
    image = parse_block(
        {
            "id": "i",
            "type": "image",
            "image": {
                "type": "external",
                "external": {"url": "https://cdn/cat.png"},
                "caption": [run_factory("Cat")],
            },
        }
    )

    assert isinstance(image, ImageBlock)
    assert image.url == "https://cdn/cat.png"
    assert image.caption[0].content == "Cat"


def test_callout_icon_shapes():
    emoji = parse_block({"id": "c", "type": "callout", "callout": {"icon": {"type": "emoji", "emoji": "🔥"}}})
    external = parse_block(
        {"id": "d", "type": "callout", "callout": {"icon": {"type": "external", "external": {"url": "https://i/x.svg"}}}}
    )

    assert isinstance(emoji, CalloutBlock)
    assert emoji.icon.emoji == "🔥"
    assert external.icon.kind == "external"
    assert external.icon.url == "https://i/x.svg"


def test_table_row_cells():
    row = parse_block(
        {
            "id": "r",
            "type": "table_row",
            "table_row": {"cells": [[{"type": "text", "plain_text": "a", "text": {"content": "a"}}], []]},
        }
    )

    assert isinstance(row, TableRowBlock)
    assert [len(cell) for cell in row.cells] == [1, 0]


def test_link_to_page_targets():
    page = LinkToPageBlock.model_validate({"id": "l", "type": "link_to_page", "link_to_page": {"page_id": "p-1"}})
    database = LinkToPageBlock.model_validate(
        {"id": "m", "type": "link_to_page", "link_to_page": {"type": "database_id", "database_id": "db-1"}}
    )

    assert (page.target_id, page.target_kind) == ("p-1", "page")
    assert (database.target_id, database.target_kind) == ("db-1", "database")
