"""List converters.

Consecutive sibling list items of the same kind share one wrapper. The
engine hands each run to ``convert_group``; ``convert`` covers the
degenerate run of a single item.
"""

from __future__ import annotations

from collections.abc import Sequence

from block_markup.models.blocks import Block, BlockType
from block_markup.renderers.base import BaseConverter, ConversionContext

from .helpers import class_attr, color_class, wrap_block


class ListConverter(BaseConverter):
    tag = "ul"
    ordered = False

    def convert(self, block: Block, context: ConversionContext) -> str:
        return self.convert_group([block], context)

    def convert_group(self, blocks: Sequence[Block], context: ConversionContext) -> str:
        items = "".join(self._render_item(block, context) for block in blocks)
        attrs = {"ordered": True} if self.ordered else None
        return wrap_block("list", f'<{self.tag} class="wp-block-list">{items}</{self.tag}>', attrs)

    def _render_item(self, block: Block, context: ConversionContext) -> str:
        text = context.rich_text(getattr(block, "rich_text", ()))
        color = color_class(getattr(block, "color", None))
        children = context.render_children(block)
        nested = f"\n{children}\n" if children else ""
        return f"<li{class_attr(color)}>{text}{nested}</li>"


class BulletedListConverter(ListConverter):
    block_types = (BlockType.BULLETED_LIST_ITEM.value,)


class NumberedListConverter(ListConverter):
    block_types = (BlockType.NUMBERED_LIST_ITEM.value,)
    tag = "ol"
    ordered = True


__all__ = ["BulletedListConverter", "ListConverter", "NumberedListConverter"]
