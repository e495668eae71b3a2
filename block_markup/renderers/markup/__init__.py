"""Block-comment markup converters and the conversion engine."""

from .components import DEFAULT_CONVERTERS, FallbackConverter
from .lists import BulletedListConverter, ListConverter, NumberedListConverter
from .renderer import MarkupRenderer, convert_blocks, default_renderer

__all__ = [
    "BulletedListConverter",
    "DEFAULT_CONVERTERS",
    "FallbackConverter",
    "ListConverter",
    "MarkupRenderer",
    "NumberedListConverter",
    "convert_blocks",
    "default_renderer",
]
