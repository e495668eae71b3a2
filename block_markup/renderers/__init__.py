"""Renderer implementations and helpers."""

from .rich_text import TextRunRenderer, plain_text, render_rich_text
from .base import BaseConverter, ConversionContext, ConversionResult, Converter, GroupConverter
from .registry import ConverterRegistry, default_registry
from .markup import MarkupRenderer, convert_blocks

__all__ = [
    "BaseConverter",
    "ConversionContext",
    "ConversionResult",
    "Converter",
    "ConverterRegistry",
    "GroupConverter",
    "MarkupRenderer",
    "TextRunRenderer",
    "convert_blocks",
    "default_registry",
    "plain_text",
    "render_rich_text",
]
