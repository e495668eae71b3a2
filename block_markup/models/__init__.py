"""Data model: blocks, text runs, properties, formatted values and columns."""

from .blocks import Block, BlockType, parse_block, parse_blocks
from .columns import Alignment, ColumnConfig, FilterKind, FormatterKind, SorterKind
from .formatted import EMPTY, Badge, FileLink, FormattedValue, LinkValue, PersonBadge, RelationSummary
from .properties import PropertyType, parse_property
from .rich_text import Annotations, TextRun, text_runs

__all__ = [
    "Alignment",
    "Annotations",
    "Badge",
    "Block",
    "BlockType",
    "ColumnConfig",
    "EMPTY",
    "FileLink",
    "FilterKind",
    "FormattedValue",
    "FormatterKind",
    "LinkValue",
    "PersonBadge",
    "PropertyType",
    "RelationSummary",
    "SorterKind",
    "TextRun",
    "parse_block",
    "parse_blocks",
    "parse_property",
    "text_runs",
]
