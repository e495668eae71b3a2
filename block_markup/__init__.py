"""Block-to-markup conversion and property formatting engine."""

__version__ = "0.1.0"

from .config import EngineSettings, load_settings  # noqa: E402
from .diagnostics import DiagnosticKind, Diagnostics  # noqa: E402
from .models import Block, BlockType, ColumnConfig, FormattedValue, PropertyType, TextRun  # noqa: E402
from .properties import (  # noqa: E402
    PropertyFormatter,
    build_columns,
    column_config_for,
    format_property,
    format_row,
    infer_type,
)
from .renderers import (  # noqa: E402
    ConversionContext,
    ConversionResult,
    ConverterRegistry,
    MarkupRenderer,
    convert_blocks,
    default_registry,
)

__all__ = [
    "Block",
    "BlockType",
    "ColumnConfig",
    "ConversionContext",
    "ConversionResult",
    "ConverterRegistry",
    "DiagnosticKind",
    "Diagnostics",
    "EngineSettings",
    "FormattedValue",
    "MarkupRenderer",
    "PropertyFormatter",
    "PropertyType",
    "TextRun",
    "__version__",
    "build_columns",
    "column_config_for",
    "convert_blocks",
    "default_registry",
    "format_property",
    "format_row",
    "infer_type",
    "load_settings",
]
