"""Property formatting, type inference and grid column descriptors."""

from .columns import build_columns, column_config_for
from .formatter import DEFAULT_FORMATTER, PropertyFormatter, format_property, format_row, format_values
from .inference import infer_type, resolve_property_type

__all__ = [
    "DEFAULT_FORMATTER",
    "PropertyFormatter",
    "build_columns",
    "column_config_for",
    "format_property",
    "format_row",
    "format_values",
    "infer_type",
    "resolve_property_type",
]
