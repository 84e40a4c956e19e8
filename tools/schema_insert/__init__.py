"""CSV to INSERT - Generate a batch INSERT from a table schema and a CSV."""

from .converter import ConversionError, ConversionResult, FailureReason, InsertGenerator
from .formatter import SlugRegistry, format_value, quote_identifier
from .schema import ColumnInfo, ColumnType, SchemaInfo, infer_column_type, parse_schema
from .store import SchemaStore
from .tokenizer import tokenize_csv

__all__ = [
    "ColumnInfo",
    "ColumnType",
    "ConversionError",
    "ConversionResult",
    "FailureReason",
    "InsertGenerator",
    "SchemaInfo",
    "SchemaStore",
    "SlugRegistry",
    "format_value",
    "infer_column_type",
    "parse_schema",
    "quote_identifier",
    "tokenize_csv",
]
