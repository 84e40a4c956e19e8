"""Core schema + CSV to INSERT conversion logic."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from shared.logger import get_logger

from .formatter import SlugRegistry, format_value, quote_identifier
from .schema import ColumnType, SchemaInfo, parse_schema
from .tokenizer import CsvTable, tokenize_csv

logger = get_logger(__name__)

DEFAULT_TABLE_NAME = "table_name"


class FailureReason(str, Enum):
    """Why a conversion was refused."""

    MISSING_SCHEMA = "missing_schema"
    TOO_FEW_ROWS = "too_few_rows"


FAILURE_MESSAGES = {
    FailureReason.MISSING_SCHEMA: "Please enter a table schema first",
    FailureReason.TOO_FEW_ROWS: "CSV file must have at least a header row and one data row",
}


class ConversionError(ValueError):
    """Raised when the inputs can't produce an INSERT statement."""

    def __init__(self, reason: FailureReason, message: Optional[str] = None):
        self.reason = reason
        super().__init__(message or FAILURE_MESSAGES[reason])


@dataclass
class ConversionResult:
    """Generated SQL plus what was learned on the way."""

    sql: str
    table_name: str
    schema: SchemaInfo
    headers: List[str]
    column_types: Dict[str, ColumnType] = field(default_factory=dict)
    row_count: int = 0


class InsertGenerator:
    """
    Build a batch INSERT statement from a CREATE TABLE schema and a CSV.

    The schema decides how each CSV column is rendered (number, boolean,
    string or timestamp); the CSV header decides the column order.
    """

    def __init__(self, default_table: str = DEFAULT_TABLE_NAME):
        """
        Initialize the generator.

        Args:
            default_table: Table name used when the schema has none
        """
        self.default_table = default_table
        logger.debug(f"Initialized InsertGenerator (default table: {default_table})")

    def resolve_column_types(self, headers: List[str], schema: SchemaInfo) -> Dict[str, ColumnType]:
        """
        Match CSV headers to schema columns.

        Exact name first, then case-insensitive. Headers with no matching
        column fall back to STRING.

        Args:
            headers: Header row of the CSV
            schema: Parsed schema

        Returns:
            Mapping of header to ColumnType
        """
        column_types = {}

        for header in headers:
            column = schema.find_column(header)
            if column:
                column_types[header] = column.type
            else:
                logger.debug(f"No schema column for header {header!r}, treating as string")
                column_types[header] = ColumnType.STRING

        return column_types

    def format_rows(
        self,
        rows: CsvTable,
        headers: List[str],
        column_types: Dict[str, ColumnType],
    ) -> List[List[str]]:
        """
        Format data rows into SQL literals.

        Cells are matched to headers by position. One slug registry spans
        all rows so slug values stay unique within the statement.

        Args:
            rows: Data rows (header excluded)
            headers: Header row
            column_types: Output of resolve_column_types()

        Returns:
            Rows of SQL literals
        """
        slugs = SlugRegistry()
        formatted = []

        for row in rows:
            literals = []
            for index, value in enumerate(row):
                header = headers[index] if index < len(headers) else ""
                column_type = column_types.get(header, ColumnType.STRING)
                literal = format_value(value, column_type, header, slugs)
                logger.debug(
                    f"Header: {header}, Value: {value!r}, Type: {column_type.value}, Result: {literal}"
                )
                literals.append(literal)
            formatted.append(literals)

        return formatted

    def build_insert(self, table_name: str, headers: List[str], rows: List[List[str]]) -> str:
        """
        Assemble the INSERT statement.

        Args:
            table_name: Target table (quoted here if needed)
            headers: Column names in CSV order
            rows: Formatted literal rows

        Returns:
            INSERT INTO ... VALUES ...; statement
        """
        columns = ", ".join(quote_identifier(h) for h in headers)
        values = ",\n".join(f"({', '.join(row)})" for row in rows)
        return f"INSERT INTO {quote_identifier(table_name)} ({columns})\nVALUES\n{values};"

    def convert(self, schema_text: str, csv_text: str) -> ConversionResult:
        """
        Convert schema text and CSV text to SQL.

        Args:
            schema_text: CREATE TABLE statement(s)
            csv_text: CSV contents with a header row

        Returns:
            ConversionResult

        Raises:
            ConversionError: If the schema is empty or the CSV has no data row
        """
        if not schema_text or not schema_text.strip():
            raise ConversionError(FailureReason.MISSING_SCHEMA)

        schema = parse_schema(schema_text)
        logger.info(
            f"Extracted table {schema.table_name or '(none)'!r} with {len(schema.columns)} columns"
        )

        lines = tokenize_csv(csv_text)
        if len(lines) < 2:
            raise ConversionError(FailureReason.TOO_FEW_ROWS)

        headers = [h.strip() for h in lines[0]]
        column_types = self.resolve_column_types(headers, schema)
        rows = self.format_rows(lines[1:], headers, column_types)

        table_name = schema.table_name or self.default_table
        sql = self.build_insert(table_name, headers, rows)

        logger.info(f"Generated INSERT with {len(rows)} row(s) for {table_name}")
        return ConversionResult(
            sql=sql,
            table_name=table_name,
            schema=schema,
            headers=headers,
            column_types=column_types,
            row_count=len(rows),
        )

    def convert_file(
        self,
        schema_text: str,
        csv_path: Path,
        output_path: Optional[Path] = None,
    ) -> ConversionResult:
        """
        Convert a CSV file to SQL.

        Args:
            schema_text: CREATE TABLE statement(s)
            csv_path: Path to CSV file
            output_path: Output SQL file path (optional)

        Returns:
            ConversionResult
        """
        logger.info(f"Reading {csv_path}")

        with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
            csv_text = f.read()

        result = self.convert(schema_text, csv_text)

        if output_path:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write(result.sql)
            logger.info(f"Wrote SQL to {output_path}")

        return result
