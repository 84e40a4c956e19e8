"""Extract a table name and typed column list from CREATE TABLE text."""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple

from shared.logger import get_logger

logger = get_logger(__name__)


class ColumnType(str, Enum):
    """Coarse value buckets used to pick a SQL literal form."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class ColumnInfo:
    """A column name and its inferred bucket."""

    name: str
    type: ColumnType


@dataclass
class SchemaInfo:
    """Result of parsing schema text."""

    table_name: str = ""
    columns: List[ColumnInfo] = field(default_factory=list)

    def find_column(self, name: str) -> Optional[ColumnInfo]:
        """
        Look up a column by exact name, then case-insensitively.

        Args:
            name: Column name as written in a CSV header

        Returns:
            Matching ColumnInfo, or None
        """
        for col in self.columns:
            if col.name == name:
                return col

        lowered = name.lower()
        for col in self.columns:
            if col.name.lower() == lowered:
                return col

        return None


CREATE_TABLE_RE = re.compile(r"create\s+table", re.IGNORECASE)
TABLE_NAME_RE = re.compile(r"\s+([^\s(]+)")
COLUMN_CLAUSE_RE = re.compile(r'^\s*(?:"([^"]+)"|([^\s"]+))\s+([^,\s]+)')

# Table-level clauses that read like "name type" but declare no column.
CONSTRAINT_KEYWORDS = frozenset(
    ["constraint", "primary", "foreign", "unique", "check", "exclude", "like"]
)

NUMERIC_TYPE_MARKERS = ("int", "serial", "decimal", "numeric", "float", "double")

# (column name, declared type lowercased) -> matches?
TypeRule = Tuple[Callable[[str, str], bool], ColumnType]

# Ordered: first match wins, name rules before declared type.
TYPE_RULES: List[TypeRule] = [
    (lambda name, declared: name.startswith("is_"), ColumnType.BOOLEAN),
    (lambda name, declared: name.endswith("_at"), ColumnType.TIMESTAMP),
    (
        lambda name, declared: any(marker in declared for marker in NUMERIC_TYPE_MARKERS),
        ColumnType.NUMBER,
    ),
]


def infer_column_type(name: str, declared_type: str) -> ColumnType:
    """
    Classify a column from its name and declared SQL type.

    Args:
        name: Column name
        declared_type: Type token from the schema (e.g. "VARCHAR(255)")

    Returns:
        ColumnType bucket, STRING when no rule matches
    """
    declared = declared_type.lower()
    for matches, column_type in TYPE_RULES:
        if matches(name, declared):
            return column_type
    return ColumnType.STRING


def split_clauses(body: str) -> List[str]:
    """
    Split a column list into clauses.

    Clauses end at a newline or at a comma outside parentheses and quotes,
    so "price decimal(10,2)" and "DEFAULT 'a, b'" stay in one piece.
    A -- comment runs to the end of its line and is dropped. Quotes
    don't span lines.
    """
    clauses = []
    current = []
    depth = 0
    quote = None

    i = 0
    length = len(body)
    while i < length:
        char = body[i]

        if char == "\n":
            quote = None
            clauses.append("".join(current))
            current = []
            i += 1
            continue

        if quote:
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
        elif char == "-" and body.startswith("--", i):
            newline = body.find("\n", i)
            i = length if newline == -1 else newline
            continue
        elif char == "(":
            depth += 1
        elif char == ")" and depth > 0:
            depth -= 1
        elif char == "," and depth == 0:
            clauses.append("".join(current))
            current = []
            i += 1
            continue

        current.append(char)
        i += 1

    clauses.append("".join(current))
    return clauses


def parse_column(clause: str) -> Optional[ColumnInfo]:
    """
    Parse one "name type ..." clause.

    Returns:
        ColumnInfo, or None for blank lines and table constraints
    """
    match = COLUMN_CLAUSE_RE.match(clause)
    if not match:
        return None

    quoted_name, bare_name, declared_type = match.groups()
    if bare_name is not None and bare_name.lower() in CONSTRAINT_KEYWORDS:
        return None

    name = quoted_name if quoted_name is not None else bare_name
    return ColumnInfo(name=name, type=infer_column_type(name, declared_type))


def _parse_columns(block: str) -> List[ColumnInfo]:
    start = block.find("(")
    if start == -1:
        return []

    end = block.rfind(")")
    if end < start:
        end = len(block)

    columns = []
    for clause in split_clauses(block[start + 1 : end]):
        column = parse_column(clause)
        if column:
            columns.append(column)

    return columns


def parse_schema(schema: str) -> SchemaInfo:
    """
    Parse free-form schema text into a SchemaInfo.

    Text before the first CREATE TABLE is ignored. Every block contributes
    its columns in document order; the table name comes from the last block
    that names one. Clauses that don't look like "name type" are skipped.
    Never raises.

    Args:
        schema: Text containing zero or more CREATE TABLE statements

    Returns:
        SchemaInfo, empty when nothing could be extracted
    """
    info = SchemaInfo()

    blocks = CREATE_TABLE_RE.split(schema)[1:]
    for block in blocks:
        if not block.strip():
            continue

        name_match = TABLE_NAME_RE.search(block)
        if name_match:
            info.table_name = name_match.group(1).replace('"', "").replace(";", "").strip()

        info.columns.extend(_parse_columns(block))

    logger.debug(f"Parsed schema: table={info.table_name!r}, {len(info.columns)} columns")
    return info
