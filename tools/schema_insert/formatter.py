"""Turn CSV cell strings into SQL literals."""

import re
from typing import Dict, Optional

from .schema import ColumnType

SLUG_COLUMN = "slug"

TRUE_VALUES = ("1", "true", "yes")

SURROUNDING_QUOTES_RE = re.compile(r"""^['"](.+)['"]$""")

# PostgreSQL reserved words that need quoting as identifiers
POSTGRES_RESERVED_WORDS = frozenset(
    [
        "all", "analyse", "analyze", "and", "any", "array", "as", "asc", "asymmetric",
        "authorization", "binary", "both", "case", "cast", "check", "collate", "column",
        "constraint", "create", "cross", "current_catalog", "current_date", "current_role",
        "current_time", "current_timestamp", "current_user", "default", "deferrable",
        "desc", "distinct", "do", "else", "end", "except", "false", "fetch", "for",
        "foreign", "from", "grant", "group", "having", "in", "initially", "intersect",
        "into", "lateral", "leading", "limit", "localtime", "localtimestamp", "not",
        "null", "offset", "on", "only", "or", "order", "placing", "primary", "references",
        "returning", "select", "session_user", "some", "symmetric", "table", "then", "to",
        "trailing", "true", "union", "unique", "user", "using", "variadic", "when", "where",
        "window", "with",
    ]
)

UNSAFE_IDENTIFIER_RE = re.compile(r"[^a-zA-Z0-9_]")


class SlugRegistry:
    """
    Hands out unique slugs for one conversion run.

    The first sighting of a slug is returned as is; repeats get a numeric
    suffix that keeps counting up for the lifetime of the registry.
    """

    def __init__(self):
        self._counters: Dict[str, int] = {}

    def make_unique(self, candidate: str) -> str:
        """
        Return a slug not handed out before by this registry.

        Args:
            candidate: Raw slug text (lowercased and trimmed here)

        Returns:
            The normalized slug, or "{slug}-{n}" if it was already used
        """
        base = candidate.strip().lower()
        if base not in self._counters:
            self._counters[base] = 0
            return base

        self._counters[base] += 1
        return f"{base}-{self._counters[base]}"


def quote_literal(value: str) -> str:
    """Single-quote a string, doubling embedded quotes."""
    escaped = value.replace("'", "''")
    return f"'{escaped}'"


def _should_quote_identifier(identifier: str) -> bool:
    """Check if an identifier needs double quotes."""
    return (
        identifier.lower() in POSTGRES_RESERVED_WORDS
        or bool(UNSAFE_IDENTIFIER_RE.search(identifier))
        or identifier[:1].isdigit()
    )


def quote_identifier(identifier: str) -> str:
    """
    Double-quote an identifier when Postgres would need it.

    Args:
        identifier: Table or column name

    Returns:
        The name, wrapped in double quotes if it is a reserved word,
        contains characters outside [A-Za-z0-9_] or starts with a digit
    """
    if _should_quote_identifier(identifier):
        return f'"{identifier}"'
    return identifier


def _is_now(value: str) -> bool:
    """Check if a value is NOW() or NOW, optionally quoted."""
    unquoted = SURROUNDING_QUOTES_RE.sub(r"\1", value)
    return unquoted.upper() in ("NOW()", "NOW")


def format_value(
    value: str,
    column_type: ColumnType,
    column_name: str,
    slugs: Optional[SlugRegistry] = None,
) -> str:
    """
    Format a raw CSV cell as a SQL literal.

    Empty cells become NULL and NOW()/NOW (optionally quoted) becomes the
    NOW() call for every column type. A column named "slug" is deduplicated
    through the registry and always quoted. Everything else is rendered
    by type.

    Args:
        value: Raw cell text
        column_type: Bucket of the target column
        column_name: Header the cell sits under
        slugs: Registry shared across the rows of one run

    Returns:
        SQL literal ready to drop into a VALUES tuple
    """
    trimmed = value.strip()
    if not trimmed:
        return "NULL"

    if column_name == SLUG_COLUMN and slugs is not None:
        return quote_literal(slugs.make_unique(trimmed))

    if _is_now(trimmed):
        return "NOW()"

    if column_type == ColumnType.BOOLEAN:
        return "TRUE" if trimmed.lower() in TRUE_VALUES else "FALSE"

    if column_type == ColumnType.NUMBER:
        # Passed through unvalidated
        return trimmed

    if column_type == ColumnType.TIMESTAMP and trimmed.upper() == "NULL":
        return "NULL"

    return quote_literal(trimmed)
