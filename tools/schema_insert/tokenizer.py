"""Character-level CSV tokenizer."""

from typing import List

CsvTable = List[List[str]]


def tokenize_csv(text: str) -> CsvTable:
    """
    Split CSV text into rows of trimmed cells.

    Quoting follows RFC 4180: a double quote opens a quoted field, a doubled
    quote inside one is a literal quote. Line endings may be \\n, \\r or
    \\r\\n. An unterminated quote swallows the rest of the input into the
    current cell.

    Known quirks kept for compatibility with existing exports:
    a trailing empty cell is dropped from its row, and rows without any
    cell (blank lines) are skipped.

    Args:
        text: Raw CSV contents

    Returns:
        List of rows; row 0 is the header
    """
    rows: CsvTable = []
    row: List[str] = []
    value: List[str] = []
    inside_quotes = False

    def flush_row() -> None:
        nonlocal row
        cell = "".join(value).strip()
        if cell:
            row.append(cell)
        if row:
            rows.append(row)
            row = []
        value.clear()

    i = 0
    length = len(text)
    while i < length:
        char = text[i]

        if char == '"':
            if not inside_quotes:
                inside_quotes = True
            elif i + 1 < length and text[i + 1] == '"':
                value.append('"')
                i += 1
            else:
                inside_quotes = False
        elif inside_quotes:
            value.append(char)
        elif char == ",":
            row.append("".join(value).strip())
            value.clear()
        elif char in "\r\n":
            if char == "\r" and i + 1 < length and text[i + 1] == "\n":
                i += 1
            flush_row()
        else:
            value.append(char)

        i += 1

    flush_row()
    return rows
