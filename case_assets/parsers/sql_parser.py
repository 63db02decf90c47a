"""
SQL dump parser.

Extracts tabular data from the `INSERT INTO ... (columns) VALUES (...)`
statements of a generated SQL dump. Statements are split with `sqlparse`
and matched by pattern; nothing is executed. A dump without INSERT
statements (a bare SELECT, DDL only) is not tabular and yields None.
"""

import re
from typing import List, Optional

import sqlparse

from case_assets.models.parsed import ParsedTable

INSERT_PATTERN = re.compile(
    r"INSERT\s+INTO\s+[\w.`\"\[\]]+\s*\(([^)]+)\)\s*VALUES\s*",
    re.IGNORECASE,
)

NULL_TOKENS = ("NULL", "null")


def _scan_tuples(text: str) -> List[str]:
    """
    Returns the bodies of the `(...)` tuples at the start of a VALUES clause.

    Parentheses inside single or double quotes are literal text. Scanning
    stops at the first character that is not part of the tuple list.
    """

    tuples = []
    current = []
    depth = 0
    quote = None

    for char in text:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
        elif depth and char in ("'", '"'):
            quote = char
            current.append(char)
        elif char == "(":
            if depth:
                current.append(char)
            depth += 1
        elif char == ")" and depth:
            depth -= 1
            if depth:
                current.append(char)
            else:
                tuples.append("".join(current))
                current = []
        elif depth:
            current.append(char)
        elif not (char.isspace() or char == ","):
            break

    return tuples


def _split_values(raw: str) -> List[str]:
    """Splits a VALUES tuple on commas outside single or double quotes."""
    values = []
    current = []
    quote = None

    for char in raw:
        if quote:
            current.append(char)
            if char == quote:
                quote = None
        elif char in ("'", '"'):
            quote = char
            current.append(char)
        elif char == ",":
            values.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    values.append("".join(current).strip())
    return values


def _clean_value(value: str) -> Optional[str]:
    if value in NULL_TOKENS:
        return None
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1].replace("''", "'")
    return value


def _clean_column(column: str) -> str:
    return column.strip().replace("`", "").replace('"', "")


def parse_sql_inserts(content: str) -> Optional[ParsedTable]:
    """
    Builds a table from the INSERT statements of a SQL dump.

    The column list of the first INSERT is used as headers. Multi-row
    `VALUES (...), (...)` clauses produce one row per tuple.

    Args:
        content (str): Raw SQL text.

    Returns:
        Optional[ParsedTable]: The extracted rows, or None when no INSERT
        statement is found.
    """

    if not isinstance(content, str) or not content.strip():
        return None

    columns = None
    rows = []

    for statement in sqlparse.split(content):
        for match in INSERT_PATTERN.finditer(statement):
            if columns is None:
                columns = [_clean_column(c) for c in match.group(1).split(",")]
            for values in _scan_tuples(statement[match.end():]):
                rows.append([_clean_value(v) for v in _split_values(values)])

    if columns is None:
        return None

    return ParsedTable(headers=columns, rows=rows, title="Data Table")
