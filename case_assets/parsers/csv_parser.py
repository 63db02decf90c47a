"""
CSV parser.

Line-oriented CSV reader for generated financial data. Fields may be
double-quoted, quoted fields may contain commas, and a doubled quote (`""`)
inside a quoted field is a literal quote. Blank lines are ignored and the
first non-blank line holds the headers.
"""

from typing import Dict, List, Optional

from case_assets.models.parsed import ParsedTable


def parse_csv_line(line: str) -> List[str]:
    """
    Splits one CSV line on unquoted commas.

    Args:
        line (str): A single line of CSV text.

    Returns:
        List[str]: Trimmed field values, quotes removed.

    Example:
        >>> parse_csv_line('"Acme, Inc.",100')
        ['Acme, Inc.', '100']
    """

    fields = []
    current = []
    in_quotes = False
    i = 0

    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < len(line) and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    fields.append("".join(current).strip())
    return fields


def _non_blank_lines(content: str) -> List[str]:
    return [line for line in content.strip().split("\n") if line.strip()]


def parse_csv(content: str) -> Optional[ParsedTable]:
    """
    Parses CSV text into headers and positional rows.

    Args:
        content (str): Raw CSV text.

    Returns:
        Optional[ParsedTable]: The table, or None when there is no
        non-blank line.
    """

    if not isinstance(content, str):
        return None

    lines = _non_blank_lines(content)
    if not lines:
        return None

    headers = parse_csv_line(lines[0])
    rows = [parse_csv_line(line) for line in lines[1:]]
    return ParsedTable(headers=headers, rows=rows)


def csv_to_records(content: str) -> Optional[List[Dict[str, str]]]:
    """
    Parses CSV text into one dict per data row, keyed by header.

    Missing trailing fields become empty strings.
    """

    table = parse_csv(content)
    if table is None:
        return None

    records = []
    for row in table.rows:
        records.append({
            header: row[idx] if idx < len(row) else ""
            for idx, header in enumerate(table.headers)
        })
    return records


def looks_like_csv(content: str) -> bool:
    """Cheap shape check: at least one comma and more than one line."""
    return isinstance(content, str) and "," in content and len(content.split("\n")) > 1
