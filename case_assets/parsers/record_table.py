"""
Generic JSON record-table parser.

The catch-all structured view for JSON assets: a list of row objects,
either bare or inside a `data`/`rows` envelope. Generated datasets
sometimes nest CSV text inside the envelope (`{"data": "a,b\\n1,2"}`);
that CSV is parsed and merged back with the envelope's metadata.
"""

import json
import re
from typing import Any, Optional

from case_assets.models.parsed import ParsedTable
from case_assets.parsers.csv_parser import csv_to_records, looks_like_csv
from case_assets.parsers.json_recovery import load_json

DEFAULT_TITLE = "Data Sheet"
EMPTY_CELL = "—"


def parse_record_table(content: str) -> Optional[ParsedTable]:
    """
    Parses JSON text into a record table.

    Args:
        content (str): Raw JSON text.

    Returns:
        Optional[ParsedTable]: The table, or None for invalid JSON or when
        no non-empty list of row objects is found.
    """

    ok, parsed = load_json(content)
    if not ok:
        return None
    return record_table_from_value(parsed)


def record_table_from_value(parsed: Any) -> Optional[ParsedTable]:
    """Builds a record table from an already decoded JSON value."""

    title = DEFAULT_TITLE
    description = None
    units = {}
    table_data = None

    if isinstance(parsed, list):
        table_data = parsed
    elif isinstance(parsed, dict):
        if isinstance(parsed.get("data"), str) and looks_like_csv(parsed["data"]):
            records = csv_to_records(parsed["data"])
            if records is None:
                return None
            parsed = {**parsed, "data": records}

        title = parsed.get("name") or parsed.get("title") or DEFAULT_TITLE
        description = parsed.get("description") or None
        if isinstance(parsed.get("units"), dict):
            units = {str(k): str(v) for k, v in parsed["units"].items()}

        for key in ("data", "rows"):
            if isinstance(parsed.get(key), list):
                table_data = parsed[key]
                break
    else:
        return None

    if not table_data:
        return None

    first_row = table_data[0]
    if not isinstance(first_row, dict) or not first_row:
        return None

    rows = [row if isinstance(row, dict) else {} for row in table_data]

    return ParsedTable(
        headers=[str(key) for key in first_row.keys()],
        rows=rows,
        title=str(title),
        description=str(description) if description is not None else None,
        units=units,
    )


def humanize_header(header: str) -> str:
    """`revenue_growth` -> `Revenue Growth`."""
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), header.replace("_", " "))


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        cleaned = value.replace(",", "").strip()
        if not cleaned:
            return None
        try:
            return float(cleaned)
        except ValueError:
            return None
    return None


def _plain_number(number: float) -> str:
    return str(int(number)) if number.is_integer() else repr(number)


def _grouped_number(number: float) -> str:
    text = f"{number:,.2f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def _plain_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def format_cell(value: Any, unit: Optional[str] = None) -> str:
    """
    Formats a cell for display, applying unit metadata.

    Args:
        value (Any): Raw cell value.
        unit (Optional[str]): Unit description for the column, e.g.
            `USD Millions` or `Percentage`.

    Returns:
        str: Display text. Empty values become an em dash.

    Example:
        >>> format_cell("2500000", "USD Millions")
        'USD 2.50M'
    """

    if value is None or value == "":
        return EMPTY_CELL

    number = _to_number(value)
    if unit and number is not None:
        if "Percentage" in unit or "%" in unit:
            return f"{_plain_number(number)}%"
        if "USD" in unit or "EUR" in unit:
            currency = "EUR" if "EUR" in unit else "USD"
            if "Millions" in unit:
                return f"{currency} {number / 1_000_000:.2f}M"
            return f"{currency} {_grouped_number(number)}"

    return _plain_value(value)
