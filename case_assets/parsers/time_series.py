"""
Time-series JSON parser for market datasets.
"""

from typing import Optional

from case_assets.models.parsed import ParsedTimeSeries
from case_assets.parsers.json_recovery import load_json

TIME_KEYS = ("date", "period", "month", "quarter", "year", "time", "timestamp")
DEFAULT_TIME_KEY = "period"
ARRAY_KEYS = ("data", "values", "series")


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_time_series(content: str) -> Optional[ParsedTimeSeries]:
    """
    Parses a market dataset into chartable points.

    The time axis is the first key of the first point whose lowercase name
    is a known time key (`period` when none matches). Every other key with a
    numeric value in the first point is a series. One series gives a line
    chart, several give a bar chart.

    Args:
        content (str): Raw JSON text.

    Returns:
        Optional[ParsedTimeSeries]: None for invalid JSON, when no point
        array is found, or when there is no numeric series.
    """

    ok, document = load_json(content)
    if not ok:
        return None

    metadata = {}
    points = None
    if isinstance(document, list):
        points = document
    elif isinstance(document, dict):
        metadata = document
        for key in ARRAY_KEYS:
            if isinstance(document.get(key), list):
                points = document[key]
                break

    if not points or not isinstance(points[0], dict):
        return None

    first = points[0]
    time_key = next((k for k in first if k.lower() in TIME_KEYS), DEFAULT_TIME_KEY)
    series_keys = [k for k in first if k != time_key and _is_number(first[k])]
    if not series_keys:
        return None

    takeaways = metadata.get("keyTakeaways")
    return ParsedTimeSeries(
        points=[p for p in points if isinstance(p, dict)],
        time_key=time_key,
        series_keys=series_keys,
        chart_type="line" if len(series_keys) == 1 else "bar",
        title=metadata.get("title") or None,
        summary=metadata.get("summary") or None,
        key_takeaways=takeaways if isinstance(takeaways, list) else [],
    )
