"""
Parsed content shapes.

Structured results produced by the format parsers. Parsers never raise:
they return one of these models, or `None` when the raw string is not in
their format.
"""

from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field, field_validator


class ParsedTable(BaseModel):
    """
    A header row plus data rows.

    Rows are either positional lists (CSV, SQL) or dicts keyed by header
    (JSON record tables).
    """

    headers: List[str]
    rows: List[Any]
    title: Optional[str] = None
    description: Optional[str] = None
    units: Dict[str, str] = Field(default_factory=dict)

    def cell(self, row_index: int, header: str) -> Any:
        """Returns the value of `header` in a row, whatever the row shape."""
        row = self.rows[row_index]
        if isinstance(row, dict):
            return row.get(header)
        column = self.headers.index(header)
        return row[column] if column < len(row) else None


class ParsedRecordSet(BaseModel):
    """Records of an org chart or stakeholder document, with its metadata."""

    records: List[Any]
    title: Optional[str] = None
    summary: Optional[str] = None
    key_takeaways: List[Any] = Field(default_factory=list)

    @field_validator("title", "summary", mode="before")
    @classmethod
    def coerce_text(cls, v):
        # generated metadata is not always a string
        return None if v is None else str(v)


class ParsedTimeSeries(BaseModel):
    """Rows of a time series with its axis and plotted series."""

    points: List[Dict[str, Any]]
    time_key: str
    series_keys: List[str]
    chart_type: Literal["line", "bar"]
    title: Optional[str] = None
    summary: Optional[str] = None
    key_takeaways: List[Any] = Field(default_factory=list)

    @field_validator("title", "summary", mode="before")
    @classmethod
    def coerce_text(cls, v):
        return None if v is None else str(v)


class Slide(BaseModel):
    index: int
    body: str
    title: Optional[str] = None
    notes: List[str] = Field(default_factory=list)
    directives: Dict[str, str] = Field(default_factory=dict)
    """Slide-local directives written as `<!-- key: value -->` comments."""


class ParsedSlideDeck(BaseModel):
    """
    Slides of a markdown deck.

    `has_frontmatter` and `has_separators` are tracked independently;
    `format_warning` is set when either is missing.
    """

    slides: List[Slide]
    directives: Dict[str, Any] = Field(default_factory=dict)
    has_frontmatter: bool = False
    has_separators: bool = False
    format_warning: Optional[str] = None
