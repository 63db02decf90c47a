"""
Presentation tree models.

A presentation is the render-ready description of one asset: what to show
(a table, an org chart, a chart, slides, markdown, preformatted text) or
which panel to show instead (invalid content, render error). The front end
picks a component by `kind`; every variant carries its own `notices`
(soft, low-emphasis banners such as "Unable to parse as CSV").
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, Field

from case_assets.models.parsed import Slide


class Notice(BaseModel):
    """
    A user-visible message (toast or inline banner).

    Example:
        >>> Notice(level="warning", message="Asset regenerated with 1 warnings")
    """

    level: Literal["success", "info", "warning", "error"]
    message: str


class PresentationBase(BaseModel):
    notices: List[Notice] = Field(default_factory=list)


class TablePresentation(PresentationBase):
    """Generic record table: CSV, SQL inserts and JSON data sheets."""

    kind: Literal["table"] = "table"
    title: str
    description: Optional[str] = None
    headers: List[str]
    rows: List[List[Optional[str]]]
    row_count: int
    units: Dict[str, str] = Field(default_factory=dict)


class OrgNodeCard(BaseModel):
    name: str
    title: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    reports_to: Optional[str] = None
    direct_reports: List[str] = Field(default_factory=list)
    more_reports: int = 0
    """Direct reports not listed in `direct_reports`."""


class OrgChartPresentation(PresentationBase):
    kind: Literal["org_chart"] = "org_chart"
    title: str = "Organizational Chart"
    summary: Optional[str] = None
    nodes: List[OrgNodeCard]
    key_takeaways: List[str] = Field(default_factory=list)


class StakeholderCard(BaseModel):
    name: str
    title: Optional[str] = None
    department: Optional[str] = None
    influence: Optional[str] = None
    concerns: List[str] = Field(default_factory=list)
    motivations: List[str] = Field(default_factory=list)
    priorities: List[str] = Field(default_factory=list)


class StakeholderPresentation(PresentationBase):
    kind: Literal["stakeholders"] = "stakeholders"
    title: str = "Stakeholder Profiles"
    summary: Optional[str] = None
    stakeholders: List[StakeholderCard]
    key_takeaways: List[str] = Field(default_factory=list)


class ChartSeries(BaseModel):
    key: str
    label: str
    color: str


class ChartPresentation(PresentationBase):
    """Time-series chart: one series draws a line, several draw bars."""

    kind: Literal["chart"] = "chart"
    title: str = "Market Data"
    summary: Optional[str] = None
    chart_type: Literal["line", "bar"]
    time_key: str
    series: List[ChartSeries]
    points: List[Dict[str, Any]]
    key_takeaways: List[str] = Field(default_factory=list)


class MarkdownPresentation(PresentationBase):
    kind: Literal["markdown"] = "markdown"
    content: str


class SlideDeckPresentation(PresentationBase):
    """
    Slides of a presentation deck.

    `compiled` decks apply frontmatter directives (theme, paginate...) and
    keep speaker notes; `markdown_fallback` decks are plain markdown slides.
    """

    kind: Literal["slide_deck"] = "slide_deck"
    mode: Literal["compiled", "markdown_fallback"]
    slides: List[Slide]
    slide_count: int
    directives: Dict[str, Any] = Field(default_factory=dict)


class PreformattedPresentation(PresentationBase):
    """Terminal fallback: monospace preformatted text."""

    kind: Literal["preformatted"] = "preformatted"
    content: str
    language: Optional[str] = None


class InvalidContentPresentation(PresentationBase):
    """
    Data-integrity panel for null, non-string or empty bodies.

    Distinct from parse fallbacks: it signals an upstream data defect.
    """

    kind: Literal["invalid_content"] = "invalid_content"
    reason: Literal["null", "not_string", "empty"]
    heading: str
    message: str
    level: Literal["warning", "error"] = "error"


class RenderFault(BaseModel):
    file_id: Optional[str] = None
    file_name: str
    file_type: Optional[str] = None
    error_type: str
    detail: Optional[str] = None
    """Raw error detail, only populated on request or in verbose mode."""


class RenderErrorPresentation(PresentationBase):
    """Fixed-shape panel substituted for a presentation that failed to render."""

    kind: Literal["render_error"] = "render_error"
    heading: str = "Error Rendering Asset"
    message: str
    fault: RenderFault


Presentation = Annotated[
    Union[
        TablePresentation,
        OrgChartPresentation,
        StakeholderPresentation,
        ChartPresentation,
        MarkdownPresentation,
        SlideDeckPresentation,
        PreformattedPresentation,
        InvalidContentPresentation,
        RenderErrorPresentation,
    ],
    Field(discriminator="kind"),
]
