"""
Presentation builders.

Turn parsed shapes into presentation models. Builders trust the parsers'
structure but not the generated values inside it: a node that is not an
object, or a field holding an object where text is expected, fails
validation here and is caught by the containment boundary.
"""

from typing import Any, List

from case_assets.models.parsed import ParsedRecordSet, ParsedSlideDeck, ParsedTable, ParsedTimeSeries
from case_assets.models.presentation import (
    ChartPresentation,
    ChartSeries,
    Notice,
    OrgChartPresentation,
    OrgNodeCard,
    SlideDeckPresentation,
    StakeholderCard,
    StakeholderPresentation,
    TablePresentation,
)
from case_assets.parsers.record_table import format_cell, humanize_header

MAX_LISTED_REPORTS = 5
CHART_COLORS = ("#3b82f6", "#10b981", "#f59e0b", "#ef4444", "#8b5cf6", "#ec4899")


def _require_object(value: Any, what: str, index: int) -> dict:
    if not isinstance(value, dict):
        raise TypeError(f"{what} #{index + 1} is not an object (got {type(value).__name__})")
    return value


def _text_items(items: Any) -> List[str]:
    return list(items) if isinstance(items, list) else []


def _takeaways(items: List[Any]) -> List[str]:
    return [str(item) for item in items]


def positional_table(table: ParsedTable, title: str) -> TablePresentation:
    """CSV and SQL tables: raw headers, cells as parsed (None kept for NULL)."""

    rows = []
    for row in table.rows:
        cells = [row[idx] if idx < len(row) else "" for idx in range(len(table.headers))]
        rows.append(cells)

    return TablePresentation(
        title=table.title or title,
        headers=table.headers,
        rows=rows,
        row_count=len(rows),
    )


def record_table(table: ParsedTable) -> TablePresentation:
    """JSON data sheets: humanized headers, cells formatted with units."""

    rows = []
    for idx in range(len(table.rows)):
        rows.append([format_cell(table.cell(idx, h), table.units.get(h)) for h in table.headers])

    return TablePresentation(
        title=table.title or "Data Sheet",
        description=table.description,
        headers=[humanize_header(h) for h in table.headers],
        rows=rows,
        row_count=len(rows),
        units=table.units,
    )


def _node_name(node: dict) -> str:
    return node.get("name") or node.get("title") or "Unnamed"


def org_chart(record_set: ParsedRecordSet) -> OrgChartPresentation:
    nodes = []
    for idx, raw in enumerate(record_set.records):
        node = _require_object(raw, "Org chart node", idx)
        children = node.get("children") if isinstance(node.get("children"), list) else []
        reports = [
            _node_name(_require_object(child, "Direct report", c_idx))
            for c_idx, child in enumerate(children[:MAX_LISTED_REPORTS])
        ]
        nodes.append(OrgNodeCard(
            name=_node_name(node),
            title=node.get("title"),
            role=node.get("role"),
            department=node.get("department"),
            reports_to=node.get("reportsTo"),
            direct_reports=reports,
            more_reports=max(0, len(children) - MAX_LISTED_REPORTS),
        ))

    return OrgChartPresentation(
        title=record_set.title or "Organizational Chart",
        summary=record_set.summary,
        nodes=nodes,
        key_takeaways=_takeaways(record_set.key_takeaways),
    )


def stakeholders(record_set: ParsedRecordSet) -> StakeholderPresentation:
    cards = []
    for idx, raw in enumerate(record_set.records):
        profile = _require_object(raw, "Stakeholder profile", idx)
        cards.append(StakeholderCard(
            name=_node_name(profile),
            title=profile.get("title") or profile.get("role"),
            department=profile.get("department"),
            influence=profile.get("influence"),
            concerns=_text_items(profile.get("concerns")),
            motivations=_text_items(profile.get("motivations")),
            priorities=_text_items(profile.get("priorities")),
        ))

    return StakeholderPresentation(
        title=record_set.title or "Stakeholder Profiles",
        summary=record_set.summary,
        stakeholders=cards,
        key_takeaways=_takeaways(record_set.key_takeaways),
    )


def chart(series: ParsedTimeSeries) -> ChartPresentation:
    return ChartPresentation(
        title=series.title or "Market Data",
        summary=series.summary,
        chart_type=series.chart_type,
        time_key=series.time_key,
        series=[
            ChartSeries(key=key, label=humanize_header(key), color=CHART_COLORS[idx % len(CHART_COLORS)])
            for idx, key in enumerate(series.series_keys)
        ],
        points=series.points,
        key_takeaways=_takeaways(series.key_takeaways),
    )


def slide_deck(deck: ParsedSlideDeck, compiled: bool) -> SlideDeckPresentation:
    """
    Compiled decks keep directives and speaker notes; the markdown
    fallback shows the slide bodies only.
    """

    notices = []
    if deck.format_warning:
        notices.append(Notice(level="warning", message=f"Non-standard presentation format. {deck.format_warning}"))

    if compiled:
        slides = deck.slides
        directives = deck.directives
    else:
        slides = [slide.model_copy(update={"notes": [], "directives": {}}) for slide in deck.slides]
        directives = {}

    return SlideDeckPresentation(
        mode="compiled" if compiled else "markdown_fallback",
        slides=slides,
        slide_count=len(slides),
        directives=directives,
        notices=notices,
    )


def fallback_notice(failed_as: str, shown_as: str) -> Notice:
    return Notice(level="info", message=f"Unable to parse as {failed_as}, showing as {shown_as}")
