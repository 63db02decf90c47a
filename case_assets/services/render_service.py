"""
Render service.

This module decides how an asset body is shown. Canonical type tags are
dispatched through a table; assets with a missing or generic tag go through
the content sniffer's candidates in order. Whenever a parser finds no
structure the body degrades to the JSON record table, then to preformatted
text, with a soft notice explaining the fallback.

Rendering here may raise on malformed generated data; callers wrap it with
`containment.render_safely`.
"""

import logging
from typing import Callable, Dict, Optional

from case_assets.core.config import Settings, get_settings
from case_assets.models.asset import MARKDOWN_FILE_TYPES, FileType
from case_assets.models.presentation import (
    InvalidContentPresentation,
    MarkdownPresentation,
    Notice,
    Presentation,
    PreformattedPresentation,
)
from case_assets.parsers.csv_parser import parse_csv
from case_assets.parsers.org_chart import parse_org_chart
from case_assets.parsers.record_table import parse_record_table
from case_assets.parsers.slide_deck import parse_slide_deck
from case_assets.parsers.sql_parser import parse_sql_inserts
from case_assets.parsers.stakeholders import parse_stakeholders
from case_assets.parsers.time_series import parse_time_series
from case_assets.services import presenters
from case_assets.util.content_sniffer import Interpretation, sniff

logger = logging.getLogger(__name__)

DATA_SHEET_LABEL = "data sheet"
PLAIN_TEXT_LABEL = "plain text"

INTERPRETATION_LABELS = {
    Interpretation.CSV: "CSV",
    Interpretation.SQL: "SQL",
    Interpretation.MARKDOWN: "Markdown",
    Interpretation.JSON_SHEET: "JSON",
    Interpretation.PREFORMATTED: PLAIN_TEXT_LABEL,
}


# ------------------------------------------------------------------------------
# Integrity checks
# ------------------------------------------------------------------------------

def check_integrity(content) -> Optional[InvalidContentPresentation]:
    """
    Returns the data-integrity panel for unusable bodies, or None.

    A null, non-string or whitespace-only body is an upstream defect, not a
    format problem, and is never handed to a parser.
    """

    if content is None:
        return InvalidContentPresentation(
            reason="null",
            heading="Invalid Content",
            message="The asset content is null. The asset may not have been generated correctly.",
        )
    if not isinstance(content, str):
        return InvalidContentPresentation(
            reason="not_string",
            heading="Invalid Content Type",
            message=f"Expected text content but received {type(content).__name__}.",
        )
    if not content.strip():
        return InvalidContentPresentation(
            reason="empty",
            heading="Empty Content",
            message="This asset has no content. Try regenerating it.",
            level="warning",
        )
    return None


# ------------------------------------------------------------------------------
# Fallback chain
# ------------------------------------------------------------------------------

def degrade(content: str, failed_as: str, language: Optional[str] = None, try_record_table: bool = True):
    """
    Shows content that its parser could not read.

    Tries the JSON record table first, then preformatted text. The returned
    presentation carries an info notice naming both formats.
    """

    logger.debug("Unable to parse content as %s, falling back", failed_as)

    if try_record_table:
        table = parse_record_table(content)
        if table is not None:
            presentation = presenters.record_table(table)
            presentation.notices.append(presenters.fallback_notice(failed_as, DATA_SHEET_LABEL))
            return presentation

    return PreformattedPresentation(
        content=content,
        language=language,
        notices=[presenters.fallback_notice(failed_as, PLAIN_TEXT_LABEL)],
    )


# ------------------------------------------------------------------------------
# Canonical renderers
# ------------------------------------------------------------------------------

def _render_org_chart(content: str, settings: Settings):
    parsed = parse_org_chart(content)
    if parsed is None or not parsed.records:
        return degrade(content, "organizational chart")
    return presenters.org_chart(parsed)


def _render_stakeholders(content: str, settings: Settings):
    parsed = parse_stakeholders(content)
    if parsed is None or not parsed.records:
        return degrade(content, "stakeholder profiles")
    return presenters.stakeholders(parsed)


def _render_market_dataset(content: str, settings: Settings):
    parsed = parse_time_series(content)
    if parsed is None:
        return degrade(content, "time series")
    return presenters.chart(parsed)


def _render_financial_data(content: str, settings: Settings):
    # generated financial sheets are sometimes JSON despite the tag
    if content.lstrip().startswith(("{", "[")):
        table = parse_record_table(content)
        if table is not None:
            return presenters.record_table(table)

    parsed = parse_csv(content)
    if parsed is None:
        return degrade(content, "CSV")
    return presenters.positional_table(parsed, "Financial Data")


def _render_markdown(content: str, settings: Settings):
    return MarkdownPresentation(content=content)


def _render_presentation_deck(content: str, settings: Settings):
    deck = parse_slide_deck(content)

    if not deck.has_frontmatter and not deck.has_separators:
        return MarkdownPresentation(
            content=content,
            notices=[Notice(level="warning", message=f"Non-standard presentation format. {deck.format_warning}")],
        )

    return presenters.slide_deck(deck, compiled=settings.slide_compiler_enabled)


Renderer = Callable[[str, Settings], Presentation]

CANONICAL_RENDERERS: Dict[FileType, Renderer] = {
    FileType.ORG_CHART: _render_org_chart,
    FileType.STAKEHOLDER_PROFILES: _render_stakeholders,
    FileType.MARKET_DATASET: _render_market_dataset,
    FileType.FINANCIAL_DATA: _render_financial_data,
    FileType.PRESENTATION_DECK: _render_presentation_deck,
    **{file_type: _render_markdown for file_type in MARKDOWN_FILE_TYPES},
}


# ------------------------------------------------------------------------------
# Unclassified assets
# ------------------------------------------------------------------------------

def _interpret_csv(content: str, file_name: Optional[str]):
    parsed = parse_csv(content)
    return presenters.positional_table(parsed, file_name or "CSV Data") if parsed else None


def _interpret_sql(content: str, file_name: Optional[str]):
    parsed = parse_sql_inserts(content)
    return presenters.positional_table(parsed, "Data Table") if parsed else None


def _interpret_markdown(content: str, file_name: Optional[str]):
    return MarkdownPresentation(content=content)


def _interpret_json_sheet(content: str, file_name: Optional[str]):
    parsed = parse_record_table(content)
    return presenters.record_table(parsed) if parsed else None


INTERPRETERS = {
    Interpretation.CSV: _interpret_csv,
    Interpretation.SQL: _interpret_sql,
    Interpretation.MARKDOWN: _interpret_markdown,
    Interpretation.JSON_SHEET: _interpret_json_sheet,
}


def _render_unclassified(file_name: Optional[str], mime_type: Optional[str], content: str):
    failed = []

    for interpretation in sniff(file_name, mime_type, content):
        if interpretation is Interpretation.PREFORMATTED:
            break

        presentation = INTERPRETERS[interpretation](content, file_name)
        if presentation is None:
            failed.append(interpretation)
            continue

        if failed:
            presentation.notices.append(presenters.fallback_notice(
                INTERPRETATION_LABELS[failed[0]], INTERPRETATION_LABELS[interpretation],
            ))
        return presentation

    if not failed:
        return PreformattedPresentation(content=content)

    return degrade(
        content,
        INTERPRETATION_LABELS[failed[0]],
        language="sql" if Interpretation.SQL in failed else None,
        try_record_table=Interpretation.JSON_SHEET not in failed,
    )


# ------------------------------------------------------------------------------
# Dispatcher
# ------------------------------------------------------------------------------

def render_asset_content(
    file_type: Optional[str],
    file_name: Optional[str],
    mime_type: Optional[str],
    content,
    settings: Optional[Settings] = None,
) -> Presentation:
    """
    Builds the presentation of an asset body.

    Args:
        file_type (Optional[str]): Declared type tag. Unknown or missing tags
            are sniffed.
        file_name (Optional[str]): File name, used by the sniffer.
        mime_type (Optional[str]): Advisory MIME type.
        content: Raw body. Anything but a non-blank string yields the
            invalid-content panel.
        settings (Optional[Settings]): Overrides `get_settings()`.

    Returns:
        Presentation: Same inputs always give an equal presentation.

    Example:
        >>> render_asset_content("FINANCIAL_DATA", "q3.csv", "text/csv", "Quarter,Revenue\\nQ3,100").kind
        'table'
    """

    invalid = check_integrity(content)
    if invalid is not None:
        return invalid

    settings = settings or get_settings()
    renderer = CANONICAL_RENDERERS.get(FileType.from_tag(file_type))
    if renderer is not None:
        return renderer(content, settings)

    return _render_unclassified(file_name, mime_type, content)
