"""
Slide-deck parser.

Decks are markdown with an optional leading YAML frontmatter block
(`---\\n...\\n---\\n`) and `---` lines between slides. Generated decks often
miss one or both markers; they still render, with a format warning.
"""

import logging
import re
from typing import Any, Dict, Optional

import yaml

from case_assets.models.parsed import ParsedSlideDeck, Slide

logger = logging.getLogger(__name__)

FRONTMATTER_PATTERN = re.compile(r"^---\s*\n([\s\S]*?)\n---\s*\n")
SEPARATOR_PATTERN = re.compile(r"\n---\n")
HEADING_PATTERN = re.compile(r"^#{1,6}\s+(.+?)\s*#*\s*$", re.MULTILINE)
COMMENT_PATTERN = re.compile(r"<!--([\s\S]*?)-->")
DIRECTIVE_PATTERN = re.compile(r"^(_?[A-Za-z][\w-]*)\s*:\s*(.+)$")


def format_warning(has_frontmatter: bool, has_separators: bool) -> Optional[str]:
    if not has_frontmatter and not has_separators:
        return "Missing deck frontmatter and slide separators."
    if not has_frontmatter:
        return "Missing deck frontmatter."
    if not has_separators:
        return "Missing slide separators."
    return None


def _load_directives(block: str) -> Dict[str, Any]:
    try:
        loaded = yaml.safe_load(block)
    except yaml.YAMLError as e:
        logger.warning("Ignoring unreadable deck frontmatter: %s", e)
        return {}
    if not isinstance(loaded, dict):
        return {}
    return {str(key): value for key, value in loaded.items()}


def _build_slide(index: int, body: str) -> Slide:
    heading = HEADING_PATTERN.search(body)
    notes = []
    directives = {}

    for comment in COMMENT_PATTERN.findall(body):
        text = comment.strip()
        if not text:
            continue
        directive = DIRECTIVE_PATTERN.match(text)
        if directive and "\n" not in text:
            directives[directive.group(1)] = directive.group(2).strip()
        else:
            notes.append(text)

    return Slide(
        index=index,
        body=body,
        title=heading.group(1) if heading else None,
        notes=notes,
        directives=directives,
    )


def parse_slide_deck(content: str) -> ParsedSlideDeck:
    """
    Splits a markdown deck into slides.

    Args:
        content (str): Raw deck text.

    Returns:
        ParsedSlideDeck: Always at least one slide for non-empty content.
        Without separators the whole trimmed body (after frontmatter) is a
        single slide.
    """

    processed = content.strip() if isinstance(content, str) else ""

    frontmatter = FRONTMATTER_PATTERN.match(processed)
    has_frontmatter = frontmatter is not None
    directives = _load_directives(frontmatter.group(1)) if frontmatter else {}
    body = processed[frontmatter.end():] if frontmatter else processed

    parts = SEPARATOR_PATTERN.split(body)
    has_separators = len(parts) > 1
    slide_bodies = [part.strip() for part in parts if part.strip()]
    if not slide_bodies and body:
        slide_bodies = [body]

    return ParsedSlideDeck(
        slides=[_build_slide(i, text) for i, text in enumerate(slide_bodies)],
        directives=directives,
        has_frontmatter=has_frontmatter,
        has_separators=has_separators,
        format_warning=format_warning(has_frontmatter, has_separators),
    )
