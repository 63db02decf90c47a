"""
Content sniffer.

Infers how to interpret an asset when its canonical type tag is missing,
generic, or contradicted by the content. The ladder is ordered
most-specific-signal-first: extension and MIME signals outrank the
structural JSON check, because a SQL or CSV fragment may start with a brace
while a declared extension rarely lies.

All functions are pure. Sniffing never fails: the preformatted view is
always the last candidate.
"""

from enum import Enum
from typing import Callable, List, Optional, Tuple

SQL_PREFIXES = ("SELECT", "INSERT", "CREATE")
MARKDOWN_EXTENSIONS = (".md", ".markdown", ".txt")


class Interpretation(str, Enum):
    CSV = "csv"
    SQL = "sql"
    MARKDOWN = "markdown"
    JSON_SHEET = "json_sheet"
    PREFORMATTED = "preformatted"


def _name(file_name: Optional[str]) -> str:
    return (file_name or "").lower()


def _mime(mime_type: Optional[str]) -> str:
    return (mime_type or "").lower()


def _sample(content) -> str:
    return content.strip() if isinstance(content, str) else ""


def is_csv(file_name: Optional[str], mime_type: Optional[str], content) -> bool:
    return _name(file_name).endswith(".csv") or "csv" in _mime(mime_type)


def is_sql(file_name: Optional[str], mime_type: Optional[str], content) -> bool:
    if _name(file_name).endswith(".sql") or "sql" in _mime(mime_type):
        return True
    return _sample(content).upper().startswith(SQL_PREFIXES)


def is_markdown(file_name: Optional[str], mime_type: Optional[str], content) -> bool:
    mime = _mime(mime_type)
    return (
        _name(file_name).endswith(MARKDOWN_EXTENSIONS)
        or "markdown" in mime
        or "text/plain" in mime
    )


def is_json(file_name: Optional[str], mime_type: Optional[str], content) -> bool:
    sample = _sample(content)
    return sample.startswith("{") or sample.startswith("[")


Predicate = Callable[[Optional[str], Optional[str], object], bool]

SNIFFING_LADDER: Tuple[Tuple[Predicate, Interpretation], ...] = (
    (is_csv, Interpretation.CSV),
    (is_sql, Interpretation.SQL),
    (is_markdown, Interpretation.MARKDOWN),
    (is_json, Interpretation.JSON_SHEET),
)


def sniff(file_name: Optional[str], mime_type: Optional[str], content) -> List[Interpretation]:
    """
    Ranks the candidate interpretations of an asset.

    Args:
        file_name (Optional[str]): Asset file name (extension is used).
        mime_type (Optional[str]): Declared MIME type, advisory.
        content: Raw content, or a sample of it.

    Returns:
        List[Interpretation]: Matching interpretations in ladder order,
        always ending with `Interpretation.PREFORMATTED`.

    Example:
        >>> sniff("data.csv", None, "a,b\\n1,2")
        [<Interpretation.CSV: 'csv'>, <Interpretation.PREFORMATTED: 'preformatted'>]
    """

    candidates = [
        interpretation
        for predicate, interpretation in SNIFFING_LADDER
        if predicate(file_name, mime_type, content)
    ]
    candidates.append(Interpretation.PREFORMATTED)
    return candidates
