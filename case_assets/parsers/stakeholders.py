"""
Stakeholder-profile JSON parser.

Same permissive shape strategy as org charts (`stakeholders`, `profiles`,
bare list or single profile object). Model output that arrives wrapped in
code fences or double-encoded as a quoted string is recovered before
giving up.
"""

from typing import Any, List, Optional

from case_assets.models.parsed import ParsedRecordSet
from case_assets.parsers.json_recovery import DEFAULT_RECOVERIES, load_json


def extract_stakeholders(document: Any) -> List[Any]:
    if isinstance(document, list):
        return document
    if not isinstance(document, dict):
        return []

    for key in ("stakeholders", "profiles"):
        if isinstance(document.get(key), list):
            return document[key]

    if not document.get("title") and not document.get("summary"):
        return [document]

    return []


def parse_stakeholders(content: str) -> Optional[ParsedRecordSet]:
    """
    Parses stakeholder profiles, recovering fenced or quoted JSON.

    Returns:
        Optional[ParsedRecordSet]: None when every recovery failed; an
        empty record list when no profile list was recognized.
    """

    ok, document = load_json(content, DEFAULT_RECOVERIES)
    if not ok:
        return None

    metadata = document if isinstance(document, dict) else {}
    takeaways = metadata.get("keyTakeaways")

    return ParsedRecordSet(
        records=extract_stakeholders(document),
        title=metadata.get("title") or None,
        summary=metadata.get("summary") or None,
        key_takeaways=takeaways if isinstance(takeaways, list) else [],
    )
