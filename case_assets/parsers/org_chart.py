"""
Org-chart JSON parser.

Generated org charts come in several shapes: a bare list of nodes, an
`organization` list, a single root node under `root`/`topLevel`/`ceo`, an
`employees` or `departments` list, or simply one root node object. Each node
may carry `children` (direct reports) and `reportsTo`.
"""

from typing import Any, List, Optional

from case_assets.models.parsed import ParsedRecordSet
from case_assets.parsers.json_recovery import load_json

ROOT_KEYS = ("root", "topLevel", "ceo")
LIST_KEYS = ("employees", "departments")


def _first_present(document: dict, keys) -> Any:
    for key in keys:
        if document.get(key):
            return document[key]
    return None


def extract_org_nodes(document: Any) -> List[Any]:
    """
    Locates the node list of a decoded org-chart document.

    Returns:
        List[Any]: Top-level nodes; empty when no known shape is found.
    """

    if isinstance(document, list):
        return document
    if not isinstance(document, dict):
        return []

    if isinstance(document.get("organization"), list):
        return document["organization"]

    root = _first_present(document, ROOT_KEYS)
    if isinstance(root, list):
        return root
    if root:
        return [root]

    listed = _first_present(document, LIST_KEYS)
    if isinstance(listed, list):
        return listed

    if not document.get("title") and not document.get("summary"):
        return [document]

    return []


def parse_org_chart(content: str) -> Optional[ParsedRecordSet]:
    """
    Parses an org chart document.

    Args:
        content (str): Raw JSON text.

    Returns:
        Optional[ParsedRecordSet]: None when the text is not JSON. An empty
        record list means "parsed, but nothing to show"; callers fall back
        to the generic record table.
    """

    ok, document = load_json(content)
    if not ok:
        return None

    metadata = document if isinstance(document, dict) else {}
    takeaways = metadata.get("keyTakeaways")

    return ParsedRecordSet(
        records=extract_org_nodes(document),
        title=metadata.get("title") or None,
        summary=metadata.get("summary") or None,
        key_takeaways=takeaways if isinstance(takeaways, list) else [],
    )
