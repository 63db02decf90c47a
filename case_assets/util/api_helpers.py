"""
Asset API helpers.

Utility functions to build asset API URLs and to turn the API's error
bodies into a single readable message.

Responsibilities:
    - Compose endpoint URLs from the configured base URL.
    - Read `error`, `details` and `validationErrors` from failed responses.
"""

from typing import Any, List

import httpx


def get_base_url(base_url: str, path: str) -> str:
    """
    Builds a full asset API URL.

    Args:
        base_url (str): Configured base URL (trailing slash tolerated).
        path (str): Endpoint path (e.g., "/list-assets").

    Returns:
        str: Fully qualified URL.
    """

    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


def _as_messages(value: Any) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, list):
        return [str(item) for item in value if item not in (None, "")]
    return [str(value)]


def combine_error_messages(body: Any, fallback: str) -> str:
    """
    Concatenates an error body into one diagnostic message.

    `details` and `validationErrors` entries are appended after the main
    `error`, each listed once.

    Args:
        body (Any): Decoded JSON error body (anything else is ignored).
        fallback (str): Message used when the body has no `error`.

    Returns:
        str: e.g. "Generated content failed validation: missing field X".

    Example:
        >>> combine_error_messages({"error": "Failed", "details": ["a", "b"]}, "x")
        'Failed: a; b'
    """

    if not isinstance(body, dict):
        return fallback

    main = str(body.get("error") or fallback)
    extra = []
    for message in _as_messages(body.get("details")) + _as_messages(body.get("validationErrors")):
        if message not in extra and message != main:
            extra.append(message)

    return f"{main}: {'; '.join(extra)}" if extra else main


def get_error_message(response: httpx.Response, fallback: str) -> str:
    """
    Reads the error message of a failed asset API response.

    JSON bodies go through `combine_error_messages`; plain-text bodies are
    used as-is when short enough to be a message.
    """

    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return text if text and len(text) <= 500 else fallback
    return combine_error_messages(body, fallback)
