"""
Fault-tolerant JSON loading.

LLM output is frequently wrapped in Markdown code fences or serialized a
second time as a quoted string. Recovery is an ordered list of pure string
transforms; the raw text is tried first, then each transform's output,
stopping at the first text that parses.
"""

import json
import logging
import re
from typing import Any, Callable, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

CODE_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
QUOTED_PATTERN = re.compile(r"^[\"']([\s\S]*?)[\"']$")


def strip_code_fences(text: str) -> Optional[str]:
    """Returns the body of the first fenced block, or None if there is none."""
    match = CODE_FENCE_PATTERN.search(text)
    if not match:
        return None
    return match.group(1).strip()


def unwrap_quoted(text: str) -> Optional[str]:
    """Removes one layer of enclosing quotes and unescapes `\\"` and `\\'`."""
    match = QUOTED_PATTERN.match(text)
    if not match:
        return None
    return match.group(1).replace('\\"', '"').replace("\\'", "'")


Recovery = Callable[[str], Optional[str]]

DEFAULT_RECOVERIES: Tuple[Recovery, ...] = (strip_code_fences, unwrap_quoted)


def load_json(raw: str, recoveries: Sequence[Recovery] = ()) -> Tuple[bool, Any]:
    """
    Parses JSON text, trying recovery transforms in order on failure.

    Args:
        raw (str): Raw text to parse. It is trimmed first.
        recoveries (Sequence[Recovery]): Transforms applied to the trimmed
            text, each returning a candidate string or None when it does not
            apply.

    Returns:
        Tuple[bool, Any]: `(True, value)` on the first successful parse,
        `(False, None)` when every attempt failed.
    """

    if not isinstance(raw, str):
        return False, None

    text = raw.strip()
    candidates = [text]
    for recover in recoveries:
        candidate = recover(text)
        if candidate is not None:
            candidates.append(candidate)

    last_error = None
    for candidate in candidates:
        try:
            return True, json.loads(candidate)
        except (ValueError, RecursionError) as e:
            last_error = e

    logger.debug("JSON parse failed after %d attempt(s): %s", len(candidates), last_error)
    return False, None
