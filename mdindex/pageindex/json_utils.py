"""
JSON extraction from free-form LLM output.

Models often wrap JSON in a ```json fence, emit Python's ``None`` or leave
trailing commas. extract_json cleans these up and returns ``{}`` when the
response still cannot be parsed; callers treat an empty dict as
"could not parse", not as a valid empty result.
"""

from __future__ import annotations

import json
import re
from typing import Any

from ..observability.logging import get_logger

logger = get_logger(__name__)

_JSON_FENCE = "```json"
_FENCE = "```"
_NONE_TOKEN = re.compile(r"\bNone\b")
_TRAILING_COMMA = re.compile(r",\s*([\]}])")


def get_json_content(response: str) -> str:
    """
    Strip a surrounding ```json fence from a response.

    Args:
        response: Raw LLM response.

    Returns:
        The fenced content (or the whole response) with whitespace trimmed.
    """
    content = response
    start_idx = content.find(_JSON_FENCE)
    if start_idx != -1:
        content = content[start_idx + len(_JSON_FENCE):]

    end_idx = content.rfind(_FENCE)
    if end_idx != -1:
        content = content[:end_idx]

    return content.strip()


def _unfence(content: str) -> str:
    start_idx = content.find(_JSON_FENCE)
    if start_idx == -1:
        return content.strip()
    after_start = content[start_idx + len(_JSON_FENCE):]
    end_idx = after_start.rfind(_FENCE)
    if end_idx != -1:
        after_start = after_start[:end_idx]
    return after_start.strip()


def extract_json(content: str) -> Any:
    """
    Parse JSON from an LLM response, tolerating common formatting issues.

    First pass: unfence, replace ``None`` with ``null``, collapse
    whitespace. Second pass: additionally drop trailing commas before a
    closing bracket or brace.

    Args:
        content: Raw LLM response.

    Returns:
        Parsed JSON value, or ``{}`` if both passes fail.
    """
    json_content = _NONE_TOKEN.sub("null", _unfence(content))
    json_content = " ".join(json_content.split())
    try:
        return json.loads(json_content)
    except json.JSONDecodeError:
        pass

    cleaned = _TRAILING_COMMA.sub(r"\1", content)
    cleaned = _NONE_TOKEN.sub("null", _unfence(cleaned))
    cleaned = " ".join(cleaned.split())
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        logger.error(
            "json_utils.parse_failed",
            error=str(exc),
            preview=content[:200],
        )
        return {}
