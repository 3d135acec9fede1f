"""Metric extraction from raw leaderboard responses.

Malformed or partial bodies are an expected, transient condition of the
remote API, so nothing in here raises: every structural failure is
reported as ``None`` and left to the caller's retry policy.
"""

from __future__ import annotations

import json
from typing import Any

from solvedtrack._constants import METRIC_FIELD, NO_BODY_PLACEHOLDER, RESPONSE_SNIPPET_LIMIT

_MISSING = object()


def _find_field(node: Any, field: str, _depth: int = 0) -> Any:
    """Search *node* in document order for the first occurrence of *field*.

    A key nested inside an earlier sibling wins over a later key at the
    outer level, matching the first match in the response text.
    """
    if _depth > 32:
        return _MISSING
    if isinstance(node, dict):
        for key, child in node.items():
            if key == field:
                return child
            found = _find_field(child, field, _depth + 1)
            if found is not _MISSING:
                return found
    elif isinstance(node, list):
        for child in node:
            found = _find_field(child, field, _depth + 1)
            if found is not _MISSING:
                return found
    return _MISSING


def extract_metric(text: str | None, field: str) -> int | None:
    """Return the non-negative integer value of *field* in *text*, or ``None``."""
    if not text or not text.strip():
        return None
    try:
        document = json.loads(text)
    except (ValueError, RecursionError):
        # JSONDecodeError, and oversized integer literals refused by int()
        return None

    value = _find_field(document, field)
    if value is _MISSING:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    if value < 0:
        return None
    return value


def extract_total_solved(text: str | None, field: str = METRIC_FIELD) -> int | None:
    """Extract the solved-problem count from a profile response."""
    return extract_metric(text, field)


def snippet(text: str | None, limit: int = RESPONSE_SNIPPET_LIMIT) -> str:
    """Short diagnostic excerpt of a response body."""
    if not text:
        return NO_BODY_PLACEHOLDER
    if len(text) > limit:
        return text[:limit] + "..."
    return text
