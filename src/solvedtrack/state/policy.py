"""Deterministic growth policy.

A reading is only appended when the solved count strictly increased.
Equal values are duplicate or stale responses; lower values are
regressions (an un-solve or an API glitch). Neither may enter a series.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from solvedtrack.models import Reading


class Progress(StrEnum):
    FIRST = "first"
    INCREASED = "increased"
    UNCHANGED = "unchanged"
    REGRESSED = "regressed"


def classify(series: Sequence[Reading], solved: int) -> Progress:
    """Compare *solved* against the last reading of *series*."""
    if not series:
        return Progress.FIRST
    last = series[-1].solved_count
    if solved > last:
        return Progress.INCREASED
    if solved == last:
        return Progress.UNCHANGED
    return Progress.REGRESSED


def should_append(series: Sequence[Reading], solved: int) -> bool:
    return classify(series, solved) in (Progress.FIRST, Progress.INCREASED)
