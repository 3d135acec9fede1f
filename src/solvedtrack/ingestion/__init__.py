"""Ingestion layer.

This package contains the metric extraction for raw leaderboard responses
and the per-user polling loop that feeds the reading store.
"""

__all__: list[str] = []
