"""State/store layer.

This package is the single source of truth for how solved-count
observations are accepted into a user's series and persisted.
"""
