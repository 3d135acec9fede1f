"""solvedtrack - Poll a leaderboard API and keep a monotonic solved-count history."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("solvedtrack")
except PackageNotFoundError:
    __version__ = "0+local"
from solvedtrack._transport import HttpTextFetcher, TextFetcher
from solvedtrack.api import LeaderboardApi
from solvedtrack.config import TrackerConfig
from solvedtrack.exceptions import (
    FetchError,
    PersistenceError,
    RetryExhaustedError,
    TrackerConfigError,
    TrackerError,
)
from solvedtrack.ingestion.extract import extract_total_solved
from solvedtrack.ingestion.loop import IngestionLoop, RunSummary, UserOutcome
from solvedtrack.models import Reading, Store, UserSeries
from solvedtrack.state.policy import Progress
from solvedtrack.state.store import ReadingStore

__all__ = [
    "__version__",
    "FetchError",
    "HttpTextFetcher",
    "IngestionLoop",
    "LeaderboardApi",
    "PersistenceError",
    "Progress",
    "Reading",
    "ReadingStore",
    "RetryExhaustedError",
    "RunSummary",
    "Store",
    "TextFetcher",
    "TrackerConfig",
    "TrackerConfigError",
    "TrackerError",
    "UserOutcome",
    "UserSeries",
    "extract_total_solved",
]
