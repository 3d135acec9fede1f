"""Per-user ingestion loop.

For every configured username, sequentially::

    FETCHING -> PARSING -> DECIDING -> DONE
        |          |
        +----------+--> WAIT_AND_RETRY -> FETCHING

Fetch failures and unparsable bodies are logged, followed by a fixed
backoff and a fresh fetch. There is no terminal failure state: by default
a user is retried until one full cycle succeeds. Once parsed, the value is
appended only if it grew, and the user is done either way. After each user
the loop waits a fixed delay to stay under the API's rate limits.

The store is saved exactly once, after every user is done. A save failure
propagates to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from solvedtrack._retry import retry_until
from solvedtrack._transport import TextFetcher
from solvedtrack.api import LeaderboardApi
from solvedtrack.config import TrackerConfig
from solvedtrack.exceptions import FetchError
from solvedtrack.ingestion.extract import snippet
from solvedtrack.models import Reading, UserSeries
from solvedtrack.state.policy import Progress, classify
from solvedtrack.state.store import ReadingStore, normalize_key, record

_logger = logging.getLogger(__name__)


@dataclass(slots=True)
class UserOutcome:
    """Result of one user's completed cycle."""

    username: str
    solved: int
    progress: Progress
    attempts: int
    appended: Reading | None = None


@dataclass(slots=True)
class RunSummary:
    outcomes: list[UserOutcome] = field(default_factory=list)
    saved: bool = False

    @property
    def appended(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.appended is not None)


class IngestionLoop:
    """Poll every configured user once and persist the results.

    Usage::

        async with aiohttp.ClientSession() as http:
            fetcher = HttpTextFetcher(http)
            loop = IngestionLoop(config, fetcher, ReadingStore(config.store_path))
            summary = await loop.run()

    *sleep* and *clock* are injectable so tests can run the full state
    machine without real delays.
    """

    def __init__(
        self,
        config: TrackerConfig,
        fetcher: TextFetcher,
        store: ReadingStore,
        *,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._config = config
        self._api = LeaderboardApi(config, fetcher)
        self._store = store
        self._sleep = sleep
        self._clock = clock

    async def run(self, *, persist: bool = True) -> RunSummary:
        """Load the store, poll every user in order, then save once."""
        readings = self._store.load()
        self._store.ensure_keys(readings, self._config.usernames)

        summary = RunSummary()
        for username in self._config.usernames:
            series = readings[normalize_key(username)]
            summary.outcomes.append(await self.poll_user(username, series))

            _logger.debug("Waiting %.1fs before next user", self._config.inter_user_delay)
            await self._sleep(self._config.inter_user_delay)

        if persist:
            self._store.save(readings)
            summary.saved = True
        else:
            _logger.info("Dry run: not saving %d series", len(readings))

        _logger.info(
            "Run complete: %d user(s), %d new reading(s)",
            len(summary.outcomes),
            summary.appended,
        )
        return summary

    async def poll_user(self, username: str, series: UserSeries) -> UserOutcome:
        """Retry fetch+parse for *username* until it succeeds, then decide."""
        backoff = self._config.retry_backoff

        last_text = ""

        async def _attempt() -> int | None:
            nonlocal last_text
            text = await self._api.fetch_user_text(username)
            _logger.info("Retrieved data for %s (bytes=%d)", username, len(text))
            last_text = text
            return self._api.parse_total_solved(text)

        def _on_failure(attempt_no: int, error: FetchError | None, will_retry: bool) -> None:
            next_step = f"Retrying in {backoff:.0f}s..." if will_retry else "Giving up."
            if error is not None:
                _logger.warning(
                    "Error fetching data for %s (attempt %d): %s. %s",
                    username,
                    attempt_no,
                    error,
                    next_step,
                )
            else:
                _logger.warning(
                    "Unparsable response for %s (first 200 chars): %s. %s",
                    username,
                    snippet(last_text),
                    next_step,
                )

        solved, attempts = await retry_until(
            _attempt,
            backoff=backoff,
            sleep=self._sleep,
            max_attempts=self._config.max_attempts,
            on_failure=_on_failure,
        )
        return self._decide(username, series, solved, attempts)

    def _decide(self, username: str, series: UserSeries, solved: int, attempts: int) -> UserOutcome:
        progress = classify(series, solved)
        appended = record(series, solved, self._clock())

        if appended is not None:
            _logger.info("Recorded %s: %d solved (%s)", username, solved, progress)
        elif progress is Progress.REGRESSED:
            _logger.warning(
                "Solved count for %s went down from %d to %d; not recorded",
                username,
                series[-1].solved_count,
                solved,
            )
        else:
            _logger.info("No new progress for %s (still %d)", username, solved)

        return UserOutcome(
            username=username,
            solved=solved,
            progress=progress,
            attempts=attempts,
            appended=appended,
        )
