"""Leaderboard profile endpoint."""

from __future__ import annotations

from solvedtrack._transport import TextFetcher
from solvedtrack.config import TrackerConfig
from solvedtrack.exceptions import FetchError
from solvedtrack.ingestion.extract import extract_metric


class LeaderboardApi:
    """Per-user access to the leaderboard API.

    ``GET <base_url>/<username>`` returns a profile body containing the
    configured metric field.
    """

    def __init__(self, config: TrackerConfig, fetcher: TextFetcher) -> None:
        self._config = config
        self._fetcher = fetcher

    def user_url(self, username: str) -> str:
        return self._config.user_url(username)

    async def fetch_user_text(self, username: str) -> str:
        """Fetch the raw profile body for *username*.

        Raises :class:`FetchError` naming the user on any failure.
        """
        url = self.user_url(username)
        try:
            return await self._fetcher.fetch(url)
        except FetchError as exc:
            raise FetchError(
                f"Failed to fetch profile for '{username}' from {url}: {exc}",
                url=url,
                status_code=exc.status_code,
                body=exc.body,
            ) from exc

    def parse_total_solved(self, text: str | None) -> int | None:
        return extract_metric(text, self._config.metric_field)

    async def get_total_solved(self, username: str) -> int | None:
        """Fetch and extract in one step; ``None`` when the body is unusable."""
        return self.parse_total_solved(await self.fetch_user_text(username))
