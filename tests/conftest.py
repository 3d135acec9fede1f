from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import pytest

from solvedtrack.exceptions import FetchError

FIXED_NOW = 1_760_000_000.0


@dataclass
class FakeLeaderboard:
    """Scripted stand-in for the HTTP fetcher.

    Each URL maps to a list of responses consumed in order; an ``int`` is an
    HTTP error status, a ``str`` is a 200 body. The last response repeats.
    """

    responses: dict[str, list[int | str]] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)

    def script(self, url: str, *responses: int | str) -> None:
        self.responses[url] = list(responses)

    async def fetch(self, url: str) -> str:
        self.calls.append(url)
        queue = self.responses.get(url)
        if not queue:
            raise FetchError(f"Error fetching URL {url}: connection refused", url=url)
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, int):
            raise FetchError(
                f"Failed HTTP {response} fetching {url}",
                url=url,
                status_code=response,
                body="upstream error",
            )
        return response


@dataclass
class RecordingSleep:
    delays: list[float] = field(default_factory=list)

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)

    def total(self, only: Sequence[float] | None = None) -> float:
        if only is None:
            return sum(self.delays)
        return sum(d for d in self.delays if d in only)


@pytest.fixture
def leaderboard() -> FakeLeaderboard:
    return FakeLeaderboard()


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()
