from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer, unused_port

from solvedtrack._transport import HttpTextFetcher, truncate_body
from solvedtrack.api import LeaderboardApi
from solvedtrack.config import TrackerConfig
from solvedtrack.exceptions import FetchError

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


@asynccontextmanager
async def _serve(handler: Handler) -> AsyncIterator[TestServer]:
    app = web.Application()
    app.router.add_get("/{name}", handler)
    server = TestServer(app)
    await server.start_server()
    try:
        yield server
    finally:
        await server.close()


def test_truncate_body_marks_truncation() -> None:
    assert truncate_body("short") == "short"
    assert truncate_body("y" * 500) == "y" * 500
    assert truncate_body("y" * 501) == "y" * 500 + "..."


@pytest.mark.asyncio
async def test_fetch_returns_body_text() -> None:
    async def handler(request: web.Request) -> web.Response:
        return web.json_response({"username": request.match_info["name"], "totalSolved": 42})

    async with _serve(handler) as server, aiohttp.ClientSession() as http:
        text = await HttpTextFetcher(http).fetch(str(server.make_url("/alice")))

    assert '"totalSolved": 42' in text
    assert '"alice"' in text


@pytest.mark.asyncio
async def test_non_200_raises_with_status_and_truncated_body() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(status=503, text="E" * 800)

    async with _serve(handler) as server, aiohttp.ClientSession() as http:
        url = str(server.make_url("/alice"))
        with pytest.raises(FetchError) as excinfo:
            await HttpTextFetcher(http).fetch(url)

    err = excinfo.value
    assert err.status_code == 503
    assert err.url == url
    assert err.body == "E" * 500 + "..."
    assert "HTTP 503" in str(err)


@pytest.mark.asyncio
async def test_non_200_with_empty_body() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(status=404)

    async with _serve(handler) as server, aiohttp.ClientSession() as http:
        with pytest.raises(FetchError) as excinfo:
            await HttpTextFetcher(http).fetch(str(server.make_url("/ghost")))

    assert excinfo.value.status_code == 404
    assert excinfo.value.body == ""
    assert "response body" not in str(excinfo.value)


@pytest.mark.asyncio
async def test_connection_failure_is_wrapped() -> None:
    url = f"http://127.0.0.1:{unused_port()}/alice"

    async with aiohttp.ClientSession() as http:
        with pytest.raises(FetchError) as excinfo:
            await HttpTextFetcher(http, connect_timeout=2.0).fetch(url)

    assert excinfo.value.status_code is None
    assert url in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, aiohttp.ClientError)


@pytest.mark.asyncio
async def test_read_timeout_is_wrapped() -> None:
    async def handler(_request: web.Request) -> web.Response:
        await asyncio.sleep(1.0)
        return web.Response(text="late")

    async with _serve(handler) as server, aiohttp.ClientSession() as http:
        fetcher = HttpTextFetcher(http, read_timeout=0.05)
        with pytest.raises(FetchError) as excinfo:
            await fetcher.fetch(str(server.make_url("/slow")))

    assert excinfo.value.status_code is None


@pytest.mark.asyncio
async def test_leaderboard_api_names_user_on_failure() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(status=500, text="boom")

    async with _serve(handler) as server, aiohttp.ClientSession() as http:
        config = TrackerConfig(base_url=str(server.make_url("")).rstrip("/"), usernames=("alice",))
        api = LeaderboardApi(config, HttpTextFetcher(http))
        with pytest.raises(FetchError) as excinfo:
            await api.get_total_solved("alice")

    assert "'alice'" in str(excinfo.value)
    assert excinfo.value.status_code == 500
    assert excinfo.value.body == "boom"


@pytest.mark.asyncio
async def test_leaderboard_api_extracts_total_solved() -> None:
    async def handler(_request: web.Request) -> web.Response:
        return web.Response(text='{"totalSolved":  17, "totalQuestions": 3000}')

    async with _serve(handler) as server, aiohttp.ClientSession() as http:
        config = TrackerConfig(base_url=str(server.make_url("/")), usernames=("alice",))
        api = LeaderboardApi(config, HttpTextFetcher(http))
        assert await api.get_total_solved("alice") == 17
