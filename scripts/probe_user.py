#!/usr/bin/env python3
"""Fetch one or more profiles once and show what the extractor sees.

No retries, no store writes. Useful for checking a new username or a
changed API before adding it to the tracked list.

Usage
-----
::

    python scripts/probe_user.py Anga205 munish42
    python scripts/probe_user.py --base-url https://other.api --raw someone
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

import aiohttp

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from solvedtrack import FetchError, HttpTextFetcher, LeaderboardApi, TrackerConfig  # noqa: E402
from solvedtrack.ingestion.extract import snippet  # noqa: E402


async def _probe(config: TrackerConfig, usernames: list[str], show_raw: bool) -> int:
    failures = 0
    async with aiohttp.ClientSession() as http:
        api = LeaderboardApi(
            config,
            HttpTextFetcher(http, connect_timeout=config.connect_timeout, read_timeout=config.read_timeout),
        )
        for name in usernames:
            try:
                text = await api.fetch_user_text(name)
            except FetchError as exc:
                print(f"{name}: FETCH FAILED status={exc.status_code} {exc}")
                failures += 1
                continue

            solved = api.parse_total_solved(text)
            status = "absent" if solved is None else str(solved)
            print(f"{name}: {config.metric_field}={status} (bytes={len(text)})")
            if show_raw or solved is None:
                print(f"  body: {snippet(text)}")
            if solved is None:
                failures += 1
    return failures


def main() -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("usernames", nargs="+", help="Usernames to probe")
    parser.add_argument("--base-url", help="Leaderboard API base URL")
    parser.add_argument("--field", help="Metric field name")
    parser.add_argument("--raw", action="store_true", help="Always print the start of the body")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    overrides: dict[str, object] = {"usernames": tuple(args.usernames)}
    if args.base_url:
        overrides["base_url"] = args.base_url
    if args.field:
        overrides["metric_field"] = args.field
    config = TrackerConfig.from_env(**overrides)

    failures = asyncio.run(_probe(config, args.usernames, args.raw))
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
