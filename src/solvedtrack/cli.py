"""Command-line entry point: run one ingestion pass.

Usage
-----
::

    solvedtrack                                  # defaults / SOLVEDTRACK_* env
    solvedtrack --store readings.json --user alice --user bob
    solvedtrack --backoff 5 --delay 1 --max-attempts 10 -v

Exit codes: 0 on success, 1 when the store cannot be saved, 2 on invalid
configuration, 3 when ``--max-attempts`` was exhausted, 130 on Ctrl-C.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from typing import Any

import aiohttp

from solvedtrack import __version__
from solvedtrack._transport import HttpTextFetcher
from solvedtrack.config import TrackerConfig
from solvedtrack.exceptions import PersistenceError, RetryExhaustedError, TrackerConfigError
from solvedtrack.ingestion.loop import IngestionLoop, RunSummary
from solvedtrack.state.store import ReadingStore

_logger = logging.getLogger("solvedtrack")

EXIT_OK = 0
EXIT_PERSISTENCE = 1
EXIT_CONFIG = 2
EXIT_GAVE_UP = 3
EXIT_INTERRUPTED = 130


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="solvedtrack",
        description="Poll the leaderboard API and append solved-count readings.",
    )
    parser.add_argument("--store", help="Path of the readings JSON document")
    parser.add_argument(
        "--user",
        action="append",
        dest="users",
        metavar="NAME",
        help="Username to poll (repeatable; replaces the configured list)",
    )
    parser.add_argument("--base-url", help="Leaderboard API base URL")
    parser.add_argument("--backoff", type=float, help="Seconds to wait before retrying a failed user")
    parser.add_argument("--delay", type=float, help="Seconds to wait between users")
    parser.add_argument("--max-attempts", type=int, help="Give up on a user after N attempts (default: never)")
    parser.add_argument("--record-style", choices=("object", "pair"), help="Serialized reading form")
    parser.add_argument("--dry-run", action="store_true", help="Poll but do not save the store")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> TrackerConfig:
    overrides: dict[str, Any] = {}
    if args.store is not None:
        overrides["store_path"] = args.store
    if args.users:
        overrides["usernames"] = tuple(args.users)
    if args.base_url is not None:
        overrides["base_url"] = args.base_url
    if args.backoff is not None:
        overrides["retry_backoff"] = args.backoff
    if args.delay is not None:
        overrides["inter_user_delay"] = args.delay
    if args.max_attempts is not None:
        overrides["max_attempts"] = args.max_attempts
    if args.record_style is not None:
        overrides["record_style"] = args.record_style
    return TrackerConfig.from_env(**overrides)


async def run_once(config: TrackerConfig, *, persist: bool = True) -> RunSummary:
    """Run a single ingestion pass against the live API."""
    store = ReadingStore(config.store_path, record_style=config.record_style)
    async with aiohttp.ClientSession() as http:
        fetcher = HttpTextFetcher(
            http,
            connect_timeout=config.connect_timeout,
            read_timeout=config.read_timeout,
        )
        loop = IngestionLoop(config, fetcher, store)
        return await loop.run(persist=persist)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )

    try:
        config = _config_from_args(args)
    except TrackerConfigError as exc:
        _logger.error("Invalid configuration: %s", exc)
        return EXIT_CONFIG

    _logger.info(
        "Tracking %d user(s) via %s -> %s",
        len(config.usernames),
        config.base_url,
        config.store_path,
    )

    try:
        asyncio.run(run_once(config, persist=not args.dry_run))
    except PersistenceError as exc:
        _logger.error("Could not save readings: %s", exc)
        return EXIT_PERSISTENCE
    except RetryExhaustedError as exc:
        _logger.error("%s; store not saved", exc)
        return EXIT_GAVE_UP
    except KeyboardInterrupt:
        _logger.warning("Interrupted; store not saved")
        return EXIT_INTERRUPTED

    return EXIT_OK
