"""Constant-backoff retry combinator."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from solvedtrack.exceptions import FetchError, RetryExhaustedError

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]
FailureHook = Callable[[int, FetchError | None, bool], None]


async def retry_until(
    attempt: Callable[[], Awaitable[T | None]],
    *,
    backoff: float,
    sleep: Sleep,
    max_attempts: int | None = None,
    on_failure: FailureHook | None = None,
) -> tuple[T, int]:
    """Run *attempt* until it returns a value.

    A raised :class:`FetchError` or a ``None`` result counts as a failed
    attempt: *on_failure* is called with the attempt number, the error
    (``None`` for an empty result) and whether another attempt follows, then *sleep* is awaited for *backoff*
    seconds before the next try. Any other exception propagates.

    With ``max_attempts=None`` this never gives up. Returns the value and
    the number of attempts it took.
    """
    attempt_no = 0
    while True:
        attempt_no += 1
        error: FetchError | None = None
        try:
            result = await attempt()
        except FetchError as exc:
            error = exc
            result = None

        if result is not None:
            return result, attempt_no

        will_retry = max_attempts is None or attempt_no < max_attempts
        if on_failure is not None:
            on_failure(attempt_no, error, will_retry)

        if not will_retry:
            raise RetryExhaustedError(
                f"Gave up after {attempt_no} attempt(s)",
                attempts=attempt_no,
            ) from error

        _logger.debug("Attempt %d failed; sleeping %.1fs", attempt_no, backoff)
        await sleep(backoff)
