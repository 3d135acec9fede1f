"""Custom exception hierarchy for solvedtrack."""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for all solvedtrack errors."""


class TrackerConfigError(TrackerError):
    """Invalid or missing configuration."""


class FetchError(TrackerError):
    """HTTP-level failure (network, timeout, non-200).

    Always retryable by the ingestion loop.
    """

    def __init__(
        self,
        message: str,
        *,
        url: str = "",
        status_code: int | None = None,
        body: str = "",
    ) -> None:
        self.url = url
        self.status_code = status_code
        self.body = body
        super().__init__(message)


class PersistenceError(TrackerError):
    """Writing the reading store failed.

    This is the only failure the ingestion loop does not retry; it is
    surfaced to the operator unchanged.
    """

    def __init__(self, message: str, *, path: str = "") -> None:
        self.path = path
        super().__init__(message)


class RetryExhaustedError(TrackerError):
    """An operator-imposed attempt limit was reached.

    Never raised with the default configuration, which retries forever.
    """

    def __init__(self, message: str, *, attempts: int = 0) -> None:
        self.attempts = attempts
        super().__init__(message)
