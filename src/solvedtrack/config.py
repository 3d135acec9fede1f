"""Tracker configuration for solvedtrack."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from solvedtrack._constants import (
    BASE_URL,
    CONNECT_TIMEOUT,
    DEFAULT_USERNAMES,
    INTER_USER_DELAY,
    METRIC_FIELD,
    READ_TIMEOUT,
    RECORD_STYLES,
    RETRY_BACKOFF,
    STORE_PATH,
)
from solvedtrack.exceptions import TrackerConfigError


def _env_usernames(value: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in value.split(",") if name.strip())


def _env_optional_int(value: str) -> int | None:
    normalized = value.strip().lower()
    if normalized in {"", "none", "inf", "infinite"}:
        return None
    return int(normalized)


@dataclasses.dataclass(frozen=True)
class TrackerConfig:
    """Ingestion run configuration.

    Parameters
    ----------
    base_url : str
        Leaderboard API base URL. Each user is fetched from
        ``<base_url>/<username>``.
    usernames : tuple of str
        Usernames to poll, in order. Store keys are their lower-cased form.
    store_path : str
        Location of the JSON readings document.
    metric_field : str
        Name of the integer field extracted from each response.
    connect_timeout : float
        Seconds allowed to establish a connection.
    read_timeout : float
        Seconds allowed between reads of the response.
    retry_backoff : float
        Seconds slept before retrying a failed fetch or parse.
    inter_user_delay : float
        Seconds slept after each user before the next one starts.
    max_attempts : int or None
        Attempts per user before giving up. ``None`` (the default)
        retries forever.
    record_style : str
        Serialized reading form: ``"object"`` writes
        ``{"solvedCount": .., "timestampUtcSeconds": ..}`` records,
        ``"pair"`` writes ``[solved, timestamp]`` pairs.
    """

    base_url: str = BASE_URL
    usernames: tuple[str, ...] = DEFAULT_USERNAMES
    store_path: str = STORE_PATH
    metric_field: str = METRIC_FIELD
    connect_timeout: float = CONNECT_TIMEOUT
    read_timeout: float = READ_TIMEOUT
    retry_backoff: float = RETRY_BACKOFF
    inter_user_delay: float = INTER_USER_DELAY
    max_attempts: int | None = None
    record_style: str = "object"

    def __post_init__(self) -> None:
        if isinstance(self.usernames, str):
            object.__setattr__(self, "usernames", (self.usernames,))
        else:
            object.__setattr__(self, "usernames", tuple(self.usernames))
        if not self.usernames:
            raise TrackerConfigError("at least one username must be configured")
        if any(not name.strip() for name in self.usernames):
            raise TrackerConfigError("usernames must be non-empty")
        if not self.base_url:
            raise TrackerConfigError("base_url must be non-empty")
        for name in ("connect_timeout", "read_timeout", "retry_backoff", "inter_user_delay"):
            if getattr(self, name) < 0:
                raise TrackerConfigError(f"{name} must be >= 0, got {getattr(self, name)}")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise TrackerConfigError(f"max_attempts must be >= 1 or None, got {self.max_attempts}")
        if self.record_style not in RECORD_STYLES:
            raise TrackerConfigError(f"record_style must be one of {sorted(RECORD_STYLES)}, got {self.record_style!r}")

    def user_url(self, username: str) -> str:
        """Return the endpoint URL for *username*."""
        base = self.base_url if self.base_url.endswith("/") else self.base_url + "/"
        return base + username

    @classmethod
    def from_env(cls, **overrides: Any) -> TrackerConfig:
        """Create configuration from ``SOLVEDTRACK_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_STR_MAP = {
            "SOLVEDTRACK_BASE_URL": "base_url",
            "SOLVEDTRACK_STORE_PATH": "store_path",
            "SOLVEDTRACK_METRIC_FIELD": "metric_field",
            "SOLVEDTRACK_RECORD_STYLE": "record_style",
        }
        _ENV_FLOAT_MAP = {
            "SOLVEDTRACK_CONNECT_TIMEOUT": "connect_timeout",
            "SOLVEDTRACK_READ_TIMEOUT": "read_timeout",
            "SOLVEDTRACK_RETRY_BACKOFF": "retry_backoff",
            "SOLVEDTRACK_INTER_USER_DELAY": "inter_user_delay",
        }

        config_kwargs: dict[str, Any] = {}
        try:
            for env_key, field_name in _ENV_STR_MAP.items():
                val = env.get(env_key)
                if val is not None:
                    config_kwargs[field_name] = val

            for env_key, field_name in _ENV_FLOAT_MAP.items():
                val = env.get(env_key)
                if val is not None:
                    config_kwargs[field_name] = float(val)

            users_env = env.get("SOLVEDTRACK_USERNAMES")
            if users_env is not None:
                config_kwargs["usernames"] = _env_usernames(users_env)

            attempts_env = env.get("SOLVEDTRACK_MAX_ATTEMPTS")
            if attempts_env is not None:
                config_kwargs["max_attempts"] = _env_optional_int(attempts_env)
        except ValueError as exc:
            raise TrackerConfigError(f"invalid numeric environment value: {exc}") from exc

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
