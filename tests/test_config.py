from __future__ import annotations

import pytest

from solvedtrack.config import TrackerConfig
from solvedtrack.exceptions import TrackerConfigError


def test_defaults_match_operational_constants() -> None:
    config = TrackerConfig()

    assert config.connect_timeout == 15.0
    assert config.read_timeout == 20.0
    assert config.retry_backoff == 30.0
    assert config.inter_user_delay == 5.0
    assert config.max_attempts is None
    assert config.metric_field == "totalSolved"
    assert "Anga205" in config.usernames


def test_user_url_normalizes_trailing_slash() -> None:
    assert TrackerConfig(base_url="https://api.test").user_url("bob") == "https://api.test/bob"
    assert TrackerConfig(base_url="https://api.test/").user_url("bob") == "https://api.test/bob"


def test_from_env_reads_variables_and_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLVEDTRACK_BASE_URL", "https://env.test")
    monkeypatch.setenv("SOLVEDTRACK_USERNAMES", "alice, bob ,,carol")
    monkeypatch.setenv("SOLVEDTRACK_RETRY_BACKOFF", "2.5")
    monkeypatch.setenv("SOLVEDTRACK_MAX_ATTEMPTS", "4")
    monkeypatch.setenv("SOLVEDTRACK_STORE_PATH", "/tmp/from-env.json")

    config = TrackerConfig.from_env(store_path="explicit.json")

    assert config.base_url == "https://env.test"
    assert config.usernames == ("alice", "bob", "carol")
    assert config.retry_backoff == 2.5
    assert config.max_attempts == 4
    assert config.store_path == "explicit.json"


def test_from_env_infinite_attempts(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLVEDTRACK_MAX_ATTEMPTS", "inf")

    assert TrackerConfig.from_env().max_attempts is None


def test_from_env_zero_attempts_rejected_like_cli(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLVEDTRACK_MAX_ATTEMPTS", "0")

    with pytest.raises(TrackerConfigError, match="max_attempts"):
        TrackerConfig.from_env()


def test_from_env_bad_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOLVEDTRACK_READ_TIMEOUT", "soon")

    with pytest.raises(TrackerConfigError):
        TrackerConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"usernames": ()},
        {"usernames": ("alice", " ")},
        {"retry_backoff": -1.0},
        {"max_attempts": 0},
        {"record_style": "csv"},
        {"base_url": ""},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, object]) -> None:
    with pytest.raises(TrackerConfigError):
        TrackerConfig(**kwargs)  # type: ignore[arg-type]
