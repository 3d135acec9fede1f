"""JSON-backed reading store.

This is the only component that reads or writes the readings document.
The ingestion loop borrows the in-memory mapping for one run and hands
it back for a single :meth:`ReadingStore.save` at the end.
"""

from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from solvedtrack.exceptions import PersistenceError
from solvedtrack.models import Reading, Store, UserSeries
from solvedtrack.state.policy import should_append

_logger = logging.getLogger(__name__)

_SERIES_ADAPTER: TypeAdapter[list[Reading]] = TypeAdapter(list[Reading])


def normalize_key(username: str) -> str:
    return username.strip().lower()


def record(series: UserSeries, solved: int, timestamp: float) -> Reading | None:
    """Append a reading to *series* if *solved* grew.

    Returns the appended reading, or ``None`` when the value was equal to
    or lower than the last recorded one (the series is left untouched).
    """
    if not should_append(series, solved):
        return None
    reading = Reading(solved_count=solved, timestamp_utc_seconds=timestamp)
    series.append(reading)
    return reading


def _strictly_increasing(key: str, series: UserSeries) -> UserSeries:
    """Order *series* by timestamp and keep only readings that grew."""
    kept: UserSeries = []
    for reading in sorted(series, key=lambda r: r.timestamp_utc_seconds):
        if should_append(kept, reading.solved_count):
            kept.append(reading)
    if len(kept) != len(series):
        _logger.warning("Dropped %d non-increasing reading(s) for %s", len(series) - len(kept), key)
    return kept


def _parse_document(document: Any) -> Store:
    if not isinstance(document, dict):
        raise ValueError(f"top level must be an object, got {type(document).__name__}")
    merged: Store = {}
    for raw_key, raw_series in document.items():
        series = _SERIES_ADAPTER.validate_python(raw_series)
        merged.setdefault(normalize_key(str(raw_key)), []).extend(series)
    return {key: _strictly_increasing(key, series) for key, series in merged.items()}


class ReadingStore:
    """Load and save the per-user reading series.

    Parameters
    ----------
    path
        Location of the JSON document.
    record_style
        ``"object"`` to write readings as records, ``"pair"`` to write
        ``[solved, timestamp]`` pairs.
    """

    def __init__(self, path: str | os.PathLike[str], *, record_style: str = "object") -> None:
        self._path = Path(path)
        self._record_style = record_style
        self._corrupt_on_load = False

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Store:
        """Read the persisted store.

        A missing document yields an empty mapping. A document that is not
        valid UTF-8 JSON or does not match the reading schema is logged and also
        treated as empty; it is moved aside on the next :meth:`save`.
        """
        self._corrupt_on_load = False
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            _logger.info("No reading store at %s; starting empty", self._path)
            return {}
        except OSError as exc:
            raise PersistenceError(f"Cannot read reading store {self._path}: {exc}", path=str(self._path)) from exc

        if not raw.strip():
            return {}

        try:
            store = _parse_document(json.loads(raw.decode("utf-8")))
        except (UnicodeDecodeError, json.JSONDecodeError, ValidationError, ValueError) as exc:
            _logger.warning("Reading store %s is corrupt, treating as empty: %s", self._path, exc)
            self._corrupt_on_load = True
            return {}

        _logger.debug("Loaded %d series from %s", len(store), self._path)
        return store

    def ensure_keys(self, store: Store, usernames: Iterable[str]) -> Store:
        """Give every username an entry, inserting empty series where missing."""
        for name in usernames:
            store.setdefault(normalize_key(name), [])
        return store

    def dumps(self, store: Store) -> str:
        """Serialize *store* with stable key and entry order."""
        if self._record_style == "pair":
            document = {key: [r.as_pair() for r in series] for key, series in store.items()}
        else:
            document = {key: [r.as_record() for r in series] for key, series in store.items()}
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"

    def _target_mode(self) -> int:
        """Permission bits for the replaced document.

        An existing document keeps its mode. A new one gets the default
        mode for created files, ``0o666`` masked by the process umask.
        """
        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            pass
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask

    def save(self, store: Store) -> None:
        """Atomically replace the persisted document with *store*.

        The document is written to a sibling temp file and moved into place,
        so readers never observe a partial write.
        """
        payload = self.dumps(store)
        directory = self._path.parent
        tmp_name: str | None = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            if self._corrupt_on_load and self._path.exists():
                backup = self._path.with_name(self._path.name + ".corrupt")
                os.replace(self._path, backup)
                _logger.warning("Moved corrupt reading store aside to %s", backup)
                self._corrupt_on_load = False

            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", suffix=".tmp", dir=directory)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(tmp_name, self._target_mode())
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as exc:
            raise PersistenceError(f"Failed to save reading store {self._path}: {exc}", path=str(self._path)) from exc
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    _logger.debug("Could not remove temp file %s", tmp_name)

        _logger.info("Saved %d series to %s", len(store), self._path)
