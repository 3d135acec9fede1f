"""Reading model and store type aliases.

A :class:`Reading` is one timestamped observation of a user's solved
count. Readings are immutable; a series only ever grows by appending.

On disk a reading is either a record::

    {"solvedCount": 42, "timestampUtcSeconds": 1760000000.5}

or, for the progress viewer's older documents, a ``[42, 1760000000.5]``
pair. Both forms are accepted on load.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Reading(BaseModel):
    """A single solved-count observation."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    solved_count: int = Field(..., ge=0, strict=True)
    """Total problems solved at observation time."""
    timestamp_utc_seconds: float = Field(..., ge=0)
    """Observation time as UTC epoch seconds."""

    @model_validator(mode="before")
    @classmethod
    def _accept_pair(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            if len(value) != 2:
                raise ValueError(f"reading pair must have 2 items, got {len(value)}")
            return {"solvedCount": value[0], "timestampUtcSeconds": value[1]}
        return value

    def as_record(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)

    def as_pair(self) -> list[int | float]:
        return [self.solved_count, self.timestamp_utc_seconds]


UserSeries = list[Reading]
Store = dict[str, UserSeries]
