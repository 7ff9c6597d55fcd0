"""Document model for the time ledger."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, field_validator

# Durations are persisted as float seconds rather than ISO 8601 strings.
Seconds = Annotated[
    timedelta,
    PlainSerializer(lambda td: td.total_seconds(), return_type=float, when_used="json"),
]


def date_key(ts: datetime) -> date:
    """Return the local calendar day a timestamp falls on.

    Naive timestamps are taken to be local time already.
    """
    return ts.astimezone().date()


class LedgerEntry(BaseModel):
    """Time accumulated under one label on one day."""

    label: str = Field(min_length=1)
    duration: Seconds


class DayBucket(BaseModel):
    """All ledger entries recorded for a single calendar day."""

    day: date
    entries: list[LedgerEntry] = Field(default_factory=list)

    @property
    def total(self) -> timedelta:
        return sum((entry.duration for entry in self.entries), timedelta(0))


class ActiveTimer(BaseModel):
    """The currently running activity.

    An empty label marks a nameless timer: it keeps its start time but has
    nothing to credit until it is given a label.
    """

    model_config = ConfigDict(validate_assignment=True)

    label: str = ""
    started_at: datetime

    @field_validator("started_at")
    @classmethod
    def _as_local(cls, value: datetime) -> datetime:
        # Kept as local-aware time; naive input is taken as local.
        return value.astimezone()


class Document(BaseModel):
    """Full persisted state: the running timer (if any) and the day history."""

    timer: ActiveTimer | None = None
    days: list[DayBucket] = Field(default_factory=list)

    @field_validator("timer", mode="before")
    @classmethod
    def _drop_unstarted_timer(cls, value: Any) -> Any:
        # A label without a start time is not a running timer.
        if isinstance(value, dict) and value.get("started_at") is None:
            return None
        return value

    @property
    def total(self) -> timedelta:
        """Sum of every recorded duration across all days."""
        return sum((bucket.total for bucket in self.days), timedelta(0))
