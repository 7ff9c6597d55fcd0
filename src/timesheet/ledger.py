"""Ledger engine: timer transitions, manual adjustments and normalization."""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import date, datetime, timedelta
from enum import Enum

from timesheet.models import ActiveTimer, DayBucket, Document, LedgerEntry, date_key

logger = logging.getLogger(__name__)

# Label that absorbs whatever a subtraction could not take from history
CATCH_ALL_LABEL = "sub"

_ZERO = timedelta(0)


class Mode(str, Enum):
    """The single operation an invocation applies to the ledger."""

    START = "start"
    FINISH = "finish"
    DISCARD = "discard"
    ROLLOVER = "rollover"
    ADD = "add"
    SUBTRACT = "subtract"
    NOOP = "noop"


def normalize(document: Document, *, purge_zero: bool = False) -> Document:
    """Return a copy of the document with its invariants restored.

    - one bucket per date, buckets in ascending date order
    - one entry per label within a bucket (durations summed), sorted by label
    - zero-duration entries dropped when ``purge_zero`` is set
    - buckets left without entries dropped

    Applying it to its own output changes nothing.
    """
    totals: dict[date, defaultdict[str, timedelta]] = {}
    for bucket in document.days:
        per_label = totals.setdefault(bucket.day, defaultdict(timedelta))
        for entry in bucket.entries:
            per_label[entry.label] += entry.duration

    days: list[DayBucket] = []
    for day in sorted(totals):
        entries = [
            LedgerEntry(label=label, duration=duration)
            for label, duration in sorted(totals[day].items())
            if not (purge_zero and duration == _ZERO)
        ]
        if entries:
            days.append(DayBucket(day=day, entries=entries))

    timer = document.timer.model_copy() if document.timer is not None else None
    return Document(timer=timer, days=days)


class Ledger:
    """Applies ledger operations to a document in memory.

    The document is mutated in place; callers persist ``ledger.document``
    afterwards. Domain edge cases (clock skew, empty labels, overdrawn
    history) are absorbed here and never raised.
    """

    def __init__(self, document: Document | None = None, *, purge_zero: bool = False) -> None:
        self.document = document if document is not None else Document()
        self.purge_zero = purge_zero

    def apply(
        self,
        mode: Mode,
        now: datetime,
        *,
        label: str = "",
        duration: timedelta | None = None,
    ) -> Document:
        """Run exactly one operation, then normalize. Returns the new document."""
        now = now.astimezone()
        logger.debug("Applying %s (label=%r, duration=%s) at %s", mode.value, label, duration, now)
        if mode is Mode.START:
            self.start(label, now)
        elif mode is Mode.FINISH:
            self.finish(label, now)
        elif mode is Mode.DISCARD:
            self.discard(now)
        elif mode is Mode.ROLLOVER:
            self.rollover(label, now)
        elif mode is Mode.ADD:
            self.add(label, duration or _ZERO, now)
        elif mode is Mode.SUBTRACT:
            self.subtract(duration or _ZERO, now)
        return self.normalize()

    def normalize(self) -> Document:
        self.document = normalize(self.document, purge_zero=self.purge_zero)
        return self.document

    # Timer transitions

    def start(self, label: str, now: datetime) -> None:
        """Begin (or continue) work on ``label``.

        A different label hands off from a labeled running timer: the old one
        is finished and a new one starts at ``now``. A nameless running timer
        is simply named, keeping its start time.
        """
        timer = self.document.timer
        if timer is None:
            self.document.timer = ActiveTimer(label=label, started_at=now)
            return
        if not label or label == timer.label:
            return
        if not timer.label:
            timer.label = label
            return
        self.finish("", now)
        self.document.timer = ActiveTimer(label=label, started_at=now)

    def finish(self, label: str, now: datetime) -> None:
        """Stop the running timer and credit its elapsed time.

        A non-empty ``label`` renames the timer before crediting.
        """
        timer = self.document.timer
        if timer is None:
            logger.debug("Finish requested with no running timer")
            return
        if label:
            timer.label = label
        self._credit_elapsed(timer, now)
        self.document.timer = None

    def discard(self, now: datetime) -> None:
        """Drop the running timer without crediting anything."""
        timer = self.document.timer
        if timer is None:
            return
        elapsed = now.astimezone() - timer.started_at
        logger.info("Discarding %r started at %s (%s elapsed)", timer.label, timer.started_at, elapsed)
        self.document.timer = None

    def flush(self, now: datetime) -> None:
        """Credit the running timer's elapsed time and keep it running from ``now``."""
        timer = self.document.timer
        if timer is None or not timer.label:
            return
        self._credit_elapsed(timer, now)
        timer.started_at = now

    def rollover(self, label: str, now: datetime) -> None:
        """Flush the running timer, optionally handing it off to ``label``."""
        timer = self.document.timer
        if timer is None:
            self.start(label, now)
            return
        self.flush(now)
        if label:
            timer.label = label

    # Manual adjustments

    def add(self, label: str, duration: timedelta, now: datetime) -> None:
        """Credit ``duration`` (possibly negative) to ``label`` on today's bucket."""
        if not label:
            logger.info("Ignoring add of %s: no label given", duration)
            return
        self._credit(label, duration, date_key(now))

    def subtract(self, amount: timedelta, now: datetime) -> None:
        """Remove ``amount`` from history, consuming the oldest entries first.

        Entries are taken in normalized order (oldest day, then label). An
        entry smaller than what is left to remove is dropped whole; otherwise
        it is reduced and the walk stops. Whatever history cannot cover is
        recorded today as a negative entry under ``CATCH_ALL_LABEL``.
        """
        if amount <= _ZERO:
            logger.debug("Ignoring subtract of non-positive amount %s", amount)
            return
        self.normalize()

        days = self.document.days
        remaining = amount
        while remaining > _ZERO and days:
            bucket = days[0]
            if not bucket.entries:
                days.pop(0)
                continue
            entry = bucket.entries[0]
            if entry.duration < remaining:
                remaining -= entry.duration
                bucket.entries.pop(0)
                if not bucket.entries:
                    days.pop(0)
            else:
                entry.duration -= remaining
                remaining = _ZERO

        if remaining > _ZERO:
            logger.info("History exhausted; recording %s under %r", remaining, CATCH_ALL_LABEL)
            self._credit(CATCH_ALL_LABEL, -remaining, date_key(now))

    # Internals

    def _credit_elapsed(self, timer: ActiveTimer, now: datetime) -> None:
        """Credit ``now - started_at`` to the timer's start day if positive."""
        if not timer.label:
            logger.debug("Nameless timer has nothing to credit")
            return
        elapsed = now.astimezone() - timer.started_at
        if elapsed <= _ZERO:
            # Clock skew or a zero-length interval
            logger.debug("Discarding non-positive elapsed time %s for %r", elapsed, timer.label)
            return
        self._credit(timer.label, elapsed, date_key(timer.started_at))

    def _credit(self, label: str, duration: timedelta, day: date) -> None:
        entry = LedgerEntry(label=label, duration=duration)
        for bucket in self.document.days:
            if bucket.day == day:
                bucket.entries.append(entry)
                return
        self.document.days.append(DayBucket(day=day, entries=[entry]))
