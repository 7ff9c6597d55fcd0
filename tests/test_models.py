"""Tests for the document model."""

from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from timesheet.models import ActiveTimer, DayBucket, Document, LedgerEntry, date_key


class TestDateKey:
    """Tests for date_key()."""

    def test_same_day(self):
        assert date_key(datetime(2025, 1, 25, 0, 0)) == date_key(datetime(2025, 1, 25, 23, 59))

    def test_naive_is_local(self):
        assert date_key(datetime(2025, 1, 25, 23, 59)) == date(2025, 1, 25)

    def test_aware_uses_local_calendar(self):
        ts = datetime(2025, 1, 25, 12, 0).astimezone()
        assert date_key(ts) == date(2025, 1, 25)


class TestModels:
    """Tests for model validation and serialization."""

    def test_empty_label_rejected(self):
        with pytest.raises(ValidationError):
            LedgerEntry(label="", duration=timedelta(minutes=5))

    def test_bucket_total(self):
        bucket = DayBucket(
            day=date(2025, 1, 25),
            entries=[
                LedgerEntry(label="a", duration=timedelta(minutes=5)),
                LedgerEntry(label="b", duration=timedelta(minutes=-2)),
            ],
        )
        assert bucket.total == timedelta(minutes=3)

    def test_empty_document_total(self):
        assert Document().total == timedelta(0)

    def test_duration_serialized_as_seconds(self):
        entry = LedgerEntry(label="a", duration=timedelta(minutes=90))
        assert entry.model_dump(mode="json") == {"label": "a", "duration": 5400.0}

    def test_negative_duration_round_trip(self):
        entry = LedgerEntry(label="sub", duration=timedelta(minutes=-20))
        assert LedgerEntry.model_validate_json(entry.model_dump_json()) == entry

    def test_timer_without_start_decodes_as_idle(self):
        """A persisted timer with a label but no start time is not running."""
        document = Document.model_validate({"timer": {"label": "stale", "started_at": None}, "days": []})
        assert document.timer is None

    def test_timer_round_trip(self):
        started = datetime(2025, 1, 25, 10, 0).astimezone()
        document = Document(timer=ActiveTimer(label="a", started_at=started))
        assert Document.model_validate_json(document.model_dump_json()) == document
