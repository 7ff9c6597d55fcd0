"""Tests for the report view."""

from datetime import date, datetime, timedelta, timezone

from timesheet.models import ActiveTimer, DayBucket, Document, LedgerEntry
from timesheet.report import build_report, render_report

NOW = datetime(2025, 1, 25, 12, 0)


def make_document(timer: ActiveTimer | None = None) -> Document:
    return Document(
        timer=timer,
        days=[
            DayBucket(
                day=date(2025, 1, 24),
                entries=[
                    LedgerEntry(label="a", duration=timedelta(minutes=30)),
                    LedgerEntry(label="b", duration=timedelta(hours=1)),
                ],
            ),
            DayBucket(day=date(2025, 1, 25), entries=[LedgerEntry(label="c", duration=timedelta(seconds=45))]),
        ],
    )


class TestBuildReport:
    """Tests for build_report()."""

    def test_day_totals(self):
        report = build_report(make_document(), NOW)
        assert [d.day for d in report.days] == [date(2025, 1, 24), date(2025, 1, 25)]
        assert report.days[0].total == timedelta(minutes=90)
        assert report.running is None

    def test_running_elapsed(self):
        timer = ActiveTimer(label="d", started_at=NOW - timedelta(minutes=10))
        report = build_report(make_document(timer), NOW)
        assert report.running.label == "d"
        assert report.running.elapsed == timedelta(minutes=10)

    def test_aware_timer_with_naive_now(self):
        started = (NOW - timedelta(minutes=10)).astimezone(timezone.utc)
        report = build_report(make_document(ActiveTimer(label="d", started_at=started)), NOW)
        assert report.running.elapsed == timedelta(minutes=10)

    def test_does_not_mutate_document(self):
        document = make_document(ActiveTimer(label="d", started_at=NOW))
        before = document.model_copy(deep=True)
        report = build_report(document, NOW)
        report.days[0].entries[0].duration = timedelta(0)
        assert document == before


class TestRenderReport:
    """Tests for render_report()."""

    def test_full_report(self):
        timer = ActiveTimer(label="d", started_at=NOW - timedelta(minutes=10))
        text = render_report(build_report(make_document(timer), NOW))
        assert text.splitlines() == [
            "2025-01-24",
            "  a: 30m 00s",
            "  b: 1h 00m 00s",
            "    1h 30m 00s",
            "2025-01-25",
            "  c: 45s",
            "    45s",
            "d for 10m 00s",
        ]

    def test_zero_elapsed_shows_label_only(self):
        text = render_report(build_report(Document(timer=ActiveTimer(label="d", started_at=NOW)), NOW))
        assert text == "d"

    def test_nameless_timer(self):
        timer = ActiveTimer(label="", started_at=NOW - timedelta(seconds=5))
        text = render_report(build_report(Document(timer=timer), NOW))
        assert text == "(unlabeled) for 5s"

    def test_empty(self):
        assert render_report(build_report(Document(), NOW)) == "No time recorded."
