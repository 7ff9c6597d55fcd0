"""Read-only report view of a ledger document."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field

from timesheet.durations import format_duration
from timesheet.models import Document, LedgerEntry, Seconds

UNLABELED = "(unlabeled)"


class DayReport(BaseModel):
    """Entries and total for one day."""

    day: date
    entries: list[LedgerEntry]
    total: Seconds


class RunningTimer(BaseModel):
    """The running timer and how long it has been going."""

    label: str
    started_at: datetime
    elapsed: Seconds


class Report(BaseModel):
    """Per-day totals followed by the running timer, if any."""

    days: list[DayReport] = Field(default_factory=list)
    running: RunningTimer | None = None


def build_report(document: Document, now: datetime) -> Report:
    """Build the report for a (normalized) document at ``now``.

    The document is not modified; entries are copied into the report.
    """
    now = now.astimezone()
    days = [
        DayReport(
            day=bucket.day,
            entries=[entry.model_copy() for entry in bucket.entries],
            total=bucket.total,
        )
        for bucket in document.days
    ]
    running = None
    if document.timer is not None:
        running = RunningTimer(
            label=document.timer.label,
            started_at=document.timer.started_at,
            elapsed=now - document.timer.started_at,
        )
    return Report(days=days, running=running)


def render_report(report: Report) -> str:
    """Render a report as plain text lines."""
    lines: list[str] = []
    for day in report.days:
        lines.append(day.day.isoformat())
        for entry in day.entries:
            lines.append(f"  {entry.label}: {format_duration(entry.duration)}")
        lines.append(f"    {format_duration(day.total)}")

    if report.running is not None:
        label = report.running.label or UNLABELED
        if report.running.elapsed == timedelta(0):
            lines.append(label)
        else:
            lines.append(f"{label} for {format_duration(report.running.elapsed)}")

    if not lines:
        return "No time recorded."
    return "\n".join(lines)
