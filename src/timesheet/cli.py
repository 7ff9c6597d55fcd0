"""CLI entry point for the time ledger."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

import click

from timesheet.config import DEFAULT_FILE, FILE_ENVVAR, LOG_FORMAT, PURGE_ZERO_ENVVAR
from timesheet.durations import parse_duration
from timesheet.ledger import Ledger, Mode
from timesheet.report import build_report, render_report
from timesheet.store import DocumentStore, StoreError


class DurationParamType(click.ParamType):
    """Click parameter accepting durations like '90m' or '1h30m'."""

    name = "duration"

    def convert(self, value, param, ctx) -> timedelta:
        if isinstance(value, timedelta):
            return value
        try:
            return parse_duration(value)
        except ValueError:
            self.fail(f"{value!r} is not a duration (examples: 45m, 1h30m, 90s)", param, ctx)


DURATION = DurationParamType()


def _parse_now(ctx: click.Context, param: click.Parameter, value: str | None) -> datetime | None:
    """Parse --at as ISO 8601; naive values are taken as local time."""
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value).astimezone()
    except ValueError:
        raise click.BadParameter(f"{value!r} is not an ISO 8601 timestamp")


def _non_negative(ctx: click.Context, param: click.Parameter, value: timedelta | None) -> timedelta | None:
    if value is not None and value < timedelta(0):
        raise click.BadParameter("must not be negative")
    return value


def _select_mode(
    noop: bool,
    finish: bool,
    discard: bool,
    rollover: bool,
    add: timedelta | None,
    subtract: timedelta | None,
) -> Mode:
    """Pick the single requested mode; start/continue when none is given."""
    selected = [
        mode
        for mode, chosen in (
            (Mode.NOOP, noop),
            (Mode.FINISH, finish),
            (Mode.DISCARD, discard),
            (Mode.ROLLOVER, rollover),
            (Mode.ADD, add is not None),
            (Mode.SUBTRACT, subtract is not None),
        )
        if chosen
    ]
    if len(selected) > 1:
        names = ", ".join(mode.value for mode in selected)
        raise click.UsageError(f"Only one mode may be given at a time (got: {names})")
    return selected[0] if selected else Mode.START


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("label", nargs=-1)
@click.option(
    "--file",
    "--ts",
    "path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_FILE,
    envvar=FILE_ENVVAR,
    show_default=True,
    help="Path to the ledger JSON file",
)
@click.option("-n", "--noop", is_flag=True, help="Change nothing, just show the report")
@click.option("-f", "--finish", is_flag=True, help="Stop the running timer and record it")
@click.option("-d", "--discard", is_flag=True, help="Stop the running timer without recording it")
@click.option(
    "-r",
    "--rollover",
    is_flag=True,
    help="Record the running timer so far and keep it running",
)
@click.option("-a", "--add", type=DURATION, help="Record DURATION under LABEL today")
@click.option(
    "-s",
    "--subtract",
    type=DURATION,
    callback=_non_negative,
    help="Remove DURATION from the oldest recorded entries",
)
@click.option(
    "--purge-zero/--keep-zero",
    default=False,
    envvar=PURGE_ZERO_ENVVAR,
    help="Drop entries whose total is exactly zero",
)
@click.option(
    "--at",
    "now",
    callback=_parse_now,
    help="Use this ISO 8601 timestamp as the current time",
)
@click.option("--json", "output_json", is_flag=True, help="Output the report as JSON")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(
    label: tuple[str, ...],
    path: Path,
    noop: bool,
    finish: bool,
    discard: bool,
    rollover: bool,
    add: timedelta | None,
    subtract: timedelta | None,
    purge_zero: bool,
    now: datetime | None,
    output_json: bool,
    verbose: bool,
) -> None:
    """Track time spent on activities.

    With LABEL and no mode option, starts (or continues) work on LABEL,
    finishing whatever else was running. Without arguments, starts an
    unlabeled timer if none is running; naming it later keeps its start time.

    Example:
        ts write report
        ts -f
        ts -a 45m reading
        ts -s 20m
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING, format=LOG_FORMAT)

    mode = _select_mode(noop, finish, discard, rollover, add, subtract)
    text = " ".join(label)
    if now is None:
        now = datetime.now().astimezone()

    store = DocumentStore(path, purge_zero=purge_zero)
    try:
        document = store.load()
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    ledger = Ledger(document, purge_zero=purge_zero)
    ledger.apply(mode, now, label=text, duration=add if mode is Mode.ADD else subtract)

    try:
        document = store.save(ledger.document)
    except StoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    report = build_report(document, now)
    if output_json:
        click.echo(report.model_dump_json(indent=2))
    else:
        click.echo(render_report(report))


if __name__ == "__main__":
    main()
