"""Parsing and formatting of duration text."""

from __future__ import annotations

import re
from datetime import timedelta

_UNITS = {
    "h": timedelta(hours=1),
    "m": timedelta(minutes=1),
    "s": timedelta(seconds=1),
    "ms": timedelta(milliseconds=1),
}

# "ms" must be tried before "m"
_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ms|h|m|s)")


def parse_duration(text: str) -> timedelta:
    """Parse a duration such as '90m', '1h30m', '1.5h', '45s' or '-10m'.

    Args:
        text: Sequence of number+unit pairs (units h, m, s, ms), optionally
            signed. A bare '0' is accepted.

    Returns:
        The parsed duration.

    Raises:
        ValueError: If the text is not a valid duration.
    """
    value = text.strip()
    sign = 1
    if value and value[0] in "+-":
        sign = -1 if value[0] == "-" else 1
        value = value[1:]
    if value == "0":
        return timedelta(0)

    total = timedelta(0)
    position = 0
    for match in _PART.finditer(value):
        if match.start() != position:
            break
        total += float(match.group(1)) * _UNITS[match.group(2)]
        position = match.end()
    if position == 0 or position != len(value):
        raise ValueError(f"invalid duration: {text!r}")
    return sign * total


def format_duration(duration: timedelta) -> str:
    """Format a duration as '1h 05m 00s', '5m 03s' or '42s'."""
    total_seconds = int(duration.total_seconds())
    sign = "-" if total_seconds < 0 else ""
    hours, remainder = divmod(abs(total_seconds), 3600)
    minutes, seconds = divmod(remainder, 60)
    if hours > 0:
        return f"{sign}{hours}h {minutes:02d}m {seconds:02d}s"
    if minutes > 0:
        return f"{sign}{minutes}m {seconds:02d}s"
    return f"{sign}{seconds}s"
