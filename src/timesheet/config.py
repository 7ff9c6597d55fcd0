"""Defaults and environment variable names for the command line."""

from __future__ import annotations

from pathlib import Path

DEFAULT_FILE = Path.home() / ".ts.json"

# Environment overrides, read by click
FILE_ENVVAR = "TS_FILE"
PURGE_ZERO_ENVVAR = "TS_PURGE_ZERO"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
