"""Personal time ledger: one running timer plus per-day activity history."""

from timesheet.ledger import CATCH_ALL_LABEL, Ledger, Mode, normalize
from timesheet.models import ActiveTimer, DayBucket, Document, LedgerEntry, date_key

__all__ = [
    "CATCH_ALL_LABEL",
    "ActiveTimer",
    "DayBucket",
    "Document",
    "Ledger",
    "LedgerEntry",
    "Mode",
    "date_key",
    "normalize",
]
