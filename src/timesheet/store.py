"""JSON file persistence for the ledger document."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from timesheet.ledger import normalize
from timesheet.models import Document

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base exception for persistence failures."""

    pass


class DocumentLoadError(StoreError):
    """Raised when the stored document cannot be read or decoded."""

    pass


class DocumentStore:
    """Loads and saves a Document as a single JSON file.

    A missing or empty file is an empty document, not an error. There is no
    locking: concurrent invocations against one file are last-writer-wins.
    """

    def __init__(self, path: Path, *, purge_zero: bool = False) -> None:
        self.path = Path(path)
        self.purge_zero = purge_zero

    def load(self) -> Document:
        """Read the document, or return an empty one if the file is absent."""
        try:
            data = self.path.read_bytes()
        except FileNotFoundError:
            logger.debug("No ledger at %s, starting empty", self.path)
            return Document()
        except OSError as e:
            raise DocumentLoadError(f"cannot read {self.path}: {e}") from e

        if not data.strip():
            return Document()
        try:
            # Invalid UTF-8 also surfaces as a ValidationError
            return Document.model_validate_json(data)
        except ValidationError as e:
            raise DocumentLoadError(f"malformed ledger {self.path}: {e}") from e

    def save(self, document: Document) -> Document:
        """Normalize and write the document. Returns what was written."""
        normalized = normalize(document, purge_zero=self.purge_zero)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(normalized.model_dump_json(indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise StoreError(f"cannot write {self.path}: {e}") from e
        logger.debug("Saved %d day(s) to %s", len(normalized.days), self.path)
        return normalized
