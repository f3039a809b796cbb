"""
Record Store
============
Whole-file access to bugs-data.json.

    load()  → Document   (fails on missing / unreadable / malformed file)
    save(document)       (stamps metadata.lastUpdated, pretty-prints, fails on write error)

There is no partial or degraded mode: every failure surfaces as a
RecordStoreError carrying the path and the underlying cause, and the CLI
turns it into exit code 1.

Concurrency:
    No locking. Two writers racing on the same file is an accepted
    limitation of the single-shot CLI.
"""
import json
import logging
import os
from typing import Optional

from pydantic import ValidationError

from bugboard.core import config
from bugboard.models.document import Document
from bugboard.utils.time_utils import utc_now_iso

logger = logging.getLogger(__name__)


class RecordStoreError(Exception):
    """Raised when the bug document cannot be read, parsed or written."""

    def __init__(self, action: str, path: str, cause: str) -> None:
        self.action = action
        self.path = path
        self.cause = cause
        super().__init__(f"Error {action} {path}: {cause}")


class RecordStore:
    """Loads and persists the bug document at a fixed path."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path or config.BUGS_DATA_FILE

    def load(self) -> Document:
        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except FileNotFoundError:
            raise RecordStoreError("loading", self.path, "file not found")
        except json.JSONDecodeError as e:
            raise RecordStoreError("loading", self.path, f"invalid JSON ({e})")
        except OSError as e:
            raise RecordStoreError("loading", self.path, e.strerror or str(e))

        if not isinstance(raw, dict):
            raise RecordStoreError("loading", self.path, "top-level JSON value must be an object")

        try:
            document = Document.from_json_dict(raw)
        except ValidationError as e:
            raise RecordStoreError("loading", self.path, f"unexpected document shape ({e.error_count()} errors): {e}")

        logger.debug("Loaded %d bugs from %s", len(document.bugs), self.path)
        return document

    def save(self, document: Document) -> str:
        """
        Persist the document and return the new ``lastUpdated`` stamp.
        """
        timestamp = utc_now_iso()
        document.stamp_updated(timestamp)

        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(document.to_json_dict(), f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise RecordStoreError("saving", self.path, e.strerror or str(e))

        logger.info("Saved %d bugs to %s", len(document.bugs), os.path.abspath(self.path))
        return timestamp
