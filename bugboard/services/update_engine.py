"""
Update Engine
=============
Applies partial bug updates to a loaded Document.

Merge policy (only for fields present in the update):
    status, testResult, fixedDate, assignedTo  → overwritten
    screenshots                                → shallow key-by-key merge

Side effect:
    After merging, a record whose resulting status is "fixed" loses its
    assignedTo field, whether or not this update touched status or
    assignment.

Batch semantics:
    Updates are applied in order. Unknown ids are logged and counted but
    never abort the batch. An optional automation block is merged into
    metadata.automation and lastTestRun is stamped.

The engine never touches the filesystem except for reading update files
(load_update_batch). Persisting is the caller's step via RecordStore.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import List

from pydantic import ValidationError

from bugboard.models.document import Automation, Document
from bugboard.models.update_batch import BugUpdate, UpdateBatch
from bugboard.utils.time_utils import utc_now_iso

logger = logging.getLogger(__name__)


class UpdateFileError(Exception):
    """Raised when an update file cannot be read or does not match the batch format."""

    def __init__(self, path: str, cause: str) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Error processing update file {path}: {cause}")


@dataclass
class BatchResult:
    updated: int = 0
    not_found: List[str] = field(default_factory=list)
    automation_updated: bool = False

    @property
    def total(self) -> int:
        return self.updated + len(self.not_found)


def load_update_batch(path: str) -> UpdateBatch:
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError:
        raise UpdateFileError(path, "file not found")
    except json.JSONDecodeError as e:
        raise UpdateFileError(path, f"invalid JSON ({e})")
    except OSError as e:
        raise UpdateFileError(path, e.strerror or str(e))

    if not isinstance(raw, dict):
        raise UpdateFileError(path, "top-level JSON value must be an object")

    try:
        return UpdateBatch.model_validate(raw)
    except ValidationError as e:
        raise UpdateFileError(path, f"invalid update format: {e}")


def _present(update: BugUpdate, name: str) -> bool:
    return name in update.model_fields_set and getattr(update, name) is not None


def apply_update(document: Document, update: BugUpdate) -> bool:
    """
    Merge one partial update into the matching bug record.

    Returns
    -------
    bool
        True when the record exists (even if the update only carries an id),
        False when no bug has this id. The document is untouched on False.
    """
    bug = document.find_bug(update.id)
    if bug is None:
        logger.error("Bug %s not found", update.id)
        return False

    if _present(update, "status"):
        bug.status = update.status
        logger.info("Updated %s status: %s", bug.id, update.status)

    if _present(update, "test_result"):
        bug.test_result = update.test_result
        logger.info("Updated %s test result: %s", bug.id, update.test_result)

    if _present(update, "screenshots"):
        merged = dict(bug.screenshots or {})
        merged.update(update.screenshots)
        bug.screenshots = merged
        logger.info("Updated %s screenshots: %s", bug.id, ", ".join(sorted(update.screenshots)) or "none")

    if _present(update, "fixed_date"):
        bug.fixed_date = update.fixed_date
        logger.info("Updated %s fixed date: %s", bug.id, update.fixed_date)

    if _present(update, "assigned_to"):
        bug.assigned_to = update.assigned_to
        logger.info("Updated %s assigned to: %s", bug.id, update.assigned_to)

    if bug.is_fixed and bug.clear_assignment():
        logger.info("Removed assignment for fixed bug %s", bug.id)

    return True


def merge_automation(document: Document, automation: Automation) -> None:
    """Shallow-merge the provided automation keys and stamp lastTestRun."""
    metadata = document.metadata
    changes = automation.model_dump(by_alias=True, exclude_unset=True)

    merged = metadata.automation.model_dump(by_alias=True, exclude_unset=True)
    merged.update(changes)
    merged["lastTestRun"] = utc_now_iso()

    metadata.automation = Automation.model_validate(merged)
    document.metadata = metadata
    logger.info("Updated automation status (%s)", ", ".join(sorted(changes)) or "timestamp only")


def apply_batch(document: Document, batch: UpdateBatch) -> BatchResult:
    result = BatchResult()

    for update in batch.bugs:
        if apply_update(document, update):
            result.updated += 1
        else:
            result.not_found.append(update.id)

    if batch.automation is not None:
        merge_automation(document, batch.automation)
        result.automation_updated = True

    if result.not_found:
        logger.warning(
            "%d of %d updates skipped, unknown ids: %s",
            len(result.not_found), result.total, ", ".join(result.not_found),
        )
    return result
