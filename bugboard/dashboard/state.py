"""
Dashboard State
===============
In-memory view model behind the dashboard.

Holds the last successfully fetched document and derives the visible
subset of bugs from the current status filter and search term.

Filter composition:
    The status filter and the search term compose with AND. A bug is
    visible when it matches the selected status (or the filter is "all")
    and its "id title description category" text contains the search term
    (or the term is empty). Both comparisons are case-folded.

Failure handling:
    mark_error() records a visible message but keeps the previous records,
    so a failed refresh never blanks the page.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from bugboard.core.constants import (
    DASHBOARD_FILTERS,
    FILTER_ALL,
    RESULT_FAILED,
    STATUS_FIXED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
)
from bugboard.models.bug_record import BugRecord
from bugboard.models.document import Document, RunMetadata
from bugboard.utils.time_utils import utc_now_iso


def normalize_filter(value: Optional[str]) -> str:
    """Unknown or empty filter values fall back to "all"."""
    value = (value or "").strip().lower()
    return value if value in DASHBOARD_FILTERS else FILTER_ALL


def normalize_search(term: Optional[str]) -> str:
    return (term or "").strip().casefold()


def matches(bug: BugRecord, status_filter: str, search_term: str) -> bool:
    if status_filter != FILTER_ALL and bug.status != status_filter:
        return False
    if search_term and search_term not in bug.searchable_text():
        return False
    return True


def apply_filters(bugs: List[BugRecord], status_filter: str, search_term: str) -> List[BugRecord]:
    return [bug for bug in bugs if matches(bug, status_filter, search_term)]


@dataclass
class DashboardStats:
    fixed: int = 0
    in_progress: int = 0
    pending: int = 0
    failed: int = 0
    success_rate: str = "0%"

    def to_dict(self) -> dict:
        return {
            "fixed": self.fixed,
            "inProgress": self.in_progress,
            "pending": self.pending,
            "failed": self.failed,
            "successRate": self.success_rate,
        }


@dataclass
class DashboardState:
    all_records: List[BugRecord] = field(default_factory=list)
    metadata: Optional[RunMetadata] = None
    current_filter: str = FILTER_ALL
    search_term: str = ""
    filtered_records: List[BugRecord] = field(default_factory=list)
    error: Optional[str] = None
    last_loaded: Optional[str] = None

    # --- mutations (each recomputes the filtered view) ---

    def replace_document(self, document: Document) -> None:
        self.all_records = list(document.bugs)
        self.metadata = document.metadata
        self.error = None
        self.last_loaded = utc_now_iso()
        self.recompute()

    def set_filter(self, value: Optional[str]) -> None:
        self.current_filter = normalize_filter(value)
        self.recompute()

    def set_search(self, term: Optional[str]) -> None:
        self.search_term = normalize_search(term)
        self.recompute()

    def mark_error(self, message: str) -> None:
        self.error = message

    def recompute(self) -> None:
        self.filtered_records = apply_filters(self.all_records, self.current_filter, self.search_term)

    # --- read side ---

    @property
    def loaded(self) -> bool:
        return self.last_loaded is not None

    def view(self, status_filter: Optional[str] = None, search: Optional[str] = None) -> "DashboardState":
        """
        Filtered copy for one request. The shared state is not modified,
        records and metadata are shared by reference.
        """
        snapshot = DashboardState(
            all_records=self.all_records,
            metadata=self.metadata,
            current_filter=normalize_filter(status_filter),
            search_term=normalize_search(search),
            error=self.error,
            last_loaded=self.last_loaded,
        )
        snapshot.recompute()
        return snapshot

    def stats(self) -> DashboardStats:
        bugs = self.all_records
        success_rate = None
        if self.metadata is not None:
            success_rate = self.metadata.automation.success_rate
        return DashboardStats(
            fixed=sum(1 for b in bugs if b.status == STATUS_FIXED),
            in_progress=sum(1 for b in bugs if b.status == STATUS_IN_PROGRESS),
            pending=sum(1 for b in bugs if b.status == STATUS_PENDING),
            failed=sum(1 for b in bugs if b.test_result == RESULT_FAILED),
            success_rate=str(success_rate) if success_rate not in (None, "") else "0%",
        )
