"""
Reporting
=========
Read-only aggregates and listings over the bug records.

Percentages use half-up rounding and are 0 when there are no bugs, so an
empty document reports "0%" instead of a division error.
"""
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from bugboard.core.constants import (
    RESULT_FAILED,
    RESULT_PASSED,
    STATUS_FIXED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
)
from bugboard.models.bug_record import BugRecord
from bugboard.models.document import Document


@dataclass(frozen=True)
class BugStats:
    total: int = 0
    fixed: int = 0
    in_progress: int = 0
    pending: int = 0
    passed: int = 0
    failed: int = 0


def compute_stats(bugs: Sequence[BugRecord]) -> BugStats:
    return BugStats(
        total=len(bugs),
        fixed=sum(1 for b in bugs if b.status == STATUS_FIXED),
        in_progress=sum(1 for b in bugs if b.status == STATUS_IN_PROGRESS),
        pending=sum(1 for b in bugs if b.status == STATUS_PENDING),
        passed=sum(1 for b in bugs if b.test_result == RESULT_PASSED),
        failed=sum(1 for b in bugs if b.test_result == RESULT_FAILED),
    )


def percentage(count: int, total: int) -> int:
    """Whole-number share of ``count`` in ``total``; 0 when total is 0."""
    if total <= 0:
        return 0
    return int(math.floor(count / total * 100 + 0.5))


def format_report(document: Document) -> str:
    stats = compute_stats(document.bugs)
    success_rate = document.metadata.automation.success_rate
    if success_rate is None:
        success_rate = "N/A"

    lines = [
        "Current Bug Statistics:",
        f"   Total bugs: {stats.total}",
        f"   Fixed: {stats.fixed} ({percentage(stats.fixed, stats.total)}%)",
        f"   In Progress: {stats.in_progress} ({percentage(stats.in_progress, stats.total)}%)",
        f"   Pending: {stats.pending} ({percentage(stats.pending, stats.total)}%)",
        f"   Tests Passed: {stats.passed}",
        f"   Tests Failed: {stats.failed}",
        f"   Success Rate: {success_rate}",
    ]
    return "\n".join(lines)


def list_bugs(bugs: Sequence[BugRecord], status: Optional[str] = None) -> List[BugRecord]:
    """Records with the given status in original order, or all of them."""
    if not status:
        return list(bugs)
    return [b for b in bugs if b.status == status]


def format_listing(bugs: Sequence[BugRecord], status: Optional[str] = None) -> str:
    selected = list_bugs(bugs, status)
    header = f"{status[:1].upper()}{status[1:]} Bugs:" if status else "Bugs:"
    lines = [header]
    for bug in selected:
        lines.append(f"   {bug.id}: {bug.title} ({bug.test_result})")
    return "\n".join(lines)
