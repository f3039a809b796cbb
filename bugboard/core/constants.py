"""
Constants
Centralised storage for bug statuses, test results and display tables.
"""
STATUS_FIXED = "fixed"
STATUS_IN_PROGRESS = "in-progress"
STATUS_PENDING = "pending"
BUG_STATUSES = [STATUS_FIXED, STATUS_IN_PROGRESS, STATUS_PENDING]

RESULT_PASSED = "passed"
RESULT_FAILED = "failed"
RESULT_PENDING = "pending"
RESULT_NOT_TESTED = "not-tested"

FILTER_ALL = "all"
DASHBOARD_FILTERS = [FILTER_ALL] + BUG_STATUSES

# Only these priorities get a badge on the dashboard
HIGHLIGHTED_PRIORITIES = {"critical": "Critical", "high": "High"}

RESULT_ICONS = {
    RESULT_PASSED: "✓",
    RESULT_FAILED: "✗",
    RESULT_PENDING: "⏳",
    RESULT_NOT_TESTED: "—",
}
DEFAULT_RESULT_ICON = "—"
