"""
Time Utils
==========
Timestamp helpers shared by the CLI and the dashboard.

    utc_now_iso()  — "2026-02-18T09:30:00.123Z", the stamp written into the document
    format_time()  — short en-US display form used on the dashboard ("Feb 18, 09:30 AM")
"""
from datetime import datetime, timezone
from typing import Optional


def utc_now_iso() -> str:
    """Current UTC time as ISO 8601 with millisecond precision and a Z suffix."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp, accepting a trailing Z. Returns None when unparsable."""
    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def format_time(value: Optional[str]) -> str:
    """Render a timestamp as "Mon D, HH:MM AM/PM", or "N/A" when missing or invalid."""
    parsed = parse_iso(value)
    if parsed is None:
        return "N/A"
    return f"{parsed:%b} {parsed.day}, {parsed:%I:%M %p}"
