import re

import pytest

from bugboard.utils.time_utils import format_time, parse_iso, utc_now_iso


def test_utc_now_iso_shape():
    assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_now_iso())


def test_parse_iso_accepts_z_suffix():
    parsed = parse_iso("2026-02-18T09:30:00.000Z")
    assert parsed.hour == 9
    assert parsed.utcoffset().total_seconds() == 0


@pytest.mark.parametrize("value,expected", [
    ("2026-02-18T09:30:00.000Z", "Feb 18, 09:30 AM"),
    ("2026-03-05T17:05:00+00:00", "Mar 5, 05:05 PM"),
    (None, "N/A"),
    ("", "N/A"),
    ("yesterday", "N/A"),
])
def test_format_time(value, expected):
    assert format_time(value) == expected
