"""
Template Writer
===============
Writes an example update file showing every supported field. Never reads
or touches the primary bug document.
"""
import json
import logging
from typing import Any, Dict, Optional

from bugboard.core import config
from bugboard.utils.time_utils import utc_now_iso

logger = logging.getLogger(__name__)


def build_template() -> Dict[str, Any]:
    return {
        "description": "Bug Update Template",
        "timestamp": utc_now_iso(),
        "bugs": [
            {
                "id": "NGE-XXX",
                "status": "fixed",          # fixed | in-progress | pending
                "testResult": "passed",     # passed | failed | pending | not-tested
                "screenshots": {
                    "before": "screenshots/fixed/NGE-XXX-before.png",
                    "after": "screenshots/fixed/NGE-XXX-after.png",
                },
                "fixedDate": "2026-02-18",
            }
        ],
        "automation": {
            "successRate": "85.5%",
            "testsPassed": 47,
            "testsFailed": 8,
            "currentStatus": "idle",        # idle | running | error
        },
    }


def write_template(path: Optional[str] = None) -> str:
    """Write the template and return the path written. OSError propagates."""
    path = path or config.TEMPLATE_FILE
    with open(path, "w", encoding="utf-8") as f:
        json.dump(build_template(), f, indent=2)
    logger.info("Template generated: %s", path)
    return path
