"""
Update Batch Model
==================
Pydantic models for the update file consumed by ``bugboard update``.

    {
      "bugs": [
        {"id": "NGE-001", "status": "fixed", "testResult": "passed", "fixedDate": "2026-02-18"}
      ],
      "automation": {"successRate": "85.5%", "testsPassed": 47, "testsFailed": 8}
    }

Only fields present in an update are applied. A JSON null on a top-level
update field counts as absent; inside ``screenshots`` null is a real value.
"""
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .document import Automation

StatusValue = Literal["fixed", "in-progress", "pending"]
TestResultValue = Literal["passed", "failed", "pending", "not-tested"]


class BugUpdate(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    status: Optional[StatusValue] = None
    test_result: Optional[TestResultValue] = None
    screenshots: Optional[Dict[str, Optional[str]]] = None
    fixed_date: Optional[str] = None
    assigned_to: Optional[str] = None


class UpdateBatch(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    bugs: List[BugUpdate] = []
    automation: Optional[Automation] = None
