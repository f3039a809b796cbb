"""
Bug Record Model
================
Pydantic model for one tracked defect in bugs-data.json.

Fields (JSON name in brackets):
    id              — unique, stable identifier (e.g. "NGE-014")
    title           — short free text
    description     — free text
    category        — free text grouping shown as a tag
    priority        — critical / high / normal (only critical and high are badged)
    status          — fixed / in-progress / pending
    test_result     — [testResult] passed / failed / pending / not-tested
    screenshots     — {"before": path|null, "after": path|null}, other keys kept
    created_date    — [createdDate] immutable after creation
    fixed_date      — [fixedDate] only meaningful once fixed
    assigned_to     — [assignedTo] only present while in-progress

Serialisation contract:
    Records are dumped with ``exclude_unset=True`` so keys that were not in
    the source file are never invented, and unknown keys (extra="allow")
    are written back untouched.
"""
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from bugboard.core.constants import STATUS_FIXED, STATUS_PENDING, RESULT_NOT_TESTED


class BugRecord(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: str
    title: Optional[str] = ""
    description: Optional[str] = ""
    category: Optional[str] = ""
    priority: Optional[str] = "normal"
    status: str = STATUS_PENDING
    test_result: str = RESULT_NOT_TESTED
    screenshots: Optional[Dict[str, Optional[str]]] = None
    created_date: Optional[str] = None
    fixed_date: Optional[str] = None
    assigned_to: Optional[str] = None

    @property
    def is_fixed(self) -> bool:
        return self.status == STATUS_FIXED

    @property
    def has_assignment(self) -> bool:
        return "assigned_to" in self.__pydantic_fields_set__

    def clear_assignment(self) -> bool:
        """
        Drop ``assignedTo`` from the record.

        Returns True when the field was present. The field is removed from
        the set of populated fields, so it disappears from the saved JSON
        instead of being written as null.
        """
        if not self.has_assignment:
            return False
        self.assigned_to = None
        self.__pydantic_fields_set__.discard("assigned_to")
        return True

    def screenshot(self, which: str) -> Optional[str]:
        """Path of the "before" or "after" screenshot, None when missing."""
        if not self.screenshots:
            return None
        return self.screenshots.get(which) or None

    def searchable_text(self) -> str:
        """Case-folded "id title description category" used by dashboard search."""
        parts = [self.id, self.title or "", self.description or "", self.category or ""]
        return " ".join(parts).casefold()
