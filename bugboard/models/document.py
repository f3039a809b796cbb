"""
Document Model
==============
The whole bugs-data.json file: a run metadata header plus the ordered
list of bug records.

    {
      "metadata": {
        "lastUpdated": "...",
        "automation": {"currentStatus": "idle", "successRate": "85.5%", ...},
        "testEnvironment": {"url": "...", "accessCode": "...", "kioskId": "..."}
      },
      "bugs": [ {BugRecord}, ... ]
    }

Used by:
    - RecordStore to load / save the file
    - Update engine to merge updates in place
    - Reporting and the dashboard (read-only)

Round-trip contract:
    A document built with ``Document.from_json_dict`` remembers the parsed
    source. ``to_json_dict`` writes keys back in the source order, and the
    display-only metadata values (counters, rates, environment ids) are
    typed ``Any`` so they are written back exactly as read.
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr
from pydantic.alias_generators import to_camel

from .bug_record import BugRecord


class Automation(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    current_status: Optional[str] = "idle"      # idle / running / error
    last_test_run: Optional[str] = None
    next_scheduled_run: Optional[str] = None
    tests_passed: Any = 0
    tests_failed: Any = 0
    success_rate: Any = None


class EnvironmentInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    url: Optional[str] = None
    access_code: Any = None
    kiosk_id: Any = None


class RunMetadata(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    last_updated: Optional[str] = None
    automation: Automation = Field(default_factory=Automation)
    test_environment: Optional[EnvironmentInfo] = None


def follow_key_order(value: Any, source: Any) -> Any:
    """
    Reorder dict keys in ``value`` to match ``source``, recursively.

    Keys only present in ``value`` keep their relative order after the
    known ones. Lists are matched by position.
    """
    if isinstance(value, dict) and isinstance(source, dict):
        ordered = {key: follow_key_order(value[key], source[key]) for key in source if key in value}
        ordered.update((key, item) for key, item in value.items() if key not in ordered)
        return ordered
    if isinstance(value, list) and isinstance(source, list):
        return [
            follow_key_order(item, source[i]) if i < len(source) else item
            for i, item in enumerate(value)
        ]
    return value


class Document(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    metadata: RunMetadata = Field(default_factory=RunMetadata)
    bugs: List[BugRecord] = []

    _source: Optional[dict] = PrivateAttr(default=None)

    @classmethod
    def from_json_dict(cls, raw: dict) -> "Document":
        """Validate a parsed bugs-data.json and keep it for order-preserving saves."""
        document = cls.model_validate(raw)
        document._source = raw
        return document

    def find_bug(self, bug_id: str) -> Optional[BugRecord]:
        for bug in self.bugs:
            if bug.id == bug_id:
                return bug
        return None

    def stamp_updated(self, timestamp: str) -> None:
        metadata = self.metadata
        metadata.last_updated = timestamp
        # Re-assign so the header is serialised even if the file had none
        self.metadata = metadata

    def to_json_dict(self) -> dict:
        """JSON-ready dict using the file's camelCase keys, without invented fields."""
        dumped = self.model_dump(mode="json", by_alias=True, exclude_unset=True)
        if self._source is None:
            return dumped
        return follow_key_order(dumped, self._source)
