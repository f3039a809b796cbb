"""
Shared fixtures: a small realistic bugs-data.json and logging isolation.
"""
import copy
import json
import logging

import pytest

SAMPLE_DOCUMENT = {
    "metadata": {
        "lastUpdated": "2026-02-17T10:00:00.000Z",
        "automation": {
            "currentStatus": "idle",
            "lastTestRun": "2026-02-17T09:00:00.000Z",
            "nextScheduledRun": "2026-02-18T09:00:00.000Z",
            "testsPassed": 10,
            "testsFailed": 2,
            "successRate": "83.3%",
        },
        "testEnvironment": {
            "url": "https://kiosk.example.com/order",
            "accessCode": "1234",
            "kioskId": "K-01",
        },
    },
    "bugs": [
        {
            "id": "NGE-001",
            "title": "Login bug",
            "description": "Login button unresponsive on first tap",
            "category": "auth",
            "priority": "critical",
            "status": "fixed",
            "testResult": "passed",
            "screenshots": {"before": "screenshots/fixed/NGE-001-before.png", "after": None},
            "createdDate": "2026-02-01",
            "fixedDate": "2026-02-10",
        },
        {
            "id": "NGE-002",
            "title": "Logout crash",
            "description": "App crashes when the session expires",
            "category": "auth",
            "priority": "high",
            "status": "in-progress",
            "testResult": "failed",
            "screenshots": {"before": None, "after": None},
            "createdDate": "2026-02-02",
            "assignedTo": "dev-team-alpha",
        },
        {
            "id": "NGE-003",
            "title": "Cart total wrong",
            "description": "Tax <b>not</b> applied to combo items",
            "category": "checkout",
            "priority": "normal",
            "status": "pending",
            "testResult": "not-tested",
            "createdDate": "2026-02-03",
            "reporter": "qa-bot",
        },
    ],
}


def make_document_dict() -> dict:
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def document_dict():
    return make_document_dict()


@pytest.fixture
def data_file(tmp_path, monkeypatch, document_dict):
    """bugs-data.json written into a temporary working directory."""
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "bugs-data.json"
    path.write_text(json.dumps(document_dict, indent=2), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def restore_logging():
    """The CLI installs its own root handlers; drop them after each test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers and type(handler).__module__.startswith("logging"):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)
