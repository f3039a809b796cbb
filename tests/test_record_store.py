"""
Record Store Tests
==================
Load / save of bugs-data.json: failure modes, timestamp stamping and
round-trip fidelity (no invented keys, unknown keys preserved).
"""
import json

import pytest

from bugboard.models.update_batch import UpdateBatch
from bugboard.services.record_store import RecordStore, RecordStoreError
from bugboard.services.update_engine import apply_batch


def test_load_preserves_order_and_fields(data_file):
    document = RecordStore(str(data_file)).load()

    assert [b.id for b in document.bugs] == ["NGE-001", "NGE-002", "NGE-003"]
    assert document.bugs[1].assigned_to == "dev-team-alpha"
    assert document.bugs[0].test_result == "passed"
    assert document.metadata.automation.success_rate == "83.3%"
    assert document.metadata.test_environment.kiosk_id == "K-01"


def test_default_path_is_relative_to_working_directory(data_file):
    document = RecordStore().load()
    assert len(document.bugs) == 3


def test_load_missing_file_raises(tmp_path):
    path = str(tmp_path / "nope.json")
    with pytest.raises(RecordStoreError, match="file not found") as exc_info:
        RecordStore(path).load()
    assert exc_info.value.path == path


def test_load_malformed_json_raises(tmp_path):
    path = tmp_path / "bugs-data.json"
    path.write_text("{ not json", encoding="utf-8")
    with pytest.raises(RecordStoreError, match="invalid JSON"):
        RecordStore(str(path)).load()


def test_load_non_object_raises(tmp_path):
    path = tmp_path / "bugs-data.json"
    path.write_text("[1, 2, 3]", encoding="utf-8")
    with pytest.raises(RecordStoreError, match="must be an object"):
        RecordStore(str(path)).load()


def test_load_bug_without_id_raises(tmp_path):
    path = tmp_path / "bugs-data.json"
    path.write_text(json.dumps({"metadata": {}, "bugs": [{"title": "no id"}]}), encoding="utf-8")
    with pytest.raises(RecordStoreError, match="unexpected document shape"):
        RecordStore(str(path)).load()


def test_save_stamps_last_updated(data_file):
    store = RecordStore(str(data_file))
    document = store.load()

    timestamp = store.save(document)

    saved = json.loads(data_file.read_text(encoding="utf-8"))
    assert saved["metadata"]["lastUpdated"] == timestamp
    assert timestamp != "2026-02-17T10:00:00.000Z"
    assert timestamp.endswith("Z")


def test_save_without_changes_only_touches_last_updated(data_file, document_dict):
    store = RecordStore(str(data_file))
    store.save(store.load())

    saved = json.loads(data_file.read_text(encoding="utf-8"))
    saved["metadata"].pop("lastUpdated")
    document_dict["metadata"].pop("lastUpdated")
    assert saved == document_dict


OUT_OF_ORDER_DOCUMENT = {
    "bugs": [
        {
            "id": "NGE-010",
            "status": "in-progress",
            "title": "Receipt printer stalls",
            "assignedTo": "dev-team-alpha",
            "testResult": "failed",
            "priority": "high",
            "screenshots": {"after": None, "before": "b.png"},
        },
    ],
    "metadata": {
        "testEnvironment": {"kioskId": 7, "url": "https://kiosk.example.com", "accessCode": "0042"},
        "automation": {"successRate": 85, "testsPassed": "47", "testsFailed": 8.0, "currentStatus": "idle"},
        "lastUpdated": "2026-02-17T10:00:00.000Z",
    },
}


def _write_like_save(path, document: dict) -> str:
    text = json.dumps(document, indent=2, ensure_ascii=False)
    path.write_text(text, encoding="utf-8")
    return text


def test_unknown_id_batch_leaves_file_bytes_unchanged_except_last_updated(tmp_path):
    path = tmp_path / "bugs-data.json"
    original = _write_like_save(path, OUT_OF_ORDER_DOCUMENT)
    store = RecordStore(str(path))
    document = store.load()

    apply_batch(document, UpdateBatch.model_validate({"bugs": [{"id": "NOPE", "status": "fixed"}]}))
    timestamp = store.save(document)

    expected = original.replace("2026-02-17T10:00:00.000Z", timestamp)
    assert path.read_text(encoding="utf-8") == expected


def test_fixture_document_round_trips_byte_for_byte(data_file, document_dict):
    original = _write_like_save(data_file, document_dict)
    store = RecordStore(str(data_file))

    timestamp = store.save(store.load())

    assert data_file.read_text(encoding="utf-8") == original.replace("2026-02-17T10:00:00.000Z", timestamp)


def test_update_keeps_source_key_order_and_untouched_values(tmp_path):
    path = tmp_path / "bugs-data.json"
    _write_like_save(path, OUT_OF_ORDER_DOCUMENT)
    store = RecordStore(str(path))
    document = store.load()

    apply_batch(document, UpdateBatch.model_validate({"bugs": [{"id": "NGE-010", "status": "fixed"}]}))
    store.save(document)

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert list(saved) == ["bugs", "metadata"]
    assert list(saved["bugs"][0]) == ["id", "status", "title", "testResult", "priority", "screenshots"]
    assert list(saved["bugs"][0]["screenshots"]) == ["after", "before"]
    assert saved["metadata"]["automation"] == {
        "successRate": 85, "testsPassed": "47", "testsFailed": 8.0, "currentStatus": "idle",
    }
    assert saved["metadata"]["testEnvironment"]["kioskId"] == 7


def test_save_keeps_unknown_keys_and_does_not_invent_fields(data_file):
    store = RecordStore(str(data_file))
    store.save(store.load())

    saved = json.loads(data_file.read_text(encoding="utf-8"))
    third = saved["bugs"][2]
    assert third["reporter"] == "qa-bot"
    assert "screenshots" not in third
    assert "assignedTo" not in third
    assert "fixedDate" not in third


def test_save_is_pretty_printed(data_file):
    store = RecordStore(str(data_file))
    store.save(store.load())
    text = data_file.read_text(encoding="utf-8")
    assert text.startswith('{\n  "metadata": {')


def test_save_write_failure_raises(data_file, tmp_path):
    document = RecordStore(str(data_file)).load()
    # A directory cannot be opened for writing
    with pytest.raises(RecordStoreError, match="Error saving"):
        RecordStore(str(tmp_path)).save(document)


def test_save_adds_metadata_when_file_had_none(tmp_path):
    path = tmp_path / "bugs-data.json"
    path.write_text(json.dumps({"bugs": []}), encoding="utf-8")
    store = RecordStore(str(path))

    timestamp = store.save(store.load())

    saved = json.loads(path.read_text(encoding="utf-8"))
    assert saved == {"metadata": {"lastUpdated": timestamp}, "bugs": []}
