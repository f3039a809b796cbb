"""
Dashboard State Tests
=====================
Status filter and search composition (AND), normalisation, per-request
views, error retention and dashboard stats.
"""
import pytest

from bugboard.dashboard.state import DashboardState, apply_filters, normalize_filter
from bugboard.models.document import Document


@pytest.fixture
def state(document_dict):
    s = DashboardState()
    s.replace_document(Document.model_validate(document_dict))
    return s


def _ids(records):
    return [b.id for b in records]


def test_replace_document_shows_everything(state):
    assert _ids(state.filtered_records) == ["NGE-001", "NGE-002", "NGE-003"]
    assert state.loaded is True
    assert state.error is None


def test_search_with_all_filter_matches_titles(state):
    state.set_filter("all")
    state.set_search("log")

    assert _ids(state.filtered_records) == ["NGE-001", "NGE-002"]


def test_status_filter_with_empty_search(state):
    state.set_filter("fixed")
    state.set_search("")

    assert _ids(state.filtered_records) == ["NGE-001"]


def test_search_and_status_filter_compose(state):
    state.set_filter("in-progress")
    state.set_search("log")
    assert _ids(state.filtered_records) == ["NGE-002"]

    state.set_filter("fixed")
    state.set_search("logout")
    assert _ids(state.filtered_records) == []


def test_search_is_case_insensitive(state):
    state.set_search("LOGIN")
    assert _ids(state.filtered_records) == ["NGE-001"]


@pytest.mark.parametrize("term,expected", [
    ("nge-003", ["NGE-003"]),          # id
    ("checkout", ["NGE-003"]),         # category
    ("session expires", ["NGE-002"]),  # description
    ("nothing-like-this", []),
])
def test_search_covers_id_description_and_category(state, term, expected):
    state.set_search(term)
    assert _ids(state.filtered_records) == expected


@pytest.mark.parametrize("value", [None, "", "closed", "ALL"])
def test_unknown_or_empty_filter_falls_back_to_all(value):
    assert normalize_filter(value) == "all"


def test_filter_value_is_normalised():
    assert normalize_filter(" Fixed ") == "fixed"


def test_view_does_not_mutate_shared_state(state):
    view = state.view("pending", "")

    assert _ids(view.filtered_records) == ["NGE-003"]
    assert view.current_filter == "pending"
    assert state.current_filter == "all"
    assert _ids(state.filtered_records) == ["NGE-001", "NGE-002", "NGE-003"]


def test_mark_error_keeps_previous_records(state):
    state.mark_error("Failed to load bug data.")

    assert state.error == "Failed to load bug data."
    assert len(state.all_records) == 3
    assert _ids(state.filtered_records) == ["NGE-001", "NGE-002", "NGE-003"]


def test_replace_document_keeps_filter_and_clears_error(state):
    state.set_filter("fixed")
    state.mark_error("boom")

    state.replace_document(Document.model_validate({
        "bugs": [
            {"id": "NEW-1", "status": "fixed"},
            {"id": "NEW-2", "status": "pending"},
        ]
    }))

    assert _ids(state.all_records) == ["NEW-1", "NEW-2"]
    assert _ids(state.filtered_records) == ["NEW-1"]
    assert state.error is None


def test_apply_filters_preserves_order(state):
    result = apply_filters(list(reversed(state.all_records)), "all", "")
    assert _ids(result) == ["NGE-003", "NGE-002", "NGE-001"]


def test_stats(state):
    stats = state.stats()

    assert stats.fixed == 1
    assert stats.in_progress == 1
    assert stats.pending == 1
    assert stats.failed == 1
    assert stats.success_rate == "83.3%"


def test_stats_default_success_rate_before_first_load():
    stats = DashboardState().stats()

    assert stats.to_dict() == {
        "fixed": 0,
        "inProgress": 0,
        "pending": 0,
        "failed": 0,
        "successRate": "0%",
    }
