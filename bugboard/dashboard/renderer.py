"""
Dashboard Renderer
==================
Builds the dashboard HTML from a DashboardState.

Every value taken from the bug document (ids, titles, descriptions,
categories, screenshot paths, environment fields) goes through html.escape
before it reaches the markup. The page is regenerated from scratch on each
request; there is no incremental diffing.

The screenshot viewer is a small inline script: clicking a thumbnail opens
an overlay with the full image and its caption, and the overlay closes on
the close control, a click outside the image, or Escape. Closing restores
page scrolling.
"""
import html
from typing import List, Optional
from urllib.parse import urlencode, urlsplit

from bugboard.core.constants import (
    DASHBOARD_FILTERS,
    DEFAULT_RESULT_ICON,
    FILTER_ALL,
    HIGHLIGHTED_PRIORITIES,
    RESULT_ICONS,
)
from bugboard.dashboard.state import DashboardState, DashboardStats
from bugboard.models.bug_record import BugRecord
from bugboard.models.document import RunMetadata
from bugboard.utils.time_utils import format_time

EMPTY_MESSAGE = "No bugs found matching your criteria."

FILTER_LABELS = {
    "all": "All",
    "fixed": "Fixed",
    "in-progress": "In Progress",
    "pending": "Pending",
}


def _e(value) -> str:
    if value is None:
        return ""
    return html.escape(str(value), quote=True)


def _label(value: Optional[str]) -> str:
    return (value or "").replace("-", " ")


# ---------------------------------------------------------------------------
# Panels
# ---------------------------------------------------------------------------
def render_stats(stats: DashboardStats) -> str:
    cells = [
        ("stat-fixed", "Fixed", stats.fixed),
        ("stat-in-progress", "In Progress", stats.in_progress),
        ("stat-pending", "Pending", stats.pending),
        ("stat-failed", "Failed Tests", stats.failed),
        ("stat-success-rate", "Success Rate", stats.success_rate),
    ]
    items = "".join(
        f'<div class="stat-card"><div class="stat-value" id="{cid}">{_e(value)}</div>'
        f'<div class="stat-label">{label}</div></div>'
        for cid, label, value in cells
    )
    return f'<section class="stats">{items}</section>'


def render_environment(metadata: Optional[RunMetadata]) -> str:
    env = metadata.test_environment if metadata else None
    if env is None:
        return ""
    url = _e(env.url)
    if urlsplit(env.url or "").scheme.lower() in ("http", "https"):
        link = f'<a href="{url}" target="_blank" rel="noopener">{url}</a>'
    else:
        link = url
    return (
        '<section class="environment">'
        f'<div>URL: <span id="env-url">{link}</span></div>'
        f'<div>Access code: <span id="env-access-code">{_e(env.access_code)}</span></div>'
        f'<div>Kiosk: <span id="env-kiosk-id">{_e(env.kiosk_id)}</span></div>'
        "</section>"
    )


def _count(value) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0


def progress_percent(passed, failed) -> float:
    passed = _count(passed)
    failed = _count(failed)
    total = passed + failed
    return (passed / total) * 100 if total > 0 else 0


def render_automation(metadata: Optional[RunMetadata]) -> str:
    if metadata is None:
        return ""
    auto = metadata.automation
    status = auto.current_status or "idle"
    running = status == "running"
    status_text = "Testing in Progress..." if running else "Idle"
    progress = progress_percent(auto.tests_passed, auto.tests_failed)
    section_class = "automation running" if running else "automation"
    return (
        f'<section class="{section_class}" id="automation-status">'
        f'<span class="status-dot {_e(status)}" id="status-dot"></span>'
        f'<span id="status-text">{status_text}</span>'
        f'<div>Last run: <span id="last-run">{_e(format_time(auto.last_test_run))}</span></div>'
        f'<div><span id="tests-passed">{_e(auto.tests_passed or 0)} passed</span> / '
        f'<span id="tests-failed">{_e(auto.tests_failed or 0)} failed</span></div>'
        f'<div>Next run: <span id="next-run">{_e(format_time(auto.next_scheduled_run))}</span></div>'
        f'<div class="progress"><div class="progress-bar" id="progress-bar" style="width: {progress:g}%"></div></div>'
        "</section>"
    )


def render_filters(current_filter: str, search_term: str) -> str:
    buttons = []
    for value in DASHBOARD_FILTERS:
        params = {"filter": value}
        if search_term:
            params["q"] = search_term
        css = "filter-btn active" if value == current_filter else "filter-btn"
        buttons.append(
            f'<a class="{css}" data-filter="{value}" href="/?{_e(urlencode(params))}">{FILTER_LABELS[value]}</a>'
        )
    hidden = ""
    if current_filter != FILTER_ALL:
        hidden = f'<input type="hidden" name="filter" value="{_e(current_filter)}">'
    search = (
        '<form class="search" method="get" action="/">'
        f"{hidden}"
        f'<input id="search-input" type="search" name="q" placeholder="Search bugs..." value="{_e(search_term)}">'
        "</form>"
    )
    return f'<nav class="filters">{"".join(buttons)}{search}</nav>'


def render_error(message: Optional[str]) -> str:
    if not message:
        return ""
    return f'<div class="error-banner" role="alert">&#9888;&#65039; {_e(message)}</div>'


# ---------------------------------------------------------------------------
# Bug cards
# ---------------------------------------------------------------------------
def _screenshot(bug: BugRecord, which: str) -> str:
    path = bug.screenshot(which)
    label = "Before" if which == "before" else "After"
    if path:
        caption = f"{bug.id} - {label}"
        return (
            '<div class="screenshot">'
            f'<img src="{_e(path)}" alt="{label} fix" loading="lazy" class="js-lightbox" '
            f'data-full="{_e(path)}" data-caption="{_e(caption)}">'
            f'<div class="screenshot-label">{label}</div>'
            "</div>"
        )
    if which == "before":
        placeholder = "No screenshot"
    else:
        placeholder = "Pending capture" if bug.is_fixed else "Not fixed yet"
    return f'<div class="screenshot"><div class="screenshot-placeholder">{placeholder}</div></div>'


def render_bug_card(bug: BugRecord) -> str:
    badge = ""
    if bug.priority in HIGHLIGHTED_PRIORITIES:
        badge = f'<span class="priority-badge {bug.priority}">{HIGHLIGHTED_PRIORITIES[bug.priority]}</span>'

    meta = [
        f'<span class="category-tag">{_e(bug.category)}</span>',
        f"<span>Created: {_e(bug.created_date)}</span>",
    ]
    if bug.fixed_date:
        meta.append(f"<span>Fixed: {_e(bug.fixed_date)}</span>")
    if bug.assigned_to:
        meta.append(f"<span>Assigned: {_e(bug.assigned_to)}</span>")

    icon = RESULT_ICONS.get(bug.test_result, DEFAULT_RESULT_ICON)

    return (
        f'<div class="bug-card" data-status="{_e(bug.status)}" data-id="{_e(bug.id)}">'
        '<div class="bug-header"><div>'
        f'<div class="bug-id">{_e(bug.id)}</div>'
        f'<div class="bug-title">{_e(bug.title)}{badge}</div>'
        "</div>"
        f'<span class="status-badge {_e(bug.status)}">{_e(_label(bug.status))}</span>'
        "</div>"
        '<div class="bug-body">'
        f'<div class="bug-description">{_e(bug.description)}</div>'
        f'<div class="bug-meta">{"".join(meta)}</div>'
        "</div>"
        f'<div class="screenshots">{_screenshot(bug, "before")}{_screenshot(bug, "after")}</div>'
        '<div class="test-result"><span class="test-result-label">Test Result:</span>'
        f'<span class="test-result-value {_e(bug.test_result)}">{icon} {_e(_label(bug.test_result))}</span>'
        "</div>"
        "</div>"
    )


def render_bugs(records: List[BugRecord]) -> str:
    if not records:
        return f'<div id="bug-grid" class="bug-grid"><div class="loading"><p>{EMPTY_MESSAGE}</p></div></div>'
    cards = "".join(render_bug_card(bug) for bug in records)
    return f'<div id="bug-grid" class="bug-grid">{cards}</div>'


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------
_STYLE = """
body { font-family: system-ui, sans-serif; margin: 0; background: #0f172a; color: #e2e8f0; }
header, main { padding: 1rem 2rem; }
.stats { display: flex; gap: 1rem; }
.stat-card { background: #1e293b; padding: .75rem 1.25rem; border-radius: 8px; }
.stat-value { font-size: 1.6rem; font-weight: 700; }
.filters { display: flex; gap: .5rem; align-items: center; margin: 1rem 0; }
.filter-btn { padding: .35rem .8rem; border-radius: 6px; background: #1e293b; color: inherit; text-decoration: none; }
.filter-btn.active { background: #2563eb; }
.bug-grid { display: grid; grid-template-columns: repeat(auto-fill, minmax(340px, 1fr)); gap: 1rem; }
.bug-card { background: #1e293b; border-radius: 8px; padding: 1rem; }
.bug-header { display: flex; justify-content: space-between; }
.priority-badge { margin-left: .5rem; font-size: .75rem; padding: 0 .4rem; border-radius: 4px; }
.priority-badge.critical { background: #dc2626; }
.priority-badge.high { background: #ea580c; }
.screenshots { display: flex; gap: .5rem; margin: .75rem 0; }
.screenshot img { max-width: 150px; cursor: zoom-in; }
.error-banner { background: #7f1d1d; padding: .75rem 1rem; border-radius: 6px; margin-bottom: 1rem; }
.progress { background: #334155; height: 6px; border-radius: 3px; }
.progress-bar { background: #22c55e; height: 6px; border-radius: 3px; }
.lightbox { display: none; position: fixed; inset: 0; background: rgba(0,0,0,.85); align-items: center; justify-content: center; flex-direction: column; }
.lightbox.active { display: flex; }
.lightbox img { max-width: 90vw; max-height: 80vh; }
.lightbox-close { position: absolute; top: 1rem; right: 1.5rem; font-size: 2rem; cursor: pointer; }
"""

_SCRIPT = """
(function () {
  var box = document.getElementById('lightbox');
  var img = document.getElementById('lightbox-img');
  var caption = document.getElementById('lightbox-caption');
  function openLightbox(src, text) {
    img.src = src;
    caption.textContent = text;
    box.classList.add('active');
    document.body.style.overflow = 'hidden';
  }
  function closeLightbox() {
    box.classList.remove('active');
    document.body.style.overflow = '';
  }
  document.querySelectorAll('img.js-lightbox').forEach(function (el) {
    el.addEventListener('click', function () {
      openLightbox(el.dataset.full, el.dataset.caption);
    });
  });
  box.addEventListener('click', function (e) {
    if (e.target.id === 'lightbox' || e.target.classList.contains('lightbox-close')) {
      closeLightbox();
    }
  });
  document.addEventListener('keydown', function (e) {
    if (e.key === 'Escape') { closeLightbox(); }
  });
  var refreshMs = parseInt(document.body.dataset.refreshMs, 10);
  var search = document.getElementById('search-input');
  function busy() {
    if (box.classList.contains('active')) { return true; }
    return !!search && (document.activeElement === search || search.value !== search.defaultValue);
  }
  function scheduleReload() {
    setTimeout(function () {
      if (busy()) { scheduleReload(); } else { window.location.reload(); }
    }, refreshMs);
  }
  if (refreshMs > 0) { scheduleReload(); }
})();
"""


def render_page(state: DashboardState, refresh_seconds: float = 30) -> str:
    """Full dashboard page for an already-filtered state (see DashboardState.view)."""
    if state.loaded or state.error:
        grid = render_bugs(state.filtered_records)
    else:
        grid = '<div id="bug-grid" class="bug-grid"><div class="loading"><p>Loading bug data...</p></div></div>'

    last_updated = state.metadata.last_updated if state.metadata else None

    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f'<noscript><meta http-equiv="refresh" content="{int(refresh_seconds)}"></noscript>'
        "<title>Bug Dashboard</title>"
        f"<style>{_STYLE}</style>"
        "</head>"
        f'<body data-refresh-ms="{int(refresh_seconds * 1000)}">'
        "<header><h1>Bug Dashboard</h1>"
        f'<div class="last-updated">Last updated: {_e(format_time(last_updated))}</div>'
        "</header><main>"
        f"{render_error(state.error)}"
        f"{render_stats(state.stats())}"
        f"{render_environment(state.metadata)}"
        f"{render_automation(state.metadata)}"
        f"{render_filters(state.current_filter, state.search_term)}"
        f"{grid}"
        "</main>"
        '<div id="lightbox" class="lightbox">'
        '<span class="lightbox-close" aria-label="Close">&times;</span>'
        '<img id="lightbox-img" alt="">'
        '<div id="lightbox-caption" class="lightbox-caption"></div>'
        "</div>"
        f"<script>{_SCRIPT}</script>"
        "</body></html>"
    )
