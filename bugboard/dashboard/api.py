"""
Dashboard Routes
================
Read-only HTTP surface of the dashboard. There is no write endpoint.

    GET /                 — dashboard page (?filter=<status|all>&q=<search>)
    GET /bugs-data.json   — the raw bug document, as shipped on disk
    GET /api/bugs         — filtered bug records as JSON
    GET /api/stats        — summary counts, last load time and current error

Requests never mutate the shared DashboardState: filter and search come
from the query string and are applied to a per-request view.
"""
import os
from typing import Optional

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import FileResponse, HTMLResponse

from bugboard.core import config
from bugboard.dashboard.renderer import render_page
from bugboard.dashboard.state import DashboardState

router = APIRouter()

_NO_CACHE = {"Cache-Control": "no-cache, no-store, must-revalidate"}


def _state(request: Request) -> DashboardState:
    return request.app.state.dashboard


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(request: Request, filter: Optional[str] = None, q: Optional[str] = None):
    view = _state(request).view(filter, q)
    return HTMLResponse(render_page(view, config.DASHBOARD_REFRESH_SECONDS), headers=_NO_CACHE)


@router.get("/bugs-data.json")
async def bugs_document():
    path = config.BUGS_DATA_FILE
    if not os.path.isfile(path):
        raise HTTPException(status_code=404, detail=f"{os.path.basename(path)} not found")
    return FileResponse(path, media_type="application/json", headers=_NO_CACHE)


@router.get("/api/bugs")
async def filtered_bugs(request: Request, filter: Optional[str] = None, q: Optional[str] = None):
    view = _state(request).view(filter, q)
    return {
        "filter": view.current_filter,
        "search": view.search_term,
        "count": len(view.filtered_records),
        "bugs": [
            bug.model_dump(mode="json", by_alias=True, exclude_unset=True)
            for bug in view.filtered_records
        ],
    }


@router.get("/api/stats")
async def dashboard_stats(request: Request):
    state = _state(request)
    return {
        "total": len(state.all_records),
        "stats": state.stats().to_dict(),
        "lastLoaded": state.last_loaded,
        "error": state.error,
    }
