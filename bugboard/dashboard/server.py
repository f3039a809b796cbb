"""
Dashboard Server
================
FastAPI application factory for the read-only bug dashboard.

Lifecycle:
    startup   — seed the state from the local document (if readable), then
                start the refresher task
    shutdown  — cancel the refresher task and wait for it

The DashboardState lives on ``app.state.dashboard``; routes read it from
the request, nothing is kept in module globals.
"""
import os
import time
import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from starlette.middleware.base import BaseHTTPMiddleware

from bugboard.core import config
from bugboard.dashboard.api import router as dashboard_router
from bugboard.dashboard.refresher import DashboardRefresher
from bugboard.dashboard.state import DashboardState
from bugboard.services.record_store import RecordStore, RecordStoreError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"
        logger.debug("Incoming: %s %s from %s", request.method, request.url.path, client_host)

        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000
            logger.info(
                "%s %s - Status: %d - Time: %.2fms",
                request.method, request.url.path, response.status_code, process_time,
            )
            return response
        except Exception as e:
            logger.error("Request failed: %s %s - Error: %s", request.method, request.url.path, e)
            raise


def seed_from_file(state: DashboardState, path: Optional[str] = None) -> bool:
    """Fill the state from the local document so the first page is not empty."""
    try:
        state.replace_document(RecordStore(path).load())
        return True
    except RecordStoreError as e:
        logger.warning("Initial dashboard load skipped: %s", e)
        return False


def create_app(
    state: Optional[DashboardState] = None,
    start_refresher: bool = True,
    data_url: Optional[str] = None,
) -> FastAPI:
    dashboard_state = state or DashboardState()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        refresher = None
        if start_refresher:
            seeded = seed_from_file(dashboard_state)
            refresher = DashboardRefresher(dashboard_state, source_url=data_url)
            refresher.start(initial_delay=refresher.interval_seconds if seeded else 0)
        try:
            yield
        finally:
            if refresher is not None:
                await refresher.stop()

    app = FastAPI(title="Bug Dashboard", lifespan=lifespan)
    app.state.dashboard = dashboard_state
    app.add_middleware(LoggingMiddleware)

    # Health endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(dashboard_router, tags=["Dashboard"])

    if os.path.isdir(config.SCREENSHOTS_DIR):
        app.mount("/screenshots", StaticFiles(directory=config.SCREENSHOTS_DIR), name="screenshots")

    return app


def run_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    host = host or config.DASHBOARD_HOST
    port = port or config.DASHBOARD_PORT

    # Without an explicit DASHBOARD_DATA_URL the refresher reads from this server
    data_url = None
    if not os.getenv("DASHBOARD_DATA_URL"):
        data_url = f"http://{host}:{port}/bugs-data.json"

    logger.info("Starting dashboard on http://%s:%d", host, port)
    uvicorn.run(create_app(data_url=data_url), host=host, port=port, log_config=None)
