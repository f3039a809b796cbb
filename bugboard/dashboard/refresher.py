"""
Dashboard Refresher
===================
Periodically re-fetches bugs-data.json over HTTP and swaps it into the
DashboardState.

    refresh_once()  — one fetch; True on success, False on any failure
    start()         — schedule the loop on the running event loop
    stop()          — cancel the loop and wait for it to finish

A failed fetch (HTTP error, network error, bad JSON, unexpected shape)
keeps the last good records and records a visible error on the state.
The loop itself never dies on a fetch failure. Each request has a timeout
so a hung server becomes a recorded error instead of a stuck loop.
"""
import asyncio
import logging
from typing import Optional

import httpx
from pydantic import ValidationError

from bugboard.core import config
from bugboard.dashboard.state import DashboardState
from bugboard.models.document import Document

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load bug data. Showing the last loaded data."


class DashboardRefresher:
    """
    Background task that keeps a DashboardState in sync with the document URL.
    """

    def __init__(
        self,
        state: DashboardState,
        source_url: Optional[str] = None,
        interval_seconds: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
    ) -> None:
        self.state = state
        self.source_url = source_url or config.DASHBOARD_DATA_URL
        self.interval_seconds = interval_seconds or config.DASHBOARD_REFRESH_SECONDS
        self.timeout_seconds = timeout_seconds or config.DASHBOARD_FETCH_TIMEOUT
        self.headers = {
            "Accept": "application/json",
            "User-Agent": "bugboard-dashboard",
            "Cache-Control": "no-cache",
        }
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def refresh_once(self) -> bool:
        try:
            async with httpx.AsyncClient(headers=self.headers, timeout=self.timeout_seconds) as client:
                response = await client.get(self.source_url)
                response.raise_for_status()
                payload = response.json()
            document = Document.model_validate(payload)
        except httpx.HTTPStatusError as http_err:
            logger.warning("Dashboard refresh failed: HTTP %d from %s",
                           http_err.response.status_code, self.source_url)
            self.state.mark_error(f"{LOAD_ERROR_MESSAGE} (HTTP {http_err.response.status_code})")
            return False
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Dashboard refresh failed: %s: %s", type(e).__name__, e)
            self.state.mark_error(f"{LOAD_ERROR_MESSAGE} ({type(e).__name__})")
            return False
        except (ValueError, ValidationError) as e:
            # json decode errors are ValueErrors
            logger.warning("Dashboard refresh returned an unusable document: %s", e)
            self.state.mark_error(f"{LOAD_ERROR_MESSAGE} (invalid document)")
            return False

        self.state.replace_document(document)
        logger.debug("Dashboard refreshed: %d bugs from %s", len(document.bugs), self.source_url)
        return True

    async def _run(self, initial_delay: float) -> None:
        if initial_delay > 0:
            await asyncio.sleep(initial_delay)
        while True:
            try:
                await self.refresh_once()
            except Exception as e:
                logger.exception("Dashboard refresh crashed: %s", e)
                self.state.mark_error(f"{LOAD_ERROR_MESSAGE} ({type(e).__name__})")
            await asyncio.sleep(self.interval_seconds)

    def start(self, initial_delay: float = 0) -> asyncio.Task:
        """
        Start the loop on the running event loop. Idempotent.

        ``initial_delay`` postpones the first fetch, used when the state was
        already seeded from the local file at startup.
        """
        if not self.running:
            self._task = asyncio.create_task(self._run(initial_delay), name="dashboard-refresher")
            logger.info("Dashboard refresher started (every %ss from %s)",
                        self.interval_seconds, self.source_url)
        return self._task

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.error("Dashboard refresher ended with an error: %s: %s", type(e).__name__, e)
        logger.info("Dashboard refresher stopped")
