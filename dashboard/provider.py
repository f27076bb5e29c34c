"""Dashboard data provider: the per-section fetch gate and state owner.

The provider owns the in-memory ``DashboardState``, the per-section
``attempted`` / ``in_flight`` flags, the last error message and the global
loading flag. ``fetch_section`` is the only mutating entry point besides
``clear_cache``.

All state lives on one asyncio event loop. ``fetch_section`` checks the gate
and flips ``in_flight`` synchronously, then spawns a task; the blocking
webhook call runs in an executor and its result is applied back on the loop.
A second request for a section that is already in flight is dropped, not
queued. Failures are recorded and never retried.

Usage::

    provider = DashboardProvider(client, cache_store)
    provider.start()
    task = provider.fetch_section(Section.PRODUCTS)
    if task is not None:
        await task
    provider.get_state()[Section.PRODUCTS]
"""

from __future__ import annotations

import asyncio
import logging
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Optional

from dashboard.cache_store import CacheStore
from dashboard.errors import FetchError
from dashboard.fetch_client import SectionFetchClient
from dashboard.sections import DashboardState, Section, empty_state, parse_section

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FetchFlags:
    """Snapshot of the per-section gate flags."""

    attempted: dict[Section, bool]
    in_flight: dict[Section, bool]

    def to_dict(self) -> dict[str, dict[str, bool]]:
        return {
            section.value: {
                "attempted": self.attempted[section],
                "in_flight": self.in_flight[section],
            }
            for section in Section
        }


class DashboardProvider:
    """Fetch gate, memoization and persisted cache for the dashboard sections."""

    def __init__(self, client: SectionFetchClient, cache_store: CacheStore,
                 executor: Optional[Executor] = None):
        self._client = client
        self._cache = cache_store
        self._executor = executor
        self._state: DashboardState = empty_state()
        self._attempted = {section: False for section in Section}
        self._in_flight = {section: False for section in Section}
        self._error: Optional[str] = None
        self._loading = False
        self._tasks: set[asyncio.Task] = set()
        self._started = False

    # ── lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> None:
        """Adopt a valid cache record as the initial state (runs once)."""
        if self._started:
            return
        self._started = True
        cached = self._cache.load()
        if cached is not None:
            logger.info("Loaded dashboard state from cache")
            self._state = cached

    async def aclose(self) -> None:
        """Wait for outstanding fetches, then release the client."""
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._client.close()

    # ── mutating operations ───────────────────────────────────────────────

    def fetch_section(self, section: Section | str,
                      force_refresh: bool = False) -> Optional[asyncio.Task]:
        """Start a fetch for *section* unless the gate says otherwise.

        Must be called from a running event loop.

        Returns:
            The spawned task, or ``None`` when the call was a no-op.
        """
        self.start()
        section = parse_section(section)

        if self._in_flight[section]:
            logger.debug("Request for %s already in progress, skipping", section.value)
            return None
        if not force_refresh and self._attempted[section]:
            logger.debug("%s already attempted, skipping", section.value)
            return None
        if not force_refresh and self._state[section] is not None:
            logger.debug("%s data already present, skipping", section.value)
            return None

        loop = asyncio.get_running_loop()
        self._in_flight[section] = True
        self._loading = True
        self._error = None

        task = loop.create_task(self._run_fetch(section))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_fetch(self, section: Section) -> None:
        loop = asyncio.get_running_loop()
        try:
            payload = await loop.run_in_executor(
                self._executor, self._client.fetch_section, section
            )
        except FetchError as e:
            # Prior data for the section stays visible
            logger.warning("Failed to fetch %s data: %s", section.value, e)
            self._error = str(e)
        else:
            self._state[section] = payload
            self._cache.save(self._state)
            self._error = None
            logger.info("Successfully fetched %s data", section.value)
        finally:
            self._in_flight[section] = False
            self._attempted[section] = True
            self._loading = any(self._in_flight.values())

    def clear_cache(self) -> None:
        """Forget cached and in-memory data; in-flight calls keep running."""
        self.start()
        self._cache.clear()
        self._state = empty_state()
        self._attempted = {section: False for section in Section}

    # ── read accessors ────────────────────────────────────────────────────

    def get_state(self) -> DashboardState:
        self.start()
        return dict(self._state)

    def get_section(self, section: Section | str) -> Any:
        self.start()
        return self._state[parse_section(section)]

    def get_error(self) -> Optional[str]:
        return self._error

    def is_loading(self) -> bool:
        return self._loading

    def get_flags(self) -> FetchFlags:
        return FetchFlags(attempted=dict(self._attempted), in_flight=dict(self._in_flight))
