"""General update: ask the upstream automation to refresh every section.

Only one update runs at a time; a trigger while one is running is a no-op.
A successful update stays reported as updating and successful for a short
hold period, then both flags clear. The elapsed time keeps ticking while the
update is reported as running and freezes when it stops.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import asdict, dataclass
from typing import Callable, Optional

from dashboard.errors import FetchError
from dashboard.fetch_client import SectionFetchClient

logger = logging.getLogger(__name__)

SUCCESS_HOLD_SECONDS = 2.0


@dataclass(frozen=True)
class UpdateStatus:
    is_updating: bool
    is_success: bool
    elapsed_seconds: int
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)


class GeneralUpdate:
    def __init__(self, client: SectionFetchClient, clock: Callable[[], float] = time.monotonic,
                 success_hold_seconds: float = SUCCESS_HOLD_SECONDS):
        self._client = client
        self._clock = clock
        self._hold = success_hold_seconds
        self._running = False
        self._succeeded_at: Optional[float] = None
        self._error: Optional[str] = None
        self._started_at: Optional[float] = None
        self._finished_at: Optional[float] = None
        self._task: Optional[asyncio.Task] = None

    def _holding(self, now: float) -> bool:
        return self._succeeded_at is not None and now - self._succeeded_at < self._hold

    def trigger(self) -> Optional[asyncio.Task]:
        """Start an update; returns the task, or ``None`` if one is running."""
        if self._running or self._holding(self._clock()):
            logger.debug("General update already running, skipping")
            return None
        self._running = True
        self._succeeded_at = None
        self._error = None
        self._started_at = self._clock()
        self._finished_at = None
        self._task = asyncio.get_running_loop().create_task(self._run())
        return self._task

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._client.trigger_general_update)
        except FetchError as e:
            logger.error("General update failed: %s", e)
            self._error = str(e)
            self._finished_at = self._clock()
        else:
            self._succeeded_at = self._clock()
            self._finished_at = self._succeeded_at + self._hold
            logger.info("General update completed")
        finally:
            self._running = False

    def status(self) -> UpdateStatus:
        now = self._clock()
        holding = self._holding(now)
        if self._started_at is None:
            elapsed = 0
        else:
            end = now if self._running or holding else self._finished_at
            elapsed = int(end - self._started_at)
        return UpdateStatus(
            is_updating=self._running or holding,
            is_success=holding,
            elapsed_seconds=elapsed,
            error=self._error,
        )

    async def wait(self) -> None:
        """Wait for the current update, if any."""
        if self._task is not None:
            await asyncio.gather(self._task, return_exceptions=True)
