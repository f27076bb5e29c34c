"""Persistent TTL-bounded snapshot of the dashboard state.

A single record lives under a fixed key in the local store::

    {"data": {"community": ..., "products": ..., "finance": ...},
     "timestamp": 1767225600000}

The timestamp is epoch milliseconds at write time. A record is usable only
while ``now - timestamp < ttl``; expired or malformed records are deleted on
read and reported as a miss.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from dashboard.errors import CacheReadError
from dashboard.sections import DashboardState, state_from_json, state_to_json
from utils.storage import LocalStore

logger = logging.getLogger(__name__)

CACHE_KEY = "dashboard_cache"
CACHE_TTL_SECONDS = 5 * 60


@dataclass(frozen=True)
class CacheRecord:
    data: dict[str, Any]
    timestamp: int  # epoch millis

    def age_ms(self, now_ms: int) -> int:
        return now_ms - self.timestamp


def decode_record(raw: str) -> CacheRecord:
    """Parse a stored record.

    Raises:
        CacheReadError: If *raw* is not JSON or lacks a usable data/timestamp.
    """
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        raise CacheReadError(f"cache record is not JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise CacheReadError("cache record is not an object")
    timestamp = parsed.get("timestamp")
    if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)) or not timestamp:
        raise CacheReadError("cache record has no timestamp")
    data = parsed.get("data")
    if not isinstance(data, dict):
        raise CacheReadError("cache record has no data object")
    return CacheRecord(data=data, timestamp=int(timestamp))


class CacheStore:
    """Load, save and clear the persisted dashboard snapshot."""

    def __init__(self, store: LocalStore, key: str = CACHE_KEY,
                 ttl_seconds: float = CACHE_TTL_SECONDS,
                 clock: Callable[[], float] = time.time):
        self._store = store
        self._key = key
        self._ttl_ms = int(ttl_seconds * 1000)
        self._clock = clock

    @property
    def ttl_seconds(self) -> float:
        return self._ttl_ms / 1000

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def read_record(self) -> CacheRecord | None:
        """Return the stored record without any TTL check, or ``None``.

        Raises:
            CacheReadError: If the stored value cannot be decoded.
        """
        raw = self._store.get_item(self._key)
        if raw is None:
            return None
        return decode_record(raw)

    def load(self) -> DashboardState | None:
        """Return the cached state if a fresh record exists, else ``None``."""
        try:
            record = self.read_record()
        except CacheReadError as e:
            logger.warning("Discarding unreadable dashboard cache: %s", e)
            self._store.remove_item(self._key)
            return None
        if record is None:
            return None
        if record.age_ms(self._now_ms()) >= self._ttl_ms:
            logger.info("Dashboard cache expired, removing")
            self._store.remove_item(self._key)
            return None
        return state_from_json(record.data)

    def save(self, state: DashboardState) -> None:
        """Persist the full *state* stamped with the current time."""
        record = {"data": state_to_json(state), "timestamp": self._now_ms()}
        self._store.set_item(self._key, json.dumps(record))

    def clear(self) -> None:
        self._store.remove_item(self._key)
