"""HTTP utilities for the dashboard webhooks.

Provides reusable pieces for:
- Connection pooling and session management
- JSON POST requests carrying a request timestamp

Webhook calls are never retried here; a failed attempt is reported to the
caller as-is.
"""

from datetime import datetime, timezone
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter


def request_timestamp(now: Optional[datetime] = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision.

    Examples:
        2026-02-22T14:30:00.123Z
    """
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SessionManager:
    """Manages a pooled HTTP session with retries disabled."""

    def __init__(self, pool_connections: int = 4, pool_maxsize: int = 8):
        """Initialize session manager.

        Args:
            pool_connections: Number of connection pools to cache
            pool_maxsize: Maximum number of connections per pool
        """
        self.pool_connections = pool_connections
        self.pool_maxsize = pool_maxsize
        self._session: Optional[requests.Session] = None

    @property
    def session(self) -> requests.Session:
        """Get or create the pooled HTTP session.

        Returns:
            requests.Session object
        """
        if self._session is None:
            self._session = requests.Session()
            adapter = HTTPAdapter(
                max_retries=0,
                pool_connections=self.pool_connections,
                pool_maxsize=self.pool_maxsize,
            )
            self._session.mount("http://", adapter)
            self._session.mount("https://", adapter)

        return self._session

    def close(self) -> None:
        """Close the session and release resources."""
        if self._session:
            self._session.close()
            self._session = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


def post_json(session: requests.Session, url: str, body: dict[str, Any],
              timeout: Optional[float] = None) -> requests.Response:
    """POST *body* as JSON and return the raw response.

    Transport failures propagate as ``requests.RequestException``; status
    codes are left for the caller to interpret.
    """
    return session.post(
        url,
        json=body,
        headers={"Content-Type": "application/json"},
        timeout=timeout,
    )


def is_success(resp: requests.Response) -> bool:
    """True for 2xx status codes only."""
    return 200 <= resp.status_code < 300
