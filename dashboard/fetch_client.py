"""Webhook client for the per-section dashboard endpoints.

Every call is a single JSON POST carrying the request timestamp and a source
tag. Failures are mapped onto the ``FetchError`` family and handed back to
the caller; nothing here retries.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import requests

from dashboard.errors import FetchError, HttpError, NetworkError, PayloadError
from dashboard.sections import Section, parse_section
from utils.http import SessionManager, is_success, post_json, request_timestamp

logger = logging.getLogger(__name__)

GENERAL_UPDATE_SOURCE = "general-update"


class SectionFetchClient:
    """Fetch raw section payloads from fixed webhook endpoints."""

    def __init__(self, endpoints: Mapping[Section | str, str],
                 session_manager: Optional[SessionManager] = None,
                 timeout: Optional[float] = 30.0,
                 update_url: Optional[str] = None):
        """Initialize the client.

        Args:
            endpoints: Webhook URL for every section
            session_manager: Shared pooled session (default: a private one)
            timeout: Transport timeout in seconds passed to requests
            update_url: General update webhook, if that feature is used

        Raises:
            ValueError: If a section has no endpoint.
        """
        self.endpoints = {parse_section(k): url for k, url in endpoints.items()}
        missing = [s.value for s in Section if s not in self.endpoints]
        if missing:
            raise ValueError(f"No webhook endpoint for: {', '.join(missing)}")
        self.update_url = update_url
        self.timeout = timeout
        self._owns_session = session_manager is None
        self._sessions = session_manager or SessionManager()

    @classmethod
    def from_config(cls, webhooks, session_manager: Optional[SessionManager] = None) -> "SectionFetchClient":
        """Build a client from a ``WebhookConfig``."""
        return cls(
            endpoints=webhooks.section_urls,
            session_manager=session_manager,
            timeout=webhooks.timeout_seconds,
            update_url=webhooks.update_url,
        )

    def _post(self, url: str, target: str, source: str) -> Any:
        body = {"timestamp": request_timestamp(), "source": source}
        try:
            resp = post_json(self._sessions.session, url, body, timeout=self.timeout)
        except requests.RequestException as e:
            raise NetworkError(target, str(e)) from e
        if not is_success(resp):
            raise HttpError(target, resp.status_code)
        try:
            return resp.json()
        except ValueError as e:
            raise PayloadError(target) from e

    def fetch_section(self, section: Section | str) -> Any:
        """Return the JSON payload for *section*.

        Raises:
            HttpError: Non-2xx response.
            NetworkError: No response obtained.
            PayloadError: 2xx response whose body is not JSON.
        """
        section = parse_section(section)
        logger.info("Fetching %s data", section.value)
        return self._post(self.endpoints[section], section.value, section.source_tag)

    def trigger_general_update(self) -> Any:
        """Ask the upstream automation to refresh every section.

        Raises:
            FetchError: If no update URL is configured.
            HttpError, NetworkError, PayloadError: As for ``fetch_section``.
        """
        if not self.update_url:
            raise FetchError(GENERAL_UPDATE_SOURCE, "No general update webhook configured")
        return self._post(self.update_url, GENERAL_UPDATE_SOURCE, GENERAL_UPDATE_SOURCE)

    def close(self) -> None:
        if self._owns_session:
            self._sessions.close()
