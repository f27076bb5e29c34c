"""Login collaborator: one opaque webhook call plus a persisted flag."""

from __future__ import annotations

import logging
from typing import Optional

import requests

from dashboard.errors import AuthConnectionError, InvalidCredentialsError, MissingCredentialsError
from utils.http import SessionManager, is_success, post_json, request_timestamp
from utils.storage import LocalStore

logger = logging.getLogger(__name__)

AUTH_FLAG_KEY = "isAuthenticated"
AUTHORIZED_MESSAGE = "Autorizado"


class AuthClient:
    """Check credentials against the login webhook."""

    def __init__(self, login_url: str, session_manager: Optional[SessionManager] = None,
                 timeout: Optional[float] = 30.0):
        self.login_url = login_url
        self.timeout = timeout
        self._owns_session = session_manager is None
        self._sessions = session_manager or SessionManager()

    def login(self, username: str, password: str) -> None:
        """Validate *username* / *password*; returns only on success.

        Raises:
            MissingCredentialsError: Either field is empty (no request sent).
            InvalidCredentialsError: Non-2xx status or an unauthorized reply.
            AuthConnectionError: No response obtained.
        """
        if not username or not password:
            raise MissingCredentialsError()

        body = {"username": username, "password": password, "timestamp": request_timestamp()}
        try:
            resp = post_json(self._sessions.session, self.login_url, body, timeout=self.timeout)
        except requests.RequestException as e:
            logger.warning("Login request failed: %s", e)
            raise AuthConnectionError() from e

        if not is_success(resp):
            raise InvalidCredentialsError()
        try:
            data = resp.json()
        except ValueError:
            raise InvalidCredentialsError() from None
        if not isinstance(data, dict) or data.get("message") != AUTHORIZED_MESSAGE:
            raise InvalidCredentialsError()

    def close(self) -> None:
        if self._owns_session:
            self._sessions.close()


class AuthFlagStore:
    """The persisted "is authenticated" boolean."""

    def __init__(self, store: LocalStore, key: str = AUTH_FLAG_KEY):
        self._store = store
        self._key = key

    def is_authenticated(self) -> bool:
        return self._store.get_item(self._key) == "true"

    def mark_authenticated(self) -> None:
        self._store.set_item(self._key, "true")

    def clear(self) -> None:
        self._store.remove_item(self._key)


class AuthService:
    """Login / logout on top of the webhook client and the persisted flag."""

    def __init__(self, client: AuthClient, flags: AuthFlagStore):
        self.client = client
        self.flags = flags

    def login(self, username: str, password: str) -> None:
        self.client.login(username, password)
        self.flags.mark_authenticated()
        logger.info("User %s authenticated", username)

    def logout(self) -> None:
        self.flags.clear()

    def is_authenticated(self) -> bool:
        return self.flags.is_authenticated()
