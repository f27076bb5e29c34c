"""
Service wiring for the API.

Builds the dashboard services once per application (inside the lifespan) and
exposes FastAPI dependencies that hand them to route handlers. Nothing here
is module-global: every app owns its own provider, store and sessions.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, HTTPException, Request

from dashboard.auth import AuthClient, AuthFlagStore, AuthService
from dashboard.cache_store import CacheStore
from dashboard.fetch_client import SectionFetchClient
from dashboard.provider import DashboardProvider
from dashboard.update import GeneralUpdate
from utils.config import AppConfig
from utils.http import SessionManager
from utils.storage import LocalStore


@dataclass
class DashboardServices:
    provider: DashboardProvider
    auth: AuthService
    update: GeneralUpdate
    sessions: SessionManager

    async def aclose(self) -> None:
        await self.update.wait()
        await self.provider.aclose()
        self.auth.client.close()
        self.sessions.close()


def build_services(config: AppConfig,
                   client: Optional[SectionFetchClient] = None,
                   auth_client: Optional[AuthClient] = None) -> DashboardServices:
    """Construct the service graph from *config*.

    Args:
        config: Application configuration.
        client: Override the section fetch client (tests).
        auth_client: Override the login client (tests).
    """
    webhooks = config.webhooks
    sessions = SessionManager(
        pool_connections=webhooks.pool_connections,
        pool_maxsize=webhooks.pool_maxsize,
    )
    store = LocalStore(config.store.store_dir)

    if client is None:
        client = SectionFetchClient.from_config(webhooks, session_manager=sessions)
    if auth_client is None:
        auth_client = AuthClient(
            webhooks.login_url, session_manager=sessions, timeout=webhooks.timeout_seconds
        )

    cache = CacheStore(
        store, key=config.store.cache_key, ttl_seconds=config.store.cache_ttl_seconds
    )
    return DashboardServices(
        provider=DashboardProvider(client, cache),
        auth=AuthService(auth_client, AuthFlagStore(store, key=config.store.auth_key)),
        update=GeneralUpdate(client),
        sessions=sessions,
    )


# ── Dependencies ──────────────────────────────────────────────────────────────

def get_services(request: Request) -> DashboardServices:
    return request.app.state.services


def get_provider(services: DashboardServices = Depends(get_services)) -> DashboardProvider:
    return services.provider


def get_auth(services: DashboardServices = Depends(get_services)) -> AuthService:
    return services.auth


def get_update(services: DashboardServices = Depends(get_services)) -> GeneralUpdate:
    return services.update


def require_authenticated(auth: AuthService = Depends(get_auth)) -> None:
    """Reject the request with 401 unless a user has logged in."""
    if not auth.is_authenticated():
        raise HTTPException(status_code=401, detail="Not authenticated")
