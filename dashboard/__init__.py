"""Dashboard data service core: sections, fetch client, cache and provider."""

from dashboard.auth import AuthClient, AuthFlagStore, AuthService
from dashboard.cache_store import CACHE_KEY, CACHE_TTL_SECONDS, CacheRecord, CacheStore
from dashboard.errors import (
    AuthConnectionError,
    AuthError,
    CacheReadError,
    DashboardError,
    FetchError,
    HttpError,
    InvalidCredentialsError,
    MissingCredentialsError,
    NetworkError,
    PayloadError,
)
from dashboard.fetch_client import SectionFetchClient
from dashboard.provider import DashboardProvider, FetchFlags
from dashboard.sections import DashboardState, Section, empty_state, parse_section
from dashboard.update import GeneralUpdate, UpdateStatus
from dashboard.views import build_view

__all__ = [
    "AuthClient",
    "AuthConnectionError",
    "AuthError",
    "AuthFlagStore",
    "AuthService",
    "CACHE_KEY",
    "CACHE_TTL_SECONDS",
    "CacheReadError",
    "CacheRecord",
    "CacheStore",
    "DashboardError",
    "DashboardProvider",
    "DashboardState",
    "FetchError",
    "FetchFlags",
    "GeneralUpdate",
    "HttpError",
    "InvalidCredentialsError",
    "MissingCredentialsError",
    "NetworkError",
    "PayloadError",
    "Section",
    "SectionFetchClient",
    "UpdateStatus",
    "build_view",
    "empty_state",
    "parse_section",
]
