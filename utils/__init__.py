"""Shared utilities for the dashboard data service."""

# HTTP utilities
from utils.http import (
    SessionManager,
    request_timestamp,
    post_json,
    is_success,
)

# Local store
from utils.storage import LocalStore

# Configuration
from utils.config import (
    Config,
    WebhookConfig,
    StoreConfig,
    AppConfig,
)

__all__ = [
    # HTTP
    "SessionManager",
    "request_timestamp",
    "post_json",
    "is_success",
    # Store
    "LocalStore",
    # Config
    "Config",
    "WebhookConfig",
    "StoreConfig",
    "AppConfig",
]
