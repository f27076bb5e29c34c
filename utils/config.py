"""Configuration management for the dashboard data service.

Provides:
- Config: base class with dict and JSON export
- WebhookConfig: upstream webhook endpoints and transport settings
- StoreConfig: local store location, cache key and TTL
- AppConfig: application-level settings loaded from environment variables
"""

import json
import os as _os
from pathlib import Path
from typing import Any, Dict

DEFAULT_WEBHOOK_BASE = "https://autowebhook.mgtautomacoes.cloud/webhook"

# Upstream webhook path per section value
SECTION_WEBHOOK_PATHS = {
    "community": "dash-comunidade",
    "products": "dash-produtos",
    "finance": "dash-financeiro",
}
LOGIN_WEBHOOK_PATH = "login-dash"
UPDATE_WEBHOOK_PATH = "ativa-tudo"


class Config:
    """Base class for settings groups; public attributes are the settings."""

    def to_dict(self) -> Dict[str, Any]:
        """Public attributes as a plain dictionary."""
        return {k: v for k, v in self.__dict__.items() if not k.startswith("_")}

    def save_json(self, path: Path) -> None:
        """Write the settings to *path* as indented JSON (paths as strings)."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)


class WebhookConfig(Config):
    """Upstream webhook endpoints and transport settings.

    Environment variables:
        DASHBOARD_WEBHOOK_BASE: Base URL shared by every webhook
        DASHBOARD_COMMUNITY_URL, DASHBOARD_PRODUCTS_URL, DASHBOARD_FINANCE_URL:
            Per-section overrides
        DASHBOARD_LOGIN_URL: Login webhook override
        DASHBOARD_UPDATE_URL: General update webhook override
        DASHBOARD_TIMEOUT_SECONDS: Transport timeout (default: 30)
    """

    def __init__(self) -> None:
        base = _os.getenv("DASHBOARD_WEBHOOK_BASE", DEFAULT_WEBHOOK_BASE).rstrip("/")
        self.base_url = base
        self.section_urls: dict[str, str] = {
            name: _os.getenv(f"DASHBOARD_{name.upper()}_URL", f"{base}/{path}")
            for name, path in SECTION_WEBHOOK_PATHS.items()
        }
        self.login_url = _os.getenv("DASHBOARD_LOGIN_URL", f"{base}/{LOGIN_WEBHOOK_PATH}")
        self.update_url = _os.getenv("DASHBOARD_UPDATE_URL", f"{base}/{UPDATE_WEBHOOK_PATH}")
        self.timeout_seconds = float(_os.getenv("DASHBOARD_TIMEOUT_SECONDS", "30"))
        self.pool_connections = 4
        self.pool_maxsize = 8


class StoreConfig(Config):
    """Local store location and cache settings.

    Environment variables:
        DASHBOARD_STORE_DIR: Directory backing the local store
            (default: .dashboard_store)
        DASHBOARD_CACHE_TTL_SECONDS: Cache record lifetime (default: 300)
    """

    def __init__(self) -> None:
        self.store_dir = Path(_os.getenv("DASHBOARD_STORE_DIR", ".dashboard_store"))
        self.cache_key = "dashboard_cache"
        self.auth_key = "isAuthenticated"
        self.cache_ttl_seconds = float(_os.getenv("DASHBOARD_CACHE_TTL_SECONDS", "300"))


class AppConfig(Config):
    """Application-level configuration loaded from environment variables.

    All env vars have sensible defaults so the application works out of the
    box without any configuration.

    Environment variables:
        APP_PORT: API server port (default: 8000)
        APP_HOST: API server bind address (default: 127.0.0.1)
        APP_LOG_FORMAT: Logging format, "text" or "json" (default: text)
        APP_CORS_ORIGINS: Comma-separated allowed origins (default: *)

    Webhook and store settings are read by WebhookConfig and StoreConfig.
    """

    def __init__(self) -> None:
        self.api_port = int(_os.getenv("APP_PORT", "8000"))
        self.api_host = _os.getenv("APP_HOST", "127.0.0.1")
        self.log_format = _os.getenv("APP_LOG_FORMAT", "text")
        raw_origins = _os.getenv("APP_CORS_ORIGINS", "*")
        self.cors_origins: list[str] = (
            ["*"] if raw_origins == "*"
            else [o.strip() for o in raw_origins.split(",") if o.strip()]
        )
        self.webhooks = WebhookConfig()
        self.store = StoreConfig()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["webhooks"] = self.webhooks.to_dict()
        data["store"] = self.store.to_dict()
        return data

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create an AppConfig instance populated from environment variables."""
        return cls()
