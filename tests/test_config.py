"""
Tests for utils/config.py: environment-driven configuration

Covers defaults, environment overrides and JSON export for
WebhookConfig, StoreConfig and AppConfig.
"""
import json
from pathlib import Path

import pytest

from utils.config import AppConfig, DEFAULT_WEBHOOK_BASE, StoreConfig, WebhookConfig

_ENV_VARS = [
    "DASHBOARD_WEBHOOK_BASE", "DASHBOARD_COMMUNITY_URL", "DASHBOARD_PRODUCTS_URL",
    "DASHBOARD_FINANCE_URL", "DASHBOARD_LOGIN_URL", "DASHBOARD_UPDATE_URL",
    "DASHBOARD_TIMEOUT_SECONDS", "DASHBOARD_STORE_DIR", "DASHBOARD_CACHE_TTL_SECONDS",
    "APP_PORT", "APP_HOST", "APP_LOG_FORMAT", "APP_CORS_ORIGINS",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


# ── WebhookConfig tests ──────────────────────────────────────────────────────

class TestWebhookConfig:
    def test_defaults(self):
        cfg = WebhookConfig()
        assert cfg.base_url == DEFAULT_WEBHOOK_BASE
        assert cfg.section_urls == {
            "community": f"{DEFAULT_WEBHOOK_BASE}/dash-comunidade",
            "products": f"{DEFAULT_WEBHOOK_BASE}/dash-produtos",
            "finance": f"{DEFAULT_WEBHOOK_BASE}/dash-financeiro",
        }
        assert cfg.login_url == f"{DEFAULT_WEBHOOK_BASE}/login-dash"
        assert cfg.update_url == f"{DEFAULT_WEBHOOK_BASE}/ativa-tudo"
        assert cfg.timeout_seconds == 30

    def test_base_override_strips_slash(self, monkeypatch):
        monkeypatch.setenv("DASHBOARD_WEBHOOK_BASE", "http://localhost:5678/webhook/")
        cfg = WebhookConfig()
        assert cfg.section_urls["finance"] == "http://localhost:5678/webhook/dash-financeiro"

    def test_per_section_override(self, monkeypatch):
        monkeypatch.setenv("DASHBOARD_PRODUCTS_URL", "http://mock/products")
        cfg = WebhookConfig()
        assert cfg.section_urls["products"] == "http://mock/products"
        assert cfg.section_urls["community"].endswith("/dash-comunidade")

    def test_timeout_override(self, monkeypatch):
        monkeypatch.setenv("DASHBOARD_TIMEOUT_SECONDS", "2.5")
        assert WebhookConfig().timeout_seconds == 2.5


# ── StoreConfig tests ────────────────────────────────────────────────────────

class TestStoreConfig:
    def test_defaults(self):
        cfg = StoreConfig()
        assert cfg.store_dir == Path(".dashboard_store")
        assert cfg.cache_key == "dashboard_cache"
        assert cfg.auth_key == "isAuthenticated"
        assert cfg.cache_ttl_seconds == 300

    def test_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("DASHBOARD_STORE_DIR", str(tmp_path))
        monkeypatch.setenv("DASHBOARD_CACHE_TTL_SECONDS", "60")
        cfg = StoreConfig()
        assert cfg.store_dir == tmp_path
        assert cfg.cache_ttl_seconds == 60


# ── AppConfig tests ──────────────────────────────────────────────────────────

class TestAppConfig:
    def test_defaults(self):
        cfg = AppConfig.from_env()
        assert cfg.api_port == 8000
        assert cfg.api_host == "127.0.0.1"
        assert cfg.log_format == "text"
        assert cfg.cors_origins == ["*"]

    def test_cors_list(self, monkeypatch):
        monkeypatch.setenv("APP_CORS_ORIGINS", "http://a.example, http://b.example,")
        assert AppConfig().cors_origins == ["http://a.example", "http://b.example"]

    def test_to_dict_nests_sections(self):
        d = AppConfig().to_dict()
        assert d["webhooks"]["timeout_seconds"] == 30
        assert d["store"]["cache_key"] == "dashboard_cache"

    def test_save_json_nests_sections(self, tmp_path):
        path = tmp_path / "out" / "config.json"
        AppConfig().save_json(path)

        saved = json.loads(path.read_text())
        assert saved["api_port"] == 8000
        assert saved["store"]["store_dir"] == ".dashboard_store"
        assert saved["webhooks"]["section_urls"]["products"].endswith("/dash-produtos")
