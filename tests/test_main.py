"""
Tests for main.py: CLI launcher

uvicorn.run is replaced so no server is started.
"""
import json
import sys

import pytest

import main


@pytest.fixture()
def cli(monkeypatch, tmp_path):
    """Run main() with the given arguments; returns the uvicorn.run kwargs."""
    for name in ("APP_HOST", "APP_PORT", "DASHBOARD_STORE_DIR"):
        monkeypatch.delenv(name, raising=False)
    calls = []
    monkeypatch.setattr(main.uvicorn, "run", lambda *a, **kw: calls.append((a, kw)))

    def run(*args):
        monkeypatch.setattr(sys, "argv", ["main.py", *args])
        main.main()
        return calls

    return run


class TestMain:
    def test_dump_config_writes_effective_settings(self, cli, tmp_path):
        out = tmp_path / "cfg.json"
        calls = cli("--port", "9100", "--store", str(tmp_path / "store"), "--dump-config", str(out))
        assert calls == []
        saved = json.loads(out.read_text())
        assert saved["api_port"] == 9100
        assert saved["store"]["store_dir"] == str(tmp_path / "store")

    def test_runs_app_factory(self, cli):
        calls = cli("--port", "9200")
        assert len(calls) == 1
        args, kwargs = calls[0]
        assert args == ("api.app:create_app",)
        assert kwargs["factory"] is True
        assert kwargs["port"] == 9200
