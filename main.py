#!/usr/bin/env python3
"""
MGT Dashboard: launch the dashboard data API.

Usage:
    python main.py                          # http://localhost:8000
    python main.py --port 9000              # http://localhost:9000
    python main.py --host 0.0.0.0           # listen on all interfaces
    python main.py --store /path/to/store   # local store directory
    python main.py --reload                 # auto-reload on code changes
    python main.py --dump-config cfg.json   # write effective config and exit
"""

from __future__ import annotations

import argparse
import os
import webbrowser
from pathlib import Path

import uvicorn

from utils.config import AppConfig


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Launch the MGT dashboard data API.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "8000")),
        help="Port to listen on (default: 8000 or APP_PORT env var)",
    )
    parser.add_argument(
        "--store", type=Path, default=None,
        help="Local store directory (default: .dashboard_store or DASHBOARD_STORE_DIR env var)",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--open-docs", action="store_true",
        help="Open the OpenAPI docs in a browser once the server is up",
    )
    parser.add_argument(
        "--dump-config", type=Path, default=None, metavar="PATH",
        help="Write the effective configuration as JSON to PATH and exit",
    )
    args = parser.parse_args()

    # AppConfig and StoreConfig read these from the environment
    os.environ["APP_HOST"] = args.host
    os.environ["APP_PORT"] = str(args.port)
    if args.store is not None:
        os.environ["DASHBOARD_STORE_DIR"] = str(args.store)

    cfg = AppConfig.from_env()
    if args.dump_config is not None:
        cfg.save_json(args.dump_config)
        print(f"Wrote effective configuration to {args.dump_config}")
        return

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting MGT Dashboard API at {url}")
    print(f"Local store: {cfg.store.store_dir}")
    for section, endpoint in cfg.webhooks.section_urls.items():
        print(f"Webhook {section}: {endpoint}")
    print()

    if args.open_docs:
        # Open browser after a short delay to let the server start
        import threading
        threading.Timer(1.5, webbrowser.open, args=(f"{url}/docs",)).start()

    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
