"""
FastAPI application factory for the dashboard data service.

Usage:
    python -m api.app                    # Dev server on port 8000
    DASHBOARD_STORE_DIR=/data/store python -m api.app

OpenAPI docs available at http://localhost:8000/docs after starting.

The lifespan owns the service graph: the provider, local store and HTTP
sessions are built on startup, the provider adopts any fresh cache record,
and on shutdown outstanding webhook calls are awaited before the sessions
are closed.

APP_LOG_FORMAT=json switches request logging to newline-delimited JSON.
"""

import json
import logging
import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.routes import auth, sections, update
from api.services import build_services
from dashboard.auth import AuthClient
from dashboard.fetch_client import SectionFetchClient
from utils.config import AppConfig

_logger = logging.getLogger("dashboard_api")


class _JsonFormatter(logging.Formatter):
    """Emit log records as newline-delimited JSON."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Merge extra fields added via logger.info("...", extra={...})
        for key in ("method", "path", "status", "duration_ms", "request_id"):
            if hasattr(record, key):
                data[key] = getattr(record, key)
        if record.exc_info:
            data["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(data)


def configure_logging(log_format: str = "text") -> None:
    """Install a single stream handler on the root logger."""
    handler = logging.StreamHandler()
    if log_format == "json":
        handler.setFormatter(_JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")
        )
    logging.basicConfig(handlers=[handler], level=logging.INFO, force=True)


def create_app(config: Optional[AppConfig] = None,
               client: Optional[SectionFetchClient] = None,
               auth_client: Optional[AuthClient] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config: Application configuration (default: from environment).
        client: Override the section fetch client (useful for testing).
        auth_client: Override the login client (useful for testing).

    Returns:
        Configured FastAPI application instance.
    """
    cfg = config or AppConfig.from_env()
    configure_logging(cfg.log_format)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        services = build_services(cfg, client=client, auth_client=auth_client)
        services.provider.start()
        app.state.services = services
        _logger.info("Dashboard services started (store=%s)", cfg.store.store_dir)
        try:
            yield
        finally:
            await services.aclose()
            _logger.info("Dashboard services stopped")

    app = FastAPI(
        title="MGT Dashboard API",
        summary="Community, product-sales and finance metrics for the MGT dashboard.",
        description=(
            "Serves dashboard sections fetched from upstream webhooks.\n\n"
            "- Each section is fetched at most once at a time; repeated requests "
            "for a loaded section are served from memory unless `force_refresh` "
            "is set.\n"
            "- Loaded data is persisted locally for 5 minutes and reused on "
            "restart.\n"
            "- Failed fetches are reported in `error` and are never retried "
            "automatically."
        ),
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=[
            {"name": "auth", "description": "Login against the upstream webhook."},
            {"name": "sections", "description": "Section data, fetch gate and normalized views."},
            {"name": "update", "description": "Trigger an upstream refresh of every section."},
            {"name": "meta", "description": "Health check."},
        ],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log each request and tag the response with a short request id."""
        request_id = str(uuid.uuid4())[:8]
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000
        response.headers["X-Request-ID"] = request_id

        if cfg.log_format == "json":
            _logger.info(
                "request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status": response.status_code,
                    "duration_ms": round(duration_ms, 1),
                    "request_id": request_id,
                },
            )
        else:
            _logger.info(
                "method=%s path=%s status=%d duration_ms=%.1f rid=%s",
                request.method, request.url.path, response.status_code,
                duration_ms, request_id,
            )
        return response

    @app.get("/health", tags=["meta"], summary="Health check")
    async def health(request: Request) -> dict:
        services = request.app.state.services
        return {
            "status": "ok",
            "authenticated": services.auth.is_authenticated(),
            "loading": services.provider.is_loading(),
        }

    prefix = "/api/v1"
    app.include_router(auth.router,     prefix=prefix)
    app.include_router(sections.router, prefix=prefix)
    app.include_router(update.router,   prefix=prefix)

    return app


if __name__ == "__main__":
    import uvicorn

    _cfg = AppConfig.from_env()
    uvicorn.run(
        "api.app:create_app",
        factory=True,
        host=_cfg.api_host,
        port=_cfg.api_port,
        reload=True,
        log_level="info",
    )
