from __future__ import annotations

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sigcheck.api.config import ApiConfig, cors_origins, load_api_config
from sigcheck.api.errors import install_error_handlers
from sigcheck.api.routes_public import public_router
from sigcheck.api.security import RequestSizeLimitMiddleware, SecurityHeadersMiddleware
from sigcheck.api.structured_logging import RequestLogMiddleware


def create_app(cfg: Optional[ApiConfig] = None) -> FastAPI:
    """Create the FastAPI application.

    cfg:
      - None (default): read from SIGCHECK_* environment variables
      - ApiConfig: used as-is (tests, embedding)

    The config is attached to app.state.cfg once and never mutated; every
    request is served from it without any other shared state.
    """
    cfg = cfg or load_api_config()

    # Disable docs in production.
    if cfg.is_prod:
        app = FastAPI(
            title="sigcheck",
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
        )
    else:
        app = FastAPI(title="sigcheck")

    app.state.cfg = cfg

    install_error_handlers(app)

    # --- Middleware (last added runs first) ---
    app.add_middleware(RequestSizeLimitMiddleware, max_bytes=cfg.max_request_bytes)
    app.add_middleware(SecurityHeadersMiddleware, hsts=cfg.is_prod)

    # CORS (explicit allowlist).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(cfg),
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "Accept"],
    )

    # Outermost so rejected and preflight requests are logged too.
    app.add_middleware(
        RequestLogMiddleware,
        enabled=cfg.log_requests,
        log_headers=cfg.log_request_headers,
    )

    # --- Routers ---
    app.include_router(public_router)

    return app
