"""Application factory for FastAPI app.

Centralizes app construction (settings, limiters, middleware, handlers,
routers) so tests can build isolated apps with their own settings and clock.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from arky_backend import __version__
from arky_backend.api.routes import chat_router, contact_router, health_router
from arky_backend.core.config import Settings, settings as default_settings
from arky_backend.core.exception_handlers import setup_exception_handlers
from arky_backend.core.logging import configure_logging
from arky_backend.core.middleware import request_id_middleware
from arky_backend.core.openapi import apply_openapi_customizations
from arky_backend.core.rate_limit import build_policies, build_rate_limiters

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    *,
    clock: Callable[[], float] = time.time,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        app_settings: Settings to use; defaults to the environment-loaded settings.
        clock: Time source for the rate limiters (UNIX seconds).
        configure_logs: Whether to (re)configure the root logger.

    Returns:
        Configured FastAPI app with limiters, middleware, handlers and routers.
    """
    cfg = app_settings or default_settings

    # Logging first so subsequent init logs are formatted as desired
    if configure_logs:
        configure_logging(cfg.log, debug=cfg.app.debug)

    app = FastAPI(
        title="ARKY Backend API",
        description=(
            "Backend for the GK Edge website: a chat relay to the ARKY demo "
            "assistant and a contact form delivered by email. Both endpoints "
            "are rate limited per client IP."
        ),
        version=__version__,
        contact={"name": "GK Edge", "email": "info@gkedgemedia.com"},
    )

    # Per-app state: limiter counters live as long as this app instance
    app.state.settings = cfg
    app.state.rate_limit_policies = build_policies(cfg.app)
    app.state.rate_limiters = build_rate_limiters(app.state.rate_limit_policies, clock)

    # Middleware (CORS added last so it is outermost)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors.origins,
        allow_credentials=cfg.cors.allow_credentials,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", cfg.log.request_id_header],
        expose_headers=[
            cfg.log.request_id_header,
            "Retry-After",
            "RateLimit-Limit",
            "RateLimit-Remaining",
            "RateLimit-Reset",
        ],
    )

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(health_router)
    app.include_router(chat_router, prefix="/api")
    app.include_router(contact_router, prefix="/api")

    apply_openapi_customizations(app)

    logger.info(
        "app.configured",
        extra={
            "app_env": cfg.app_env,
            "llm_provider": cfg.llm.provider,
            "llm_configured": bool(cfg.llm.api_key),
            "smtp_configured": cfg.smtp.configured,
            "cors_origins": cfg.cors.origins,
            "rate_limits": {
                name: policy.describe()
                for name, policy in app.state.rate_limit_policies.items()
            },
        },
    )
    if not cfg.llm.api_key:
        logger.warning("app.llm_api_key_missing")
    if not cfg.smtp.configured:
        logger.warning("app.smtp_credentials_missing")

    return app
