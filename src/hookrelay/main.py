"""FastAPI application factory and lifespan management."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from hookrelay import __version__
from hookrelay.config import Settings, settings
from hookrelay.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared outbound HTTP client for the lifetime of the app."""
    app_settings: Settings = app.state.settings
    owns_client = getattr(app.state, "http_client", None) is None
    if owns_client:
        app.state.http_client = httpx.AsyncClient(timeout=app_settings.relay_timeout_seconds)

    logger.info(
        "Webhook relay started (target=%s, filtered_events=%d)",
        app_settings.target_url,
        len(app.state.match_config.filters),
    )
    yield

    if owns_client:
        await app.state.http_client.aclose()
    logger.info("Webhook relay shutdown complete")


def create_app(app_settings: Settings | None = None, http_client: httpx.AsyncClient | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    The filtering rules are built once here and stay fixed for the app's lifetime.
    """
    app_settings = app_settings or settings
    app = FastAPI(
        title="Webhook Relay",
        version=__version__,
        description="Verifies, filters and relays GitHub webhook deliveries as MS Teams cards.",
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.match_config = app_settings.build_match_config()
    app.state.http_client = http_client

    from hookrelay.api.middleware.trace_id import TraceIdMiddleware
    app.add_middleware(TraceIdMiddleware)

    # Register error handlers
    from hookrelay.errors.handlers import register_exception_handlers
    register_exception_handlers(app)

    from hookrelay.api.router import api_router
    app.include_router(api_router)

    return app


def build_default_app() -> FastAPI:
    """Load settings from the environment, configure logging and build the served app."""
    app_settings = Settings()
    configure_logging(log_level=app_settings.log_level, json_output=app_settings.json_logs)
    return create_app(app_settings)
