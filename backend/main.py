"""
Application factory for FastAPI.

This module provides a factory function for creating FastAPI application instances.
The factory pattern allows for:
- Easy testing with custom settings
- Multiple app instances with different configurations
- Clear separation of app creation from route definitions

Usage:
    from backend.main import create_app
    from backend.settings import Settings

    # Default app (uses get_settings())
    app = create_app()

    # Test app with custom settings
    test_settings = Settings(environment="test", _env_file=None)
    test_app = create_app(settings=test_settings)
"""

import logging
import signal
from typing import Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.settings import Settings, get_settings
from backend.observability import configure_observability, shutdown_observability

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Application Factory
# ---------------------------------------------------------------------------


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    Args:
        settings: Optional Settings instance. If not provided, uses get_settings()
                  which loads from environment variables.

    Returns:
        Configured FastAPI application instance.
    """
    if settings is None:
        settings = get_settings()

    configure_observability(settings)

    _init_sentry(settings)

    app = FastAPI(
        title="Agent API",
        description="Function dispatch for the fitness chat agent",
        version="1.0.0",
    )

    # Store settings on app state for middleware access
    app.state.settings = settings

    _configure_cors(app, settings)

    _include_routers(app)

    _register_shutdown(app)

    return app


def _init_sentry(settings: Settings) -> None:
    """Initialize Sentry SDK if DSN is configured."""
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.environment,
            release=settings.render_git_commit,
            traces_sample_rate=0.1,
        )
        logger.info(
            "Sentry initialized for agent-api (release=%s)",
            settings.render_git_commit or "unknown",
        )


def _configure_cors(app: FastAPI, settings: Settings) -> None:
    """Configure CORS middleware for the application."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


def _include_routers(app: FastAPI) -> None:
    """Include all API routers in the application."""
    from api.routers import agent_router, health_router

    # Health router (no prefix - /health and /metrics at root)
    app.include_router(health_router)

    # Agent router (/internal/agent/*)
    app.include_router(agent_router)


def _register_shutdown(app: FastAPI) -> None:
    """Register graceful shutdown handler."""

    @app.on_event("shutdown")
    async def shutdown_event():
        shutdown_observability()
        logger.info("agent-api shutdown complete")

    # Handle SIGTERM for Render graceful shutdown
    def _handle_sigterm(signum, frame):
        logger.info("Received SIGTERM, initiating graceful shutdown")
        raise SystemExit(0)

    signal.signal(signal.SIGTERM, _handle_sigterm)


# Default app instance for uvicorn
# This allows: uvicorn backend.main:app --reload
app = create_app()
