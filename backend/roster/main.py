"""Roster API: FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map RosterError → {"error": message} responses
    - One RequestThrottle per app, built in create_app and stored on app.state
    - Database initialized, pinged and (optionally) migrated on startup via lifespan
    - The throttle reaper starts with the app and is cancelled on shutdown
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roster.api.error_handlers import register_error_handlers
from roster.api.request_logging import register_request_logging
from roster.api.routes import health, users
from roster.config import Settings, get_settings
from roster.core.request_throttle import RequestThrottle
from roster.infrastructure.database import close_db, init_db
from roster.infrastructure.observability import setup_logging
from roster.services.throttle_reaper import ThrottleReaper

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings: Settings = app.state.settings
    setup_logging(settings.effective_log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        echo=settings.debug,
    )
    if not await manager.health_check():
        await close_db()
        raise RuntimeError("Database is unreachable; refusing to start")
    if settings.auto_create_tables:
        await manager.create_tables()
    logger.info("Database initialized")

    app.state.reaper.start()
    logger.info(
        f"Roster API started (rate limit {settings.rate_limit_per_minute}/min)",
    )
    yield
    logger.info("Roster API shutting down")
    await app.state.reaper.stop()
    await close_db()
    logger.info("Database connection closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="Roster API", version="1.0.0", lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.throttle = RequestThrottle(
        settings.rate_limit_per_minute,
        window_seconds=settings.throttle_window_seconds,
        idle_seconds=settings.throttle_idle_seconds,
    )
    app.state.reaper = ThrottleReaper(
        app.state.throttle, settings.throttle_sweep_interval_seconds,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Origin", "Content-Type", "Accept", "Authorization"],
    )
    register_request_logging(app)

    app.include_router(health.router)
    app.include_router(users.router)

    register_error_handlers(app)
    return app


app = create_app()


def run() -> None:
    """Serve the app with uvicorn on the configured host/port."""
    settings = get_settings()
    uvicorn.run(
        "roster.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.effective_log_level.lower(),
    )
