# File: src/casestatus/main.py
"""FastAPI application factory for the case status site."""

import os
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.sessions import SessionMiddleware

from casestatus.core.logging import configure_logging, get_logger

configure_logging(os.getenv("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)

DEFAULT_SESSION_SECRET = "dev-secret-key-change-in-production"
SESSION_MAX_AGE = 14 * 24 * 60 * 60


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = datetime.now()
    logger.info("app.startup", timestamp=start_time.isoformat())

    from casestatus.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    from casestatus.core.db import dispose_engine

    await dispose_engine()
    logger.info("app.shutdown")


def _setup_middleware(app: FastAPI, environment: str, session_secret_key: str) -> None:
    """Configure all middleware in correct order."""
    # Last added = outermost: RequestID -> Session -> SentryContext -> CacheHeaders
    from casestatus.middleware.cache_headers import CacheHeadersMiddleware
    from casestatus.middleware.logging import RequestIDMiddleware
    from casestatus.middleware.sentry import SentryContextMiddleware

    app.add_middleware(CacheHeadersMiddleware)
    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=session_secret_key,
        max_age=SESSION_MAX_AGE,
        https_only=environment == "production",
        same_site="lax",
    )
    app.add_middleware(RequestIDMiddleware)


def _mount_static(app: FastAPI) -> None:
    """Mount static files directory."""
    static_dir = Path(os.getenv("STATIC_DIR", "static")).resolve()
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")
    else:
        logger.info("app.static_dir_missing", static_dir=str(static_dir))


def _register_routers(app: FastAPI) -> None:
    """Register all API and HTML routers."""
    from casestatus.api.auth import router as auth_router
    from casestatus.api.cases import router as cases_router
    from casestatus.api.health import router as health_router
    from casestatus.api.routes import admin_router, dashboard_router, public_router, reports_router

    app.include_router(health_router)

    # Public site
    app.include_router(public_router)

    # Administration
    app.include_router(auth_router)
    app.include_router(dashboard_router)
    app.include_router(admin_router)
    app.include_router(cases_router)
    app.include_router(reports_router)


def create_app() -> FastAPI:
    """Application factory."""
    app = FastAPI(
        title="Case Status API",
        description="Immigration case status lookup with an administrator dashboard",
        version="0.1.0",
        lifespan=lifespan,
    )

    from casestatus.core.exception_handlers import register_exception_handlers
    from casestatus.core.sentry import init_sentry

    init_sentry()
    register_exception_handlers(app)

    environment = os.getenv("ENVIRONMENT", "development")
    session_secret_key = os.getenv("SESSION_SECRET_KEY", DEFAULT_SESSION_SECRET)
    if environment == "production" and session_secret_key == DEFAULT_SESSION_SECRET:
        raise RuntimeError("SESSION_SECRET_KEY must be set in production")

    _setup_middleware(app, environment, session_secret_key)
    _mount_static(app)
    _register_routers(app)

    logger.info("app.configured", environment=environment)
    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "casestatus.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") == "development",
        log_config=None,
    )
