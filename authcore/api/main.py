"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, middleware, routers and lifespan events.
"""

import logging
from collections.abc import AsyncGenerator
from concurrent.futures import ThreadPoolExecutor
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from psycopg_pool import ConnectionPool

from authcore.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from authcore.api.auth import router as auth_router
from authcore.api.errors import register_exception_handlers
from authcore.api.metrics import render_latest
from authcore.api.middleware import MetricsMiddleware, RequestLoggingMiddleware
from authcore.api.monitoring import router as monitoring_router
from authcore.config.settings import get_settings
from authcore.domain.hashing import CredentialHasher
from authcore.domain.login import Authenticator

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Account registration, availability checks and login",
    },
    {
        "name": "monitoring",
        "description": "Client error intake from the desktop app",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates database connection pool on startup
    - Runs migrations on startup
    - Creates the hasher and its dedicated worker pool
    - Closes both pools on shutdown
    """
    settings = get_settings()

    logger.info("Starting application...")
    logger.info("Connecting to database...")

    # Create connection pool with explicit sizing
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=settings.pool_min_size,
        max_size=settings.pool_max_size,
    )

    logger.info("Running database migrations...")
    run_migrations(pool)

    hasher = CredentialHasher.from_settings(settings)
    hashing_pool = ThreadPoolExecutor(
        max_workers=settings.hashing_workers,
        thread_name_prefix="argon2",
    )

    # Store shared resources in app state for dependency injection
    app.state.pool = pool
    app.state.hasher = hasher
    app.state.hashing_pool = hashing_pool
    app.state.authenticator = Authenticator(
        repository=PostgresAccountRepository(pool),
        hasher=hasher,
        hashing_pool=hashing_pool,
    )

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    hashing_pool.shutdown(wait=True)
    pool.close()
    logger.info("Database connection pool closed")


app = FastAPI(
    title="authcore",
    description="Account service behind the desktop client - registration, availability, login",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

register_exception_handlers(app)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestLoggingMiddleware)
app.include_router(auth_router, prefix="/api/auth")
app.include_router(monitoring_router, prefix="/monitoring")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = request.app.state.pool
    with pool.connection() as conn:
        conn.execute("SELECT 1")

    return {"status": "healthy"}


@app.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    """Prometheus scrape endpoint."""
    body, content_type = render_latest()
    return Response(content=body, media_type=content_type)
