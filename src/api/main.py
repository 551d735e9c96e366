"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance,
configures exception handlers, and lifespan events.
"""

import asyncio
import contextlib
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request
from psycopg_pool import ConnectionPool

from src.adapters.repository import (
    InMemoryOtpStore,
    InMemoryUserDirectory,
    PostgresOtpStore,
    PostgresUserDirectory,
    run_migrations,
)
from src.adapters.smtp import ConsoleEmailSender, SmtpEmailSender
from src.api.auth import router as auth_router
from src.api.errors import install_exception_handlers
from src.api.reaper import purge_expired_codes_periodically
from src.config.settings import Settings, get_settings
from src.domain.otp import VerificationEngine
from src.domain.ports import EmailSender

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "auth",
        "description": "Registration with email OTP verification - register, verify, resend",
    },
]


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_email_sender(settings: Settings) -> EmailSender:
    if settings.email_backend == "smtp":
        return SmtpEmailSender(settings)
    return ConsoleEmailSender()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates storage adapters (PostgreSQL pool + migrations, or in-memory)
    - Creates the email sender
    - Starts the expired-code reaper when enabled
    - Stops the reaper and closes the connection pool on shutdown
    """
    settings = get_settings()
    configure_logging(settings)

    logger.info("Starting application...")

    pool = None
    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.otp_store = PostgresOtpStore(pool)
        app.state.user_directory = PostgresUserDirectory(pool, settings.bcrypt_cost)
    else:
        logger.warning("Using in-memory storage; data is lost on restart")
        app.state.otp_store = InMemoryOtpStore()
        app.state.user_directory = InMemoryUserDirectory(settings.bcrypt_cost)

    app.state.pool = pool
    app.state.email_sender = create_email_sender(settings)

    reaper = None
    if settings.otp_purge_interval_seconds > 0:
        engine = VerificationEngine(
            store=app.state.otp_store, ttl=timedelta(minutes=settings.otp_ttl_minutes)
        )
        reaper = asyncio.create_task(
            purge_expired_codes_periodically(
                engine,
                settings.otp_purge_interval_seconds,
                timedelta(minutes=settings.otp_retention_minutes),
            )
        )

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if reaper is not None:
        reaper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await reaper
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


app = FastAPI(
    title="otp-registration",
    description="User registration with one-time email verification codes",
    version="0.1.0",
    openapi_tags=tags_metadata,
    lifespan=lifespan,
)

install_exception_handlers(app)
app.include_router(auth_router, prefix="/api/auth")


@app.get("/health")
async def health_check(request: Request) -> dict[str, str]:
    """
    Health check endpoint with database validation.

    Returns 200 OK if application and database are healthy.
    Raises exception if database connection fails.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is not None:
        with pool.connection() as conn:
            conn.execute("SELECT 1")

    return {"status": "healthy"}
