"""
Shared fixtures for PostgreSQL-backed tests.

Tests using these fixtures are skipped when the configured database
cannot be reached within a few seconds.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.postgres import run_migrations
from src.config.settings import get_settings

pytestmark = pytest.mark.integration


def open_test_pool() -> ConnectionPool:
    """Open a pool against the configured database and apply migrations, or skip."""
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=True)
    try:
        pool.wait(timeout=3.0)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL not available")
    run_migrations(pool)
    return pool


def clean_tables(pool: ConnectionPool) -> None:
    with pool.connection() as conn:
        conn.execute("DELETE FROM email_verification_otps")
        conn.execute("DELETE FROM users")
        conn.commit()


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    pool = open_test_pool()
    yield pool
    pool.close()


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean tables before each test."""
    clean_tables(pool)
    yield
