"""
Shared fixtures for adversarial tests.

In-memory races always run; the PostgreSQL pool fixture skips when the
database is unreachable.
"""

from collections.abc import Generator

import pytest
from psycopg_pool import ConnectionPool

from tests.integration.conftest import clean_tables, open_test_pool

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    pool = open_test_pool()
    clean_tables(pool)
    yield pool
    clean_tables(pool)
    pool.close()
