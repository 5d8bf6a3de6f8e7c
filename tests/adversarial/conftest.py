"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition and timing tests.
Requires PostgreSQL to be running; tests are skipped otherwise.
"""

from collections.abc import Generator

import psycopg
import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from authcore.adapters.repository.postgres import PostgresAccountRepository, run_migrations
from authcore.config.settings import get_settings
from authcore.domain.hashing import CredentialHasher


@pytest.fixture(scope="module")
def pool() -> Generator[ConnectionPool, None, None]:
    """Create connection pool for adversarial tests."""
    settings = get_settings()
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=20,
        open=True,
    )
    try:
        pool.wait(timeout=5.0)
    except (PoolTimeout, psycopg.OperationalError) as e:
        pool.close()
        pytest.skip(f"PostgreSQL not reachable: {e}")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountRepository:
    """Create repository instance for each test."""
    return PostgresAccountRepository(pool)


@pytest.fixture(autouse=True)
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Clean users table before each test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM users")
        conn.commit()
    yield


@pytest.fixture(scope="module")
def hasher() -> CredentialHasher:
    """Argon2id hasher cheap enough for repeated runs, costly enough to measure."""
    return CredentialHasher(time_cost=2, memory_cost=19456, parallelism=1)
