"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 with raw SQL.

Security Design - Fixed Statements:
-----------------------------------
1. **No identifier interpolation**: Every statement is a module-level
   constant. The availability query is chosen from ``_TAKEN_SQL`` by
   Field member; the column name never comes from a caller string.

2. **Parameterized values**: All values are bound as ``%s`` parameters.

Consistency Design - Unique Constraints:
----------------------------------------
The ``users_email_key`` and ``users_username_key`` constraints are the
authority on uniqueness. insert_account() translates a UniqueViolation
into FieldTaken using the violated constraint's name, so a registration
that lost a race is still reported as a field error.
"""

import logging
from pathlib import Path

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from authcore.domain.exceptions import FieldTaken, StoreUnavailable
from authcore.domain.models import Account, Field

logger = logging.getLogger(__name__)

_TAKEN_SQL = {
    Field.EMAIL: "SELECT 1 FROM users WHERE email = %s LIMIT 1",
    Field.USERNAME: "SELECT 1 FROM users WHERE username = %s LIMIT 1",
}

_CONSTRAINT_FIELDS = {
    "users_email_key": Field.EMAIL,
    "users_username_key": Field.USERNAME,
}

_INSERT_SQL = """
    INSERT INTO users (email, username, password_hash)
    VALUES (%s, %s, %s)
    RETURNING id
"""

_FIND_SQL = """
    SELECT id, email, username, password_hash
    FROM users
    WHERE email = lower(%s) OR username = %s
    ORDER BY (email = lower(%s)) DESC
    LIMIT 1
"""

_UPDATE_HASH_SQL = "UPDATE users SET password_hash = %s, updated_at = NOW() WHERE id = %s"


class PostgresAccountRepository:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    def is_taken(self, field: Field, value: str) -> bool:
        """
        Check whether an account already uses ``value`` for ``field``.

        Issues exactly one SELECT, picked from fixed statements.

        Raises:
            StoreUnavailable: On connection or query failure
        """
        field = Field(field)
        sql = _TAKEN_SQL[field]

        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(sql, (value,))
                return cursor.fetchone() is not None
        except psycopg.Error as e:
            raise StoreUnavailable(f"{field.value} lookup failed: {type(e).__name__}") from e

    def insert_account(self, email: str, username: str, password_hash: str) -> Account:
        """
        Insert a new account row.

        Args:
            email: Normalized email address (lowercase, stripped)
            username: Normalized username
            password_hash: Argon2id hash from the domain layer

        Returns:
            Account including the database-generated id

        Raises:
            FieldTaken: If a unique constraint rejected the row
            StoreUnavailable: For any other database failure
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(_INSERT_SQL, (email, username, password_hash))
                row = cursor.fetchone()
                conn.commit()
        except errors.UniqueViolation as e:
            constraint = e.diag.constraint_name
            field = _CONSTRAINT_FIELDS.get(constraint or "")
            if field is None:
                logger.warning(f"Unique violation on unrecognized constraint: {constraint}")
            raise FieldTaken(field) from e
        except psycopg.Error as e:
            raise StoreUnavailable(f"account insert failed: {type(e).__name__}") from e

        return Account(
            id=str(row[0]),
            email=email,
            username=username,
            password_hash=password_hash,
        )

    def find_by_identifier(self, identifier: str) -> Account | None:
        """
        Look up an account by email (case-insensitive) or username.

        An email match wins over a username match, so an account can't be
        shadowed by another whose username equals its email.

        Raises:
            StoreUnavailable: On connection or query failure
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(_FIND_SQL, (identifier, identifier, identifier))
                row = cursor.fetchone()
        except psycopg.Error as e:
            raise StoreUnavailable(f"account lookup failed: {type(e).__name__}") from e

        if row is None:
            return None
        return Account(id=str(row[0]), email=row[1], username=row[2], password_hash=row[3])

    def update_password_hash(self, account_id: str, password_hash: str) -> None:
        """
        Replace the stored hash for one account.

        Raises:
            StoreUnavailable: On connection or query failure
        """
        try:
            with self._pool.connection() as conn, conn.cursor() as cursor:
                cursor.execute(_UPDATE_HASH_SQL, (password_hash, account_id))
                conn.commit()
        except psycopg.Error as e:
            raise StoreUnavailable(f"hash update failed: {type(e).__name__}") from e


def run_migrations(pool: ConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 ConnectionPool instance
    """
    # Structure: authcore/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            with pool.connection() as conn:
                conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
