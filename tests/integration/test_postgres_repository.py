"""
Integration tests for PostgresAccountRepository.

Tests repository operations against a real PostgreSQL database.
Requires PostgreSQL to be running (via docker-compose).
"""

from unittest.mock import MagicMock

import psycopg
import pytest
from psycopg_pool import ConnectionPool

from authcore.adapters.repository.postgres import PostgresAccountRepository
from authcore.domain.exceptions import FieldTaken, StoreUnavailable
from authcore.domain.models import Field

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_database")]

HASH = "$argon2id$v=19$m=8,t=1,p=1$c2FsdHNhbHQ$ZGlnZXN0ZGlnZXN0"


class TestIsTaken:
    """Tests for is_taken method."""

    @pytest.mark.parametrize("field", [Field.EMAIL, Field.USERNAME])
    def test_empty_table_nothing_taken(
        self, repository: PostgresAccountRepository, field: Field
    ) -> None:
        assert repository.is_taken(field, "a@b.com") is False

    def test_existing_values_taken(self, repository: PostgresAccountRepository) -> None:
        repository.insert_account("a@b.com", "@alice", HASH)

        assert repository.is_taken(Field.EMAIL, "a@b.com") is True
        assert repository.is_taken(Field.USERNAME, "@alice") is True
        assert repository.is_taken(Field.USERNAME, "@bob") is False

    def test_columns_are_not_crossed(self, repository: PostgresAccountRepository) -> None:
        """A username is not found by an email query and vice versa."""
        repository.insert_account("a@b.com", "@alice", HASH)

        assert repository.is_taken(Field.EMAIL, "@alice") is False
        assert repository.is_taken(Field.USERNAME, "a@b.com") is False

    def test_injection_attempt_is_a_plain_value(self, repository: PostgresAccountRepository) -> None:
        repository.insert_account("a@b.com", "@alice", HASH)

        assert repository.is_taken(Field.EMAIL, "x' OR '1'='1") is False

    def test_unknown_field_rejected(self, repository: PostgresAccountRepository) -> None:
        with pytest.raises(ValueError):
            repository.is_taken("password_hash", "x")  # type: ignore[arg-type]


class TestInsertAccount:
    """Tests for insert_account method."""

    def test_insert_returns_account_with_generated_id(
        self, repository: PostgresAccountRepository, pool: ConnectionPool
    ) -> None:
        account = repository.insert_account("a@b.com", "@alice", HASH)

        assert len(account.id) == 36
        with pool.connection() as conn:
            row = conn.execute(
                "SELECT email, username, password_hash FROM users WHERE id = %s",
                (account.id,),
            ).fetchone()
        assert row == ("a@b.com", "@alice", HASH)

    def test_duplicate_email_raises_field_taken(self, repository: PostgresAccountRepository) -> None:
        repository.insert_account("a@b.com", "@alice", HASH)

        with pytest.raises(FieldTaken) as exc_info:
            repository.insert_account("a@b.com", "@bob", HASH)

        assert exc_info.value.field is Field.EMAIL

    def test_duplicate_username_raises_field_taken(
        self, repository: PostgresAccountRepository
    ) -> None:
        repository.insert_account("a@b.com", "@alice", HASH)

        with pytest.raises(FieldTaken) as exc_info:
            repository.insert_account("c@d.com", "@alice", HASH)

        assert exc_info.value.field is Field.USERNAME

    def test_failed_insert_leaves_single_row(
        self, repository: PostgresAccountRepository, pool: ConnectionPool
    ) -> None:
        repository.insert_account("a@b.com", "@alice", HASH)
        with pytest.raises(FieldTaken):
            repository.insert_account("a@b.com", "@alice", HASH)

        with pool.connection() as conn:
            count = conn.execute("SELECT COUNT(*) FROM users").fetchone()[0]
        assert count == 1


class TestFindByIdentifier:
    """Tests for find_by_identifier method."""

    def test_find_by_email(self, repository: PostgresAccountRepository) -> None:
        created = repository.insert_account("a@b.com", "@alice", HASH)

        found = repository.find_by_identifier("A@B.com")

        assert found == created

    def test_find_by_username(self, repository: PostgresAccountRepository) -> None:
        created = repository.insert_account("a@b.com", "@alice", HASH)

        assert repository.find_by_identifier("@alice") == created

    def test_missing_returns_none(self, repository: PostgresAccountRepository) -> None:
        assert repository.find_by_identifier("@nobody") is None

    def test_email_match_wins_over_username_match(
        self, repository: PostgresAccountRepository
    ) -> None:
        """An account whose username looks like another account's email never shadows it."""
        shadow = repository.insert_account("shadow@example.com", "victim@example.com", HASH)
        victim = repository.insert_account("victim@example.com", "@victim", HASH)

        assert repository.find_by_identifier("victim@example.com") == victim
        assert repository.find_by_identifier("shadow@example.com") == shadow


class TestUpdatePasswordHash:
    def test_replaces_only_that_account(self, repository: PostgresAccountRepository) -> None:
        alice = repository.insert_account("a@b.com", "@alice", HASH)
        bob = repository.insert_account("b@b.com", "@bob", HASH)

        repository.update_password_hash(alice.id, "$argon2id$new")

        assert repository.find_by_identifier("@alice").password_hash == "$argon2id$new"
        assert repository.find_by_identifier("@bob") == bob


class TestStoreFailures:
    """psycopg errors surface as StoreUnavailable."""

    def _broken_repository(self) -> PostgresAccountRepository:
        pool = MagicMock()
        pool.connection.side_effect = psycopg.OperationalError("connection refused")
        return PostgresAccountRepository(pool)

    def test_is_taken(self) -> None:
        with pytest.raises(StoreUnavailable):
            self._broken_repository().is_taken(Field.EMAIL, "a@b.com")

    def test_insert(self) -> None:
        with pytest.raises(StoreUnavailable):
            self._broken_repository().insert_account("a@b.com", "@alice", HASH)

    def test_find(self) -> None:
        with pytest.raises(StoreUnavailable):
            self._broken_repository().find_by_identifier("@alice")

    def test_update_hash(self) -> None:
        with pytest.raises(StoreUnavailable):
            self._broken_repository().update_password_hash("id-1", HASH)
