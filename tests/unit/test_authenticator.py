"""
Unit tests for Authenticator login checks.
"""

from unittest.mock import Mock

import pytest

from authcore.domain.exceptions import ServiceUnavailable, StoreUnavailable
from authcore.domain.hashing import CredentialHasher
from authcore.domain.login import Authenticator
from authcore.domain.models import Account


@pytest.fixture
def account(fast_hasher: CredentialHasher) -> Account:
    return Account(
        id="0b7e5f0e-4a3c-4d47-9c1e-1f9d2d3c4b5a",
        email="a@b.com",
        username="@alice",
        password_hash=fast_hasher.hash("Secret1!"),
    )


class TestAuthenticate:
    def test_correct_password_returns_public_user(
        self, fast_hasher: CredentialHasher, account: Account
    ) -> None:
        repo = Mock()
        repo.find_by_identifier.return_value = account

        user = Authenticator(repo, fast_hasher).authenticate("a@b.com", "Secret1!")

        assert user is not None
        assert user.to_dict() == {
            "id": account.id,
            "username": "@alice",
            "email": "a@b.com",
        }

    def test_wrong_password_returns_none(
        self, fast_hasher: CredentialHasher, account: Account
    ) -> None:
        repo = Mock()
        repo.find_by_identifier.return_value = account

        assert Authenticator(repo, fast_hasher).authenticate("@alice", "Wrong1!!") is None

    def test_unknown_account_still_runs_verification(self, fast_hasher: CredentialHasher) -> None:
        """A missing account is checked against the dummy hash."""
        repo = Mock()
        repo.find_by_identifier.return_value = None
        authenticator = Authenticator(repo, fast_hasher)
        hasher_spy = Mock(wraps=fast_hasher)
        authenticator.hasher = hasher_spy

        assert authenticator.authenticate("nobody@example.com", "Secret1!") is None
        hasher_spy.verify.assert_called_once()

    def test_malformed_stored_hash_fails_closed(self, fast_hasher: CredentialHasher) -> None:
        repo = Mock()
        repo.find_by_identifier.return_value = Account("id", "a@b.com", "@alice", "garbage")

        assert Authenticator(repo, fast_hasher).authenticate("a@b.com", "Secret1!") is None

    def test_identifier_is_stripped(self, fast_hasher: CredentialHasher, account: Account) -> None:
        repo = Mock()
        repo.find_by_identifier.return_value = account

        Authenticator(repo, fast_hasher).authenticate("  @alice ", "Secret1!")

        repo.find_by_identifier.assert_called_once_with("@alice")

    def test_store_failure_raises_service_unavailable(self, fast_hasher: CredentialHasher) -> None:
        repo = Mock()
        repo.find_by_identifier.side_effect = StoreUnavailable("timeout")

        with pytest.raises(ServiceUnavailable):
            Authenticator(repo, fast_hasher).authenticate("a@b.com", "Secret1!")


class TestRehash:
    """Hashes made with other cost parameters are upgraded on login."""

    @pytest.fixture
    def stale_account(self) -> Account:
        old_hasher = CredentialHasher(time_cost=2, memory_cost=16, parallelism=1)
        return Account("id-1", "a@b.com", "@alice", old_hasher.hash("Secret1!"))

    def test_stale_hash_rewritten_on_success(
        self, fast_hasher: CredentialHasher, stale_account: Account
    ) -> None:
        repo = Mock()
        repo.find_by_identifier.return_value = stale_account

        assert Authenticator(repo, fast_hasher).authenticate("a@b.com", "Secret1!") is not None

        repo.update_password_hash.assert_called_once()
        account_id, new_hash = repo.update_password_hash.call_args[0]
        assert account_id == "id-1"
        assert not fast_hasher.needs_rehash(new_hash)
        assert fast_hasher.verify("Secret1!", new_hash)

    def test_current_hash_left_alone(self, fast_hasher: CredentialHasher, account: Account) -> None:
        repo = Mock()
        repo.find_by_identifier.return_value = account

        Authenticator(repo, fast_hasher).authenticate("a@b.com", "Secret1!")

        repo.update_password_hash.assert_not_called()

    def test_wrong_password_never_rehashes(
        self, fast_hasher: CredentialHasher, stale_account: Account
    ) -> None:
        repo = Mock()
        repo.find_by_identifier.return_value = stale_account

        assert Authenticator(repo, fast_hasher).authenticate("a@b.com", "Wrong1!!") is None

        repo.update_password_hash.assert_not_called()

    def test_failed_update_does_not_fail_login(
        self, fast_hasher: CredentialHasher, stale_account: Account
    ) -> None:
        repo = Mock()
        repo.find_by_identifier.return_value = stale_account
        repo.update_password_hash.side_effect = StoreUnavailable("read-only replica")

        user = Authenticator(repo, fast_hasher).authenticate("a@b.com", "Secret1!")

        assert user is not None
        assert user.id == "id-1"
