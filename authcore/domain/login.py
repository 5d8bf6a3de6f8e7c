"""
Login domain service - Credential check by email or username.

Token issuance happens outside this package; authenticate() only
answers whether the credentials belong to an account.

Timing: when no account matches, the password is still verified
against a dummy hash so a missing account costs the same Argon2 work
as a wrong password.

Rehash: a successful login whose stored hash was made with older cost
parameters is rehashed and written back. Failing to do so never fails
the login.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass, field

from .exceptions import HashingFailed, ServiceUnavailable, StoreUnavailable
from .hashing import CredentialHasher
from .models import Account, PublicUser
from .ports import AccountRepository

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."


@dataclass
class Authenticator:
    """Verifies a login identifier and password against the account store."""

    repository: AccountRepository
    hasher: CredentialHasher
    hashing_pool: Executor | None = None
    _dummy_hash: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._dummy_hash = self.hasher.hash("dummy_password_for_timing_safety")

    def authenticate(self, identifier: str, password: str) -> PublicUser | None:
        """
        Return the account's public record if the credentials match.

        Args:
            identifier: Email address or username
            password: Plaintext password

        Returns:
            PublicUser on success, None for unknown account or wrong password

        Raises:
            ServiceUnavailable: If the store could not be queried
        """
        try:
            account = self.repository.find_by_identifier(identifier.strip())
        except StoreUnavailable as e:
            logger.error("Login lookup failed: %s", e)
            raise ServiceUnavailable() from None

        stored_hash = account.password_hash if account is not None else self._dummy_hash
        password_valid = self._verify(password, stored_hash)

        if account is None or not password_valid:
            return None

        if self.hasher.needs_rehash(account.password_hash):
            self._rehash(account, password)
        return account.public()

    def _rehash(self, account: Account, password: str) -> None:
        try:
            if self.hashing_pool is None:
                new_hash = self.hasher.hash(password)
            else:
                new_hash = self.hashing_pool.submit(self.hasher.hash, password).result()
            self.repository.update_password_hash(account.id, new_hash)
        except (HashingFailed, StoreUnavailable) as e:
            logger.warning("Rehash skipped for id=%s: %s", account.id, type(e).__name__)
            return
        logger.info("Password hash upgraded: id=%s", account.id)

    def _verify(self, password: str, stored_hash: str) -> bool:
        if self.hashing_pool is None:
            return self.hasher.verify(password, stored_hash)
        return self.hashing_pool.submit(self.hasher.verify, password, stored_hash).result()
