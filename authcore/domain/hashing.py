"""
Credential hashing - Argon2id password hashing and verification.

Security Design:
----------------
1. **Memory-hard KDF**: Argon2id with configurable time/memory/parallelism
   cost. Defaults are t=3, m=64 MiB, p=4 with a 32-byte digest.

2. **Per-credential salt**: argon2-cffi draws a fresh random salt from the
   OS CSPRNG on every hash() call, so two hashes of the same password are
   never equal.

3. **Opaque encoding**: Hashes are PHC strings
   (``$argon2id$v=19$m=...,t=...,p=...$<salt>$<digest>``) so cost
   parameters travel with the hash.

4. **Fails closed**: verify() returns False for a mismatch, a malformed
   encoding or any other verification error. It never raises.

5. **Constant-time comparison**: digest comparison happens inside
   libargon2, which does not short-circuit on the first differing byte.
"""

import logging

from argon2 import PasswordHasher, Type
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from .exceptions import HashingFailed

logger = logging.getLogger(__name__)


class CredentialHasher:
    """
    Hashes and verifies passwords with Argon2id.

    Thread-safe: argon2-cffi's PasswordHasher holds no mutable state and
    releases the GIL while hashing, so one instance may serve a worker pool.
    """

    def __init__(
        self,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
        hash_len: int = 32,
        salt_len: int = 16,
    ) -> None:
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=hash_len,
            salt_len=salt_len,
            type=Type.ID,
        )

    @classmethod
    def from_settings(cls, settings) -> "CredentialHasher":
        """Build a hasher from the Argon2 cost parameters in Settings."""
        return cls(
            time_cost=settings.argon2_time_cost,
            memory_cost=settings.argon2_memory_cost,
            parallelism=settings.argon2_parallelism,
            hash_len=settings.argon2_hash_len,
            salt_len=settings.argon2_salt_len,
        )

    def hash(self, password: str) -> str:
        """
        Hash a password with a fresh random salt.

        Args:
            password: Plaintext password

        Returns:
            Encoded Argon2id PHC string

        Raises:
            HashingFailed: On any internal hashing error (cause is logged only)
        """
        try:
            return self._hasher.hash(password)
        except HashingError as e:
            logger.error("Password hashing failed: %s", e)
            raise HashingFailed() from None

    def verify(self, password: str, stored_hash: str) -> bool:
        """
        Check a password against a stored hash.

        Args:
            password: Plaintext password
            stored_hash: Encoded hash as read from the account store

        Returns:
            True only if the hash is well-formed and matches the password
        """
        if not isinstance(stored_hash, str):
            return False

        try:
            return self._hasher.verify(stored_hash, password)
        except VerificationError:
            # Includes VerifyMismatchError
            return False
        except (InvalidHashError, TypeError, ValueError):
            logger.warning("Stored password hash is malformed; treating as mismatch")
            return False

    def needs_rehash(self, stored_hash: str) -> bool:
        """
        Whether a stored hash was made with different cost parameters.

        Malformed hashes always need rehashing.
        """
        try:
            return self._hasher.check_needs_rehash(stored_hash)
        except (InvalidHashError, TypeError, ValueError):
            return True
