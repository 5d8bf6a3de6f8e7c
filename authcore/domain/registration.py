"""
Registration domain service - Uniqueness-checked account creation.

Registration Flow
=================

1. Normalize email (strip + lowercase) and username (strip).
2. Check email availability, then username availability. Both checks
   always run so every conflict is reported at once.
3. Any conflict: return a failure result with the accumulated field
   errors. The store is not touched.
4. Hash the password on the dedicated hashing pool.
5. Insert the account row and return the public user record.

Consistency
===========

Steps 2 and 5 are check-then-act and are NOT serialized here. The
pre-check is only an early exit. The store's unique constraints on
email and username are the single source of truth: a concurrent
registration that slips past the pre-check is rejected at insert time,
reported by the repository as FieldTaken, and translated back into a
field error below.
"""

import logging
from concurrent.futures import Executor
from dataclasses import dataclass

from .availability import FieldAvailabilityChecker, normalize
from .exceptions import FieldTaken, HashingFailed, ServiceUnavailable, StoreUnavailable
from .hashing import CredentialHasher
from .models import Field, FieldError, RegistrationRequest, RegistrationResult
from .ports import AccountRepository

logger = logging.getLogger(__name__)

ACCOUNT_CREATED = "Account created."
ACCOUNT_NOT_CREATED = "Account could not be created."

TAKEN_MESSAGES = {
    Field.EMAIL: "This email is already taken.",
    Field.USERNAME: "This username is already taken.",
}


@dataclass
class RegistrationCoordinator:
    """
    Domain service for account registration.

    Orchestrates availability checks, password hashing and the
    persisted insert of a new account.
    """

    repository: AccountRepository
    hasher: CredentialHasher
    hashing_pool: Executor | None = None

    def __post_init__(self) -> None:
        self.availability = FieldAvailabilityChecker(self.repository)

    def register(self, request: RegistrationRequest) -> RegistrationResult:
        """
        Register a new account.

        Args:
            request: Email, username and plaintext password

        Returns:
            RegistrationResult; success=False carries field errors and
            guarantees no row was created

        Raises:
            ServiceUnavailable: If the store or the hasher failed for a
                reason unrelated to uniqueness
        """
        email = normalize(Field.EMAIL, request.email)
        username = normalize(Field.USERNAME, request.username)

        field_errors = []
        for field, value in ((Field.EMAIL, email), (Field.USERNAME, username)):
            available = self.availability.check(field, value)
            if available is None:
                raise ServiceUnavailable()
            if not available:
                field_errors.append(self._taken(field))

        if field_errors:
            return RegistrationResult(
                success=False,
                field_errors=tuple(field_errors),
                message=ACCOUNT_NOT_CREATED,
            )

        password_hash = self._hash_password(request.password)

        try:
            account = self.repository.insert_account(email, username, password_hash)
        except FieldTaken as e:
            # Lost a race against a concurrent registration
            logger.info("Insert rejected by unique constraint on %s", e.field)
            return RegistrationResult(
                success=False,
                field_errors=(self._taken(e.field),) if e.field is not None else None,
                message=ACCOUNT_NOT_CREATED,
            )
        except StoreUnavailable as e:
            logger.error("Account insert failed: %s", e)
            raise ServiceUnavailable() from None

        logger.info("Account created: id=%s", account.id)
        return RegistrationResult(
            success=True,
            message=ACCOUNT_CREATED,
            user=account.public(),
        )

    def _hash_password(self, password: str) -> str:
        """Hash on the dedicated pool when one is configured."""
        try:
            if self.hashing_pool is None:
                return self.hasher.hash(password)
            return self.hashing_pool.submit(self.hasher.hash, password).result()
        except HashingFailed:
            raise ServiceUnavailable() from None

    @staticmethod
    def _taken(field: Field) -> FieldError:
        return FieldError(field=field.value, message=TAKEN_MESSAGES[field])
