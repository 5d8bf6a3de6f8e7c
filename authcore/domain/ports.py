"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure. Adapters implement these protocols.
"""

from typing import Any, Protocol

from .models import Account, ClientErrorEvent, Field

__all__ = ["AccountRepository", "Field", "KeyValueStore", "TelemetrySink"]


class AccountRepository(Protocol):
    """Port interface for account persistence."""

    def is_taken(self, field: Field, value: str) -> bool:
        """
        Check whether any account already uses ``value`` for ``field``.

        Args:
            field: Field to look up
            value: Normalized value to look for

        Returns:
            True if an account row exists with that value

        Raises:
            StoreUnavailable: If the store cannot be queried
        """
        ...

    def insert_account(self, email: str, username: str, password_hash: str) -> Account:
        """
        Insert a new account row.

        The store's unique constraints on email and username are the
        authority; a violation is reported as FieldTaken.

        Args:
            email: Normalized email address
            username: Normalized username
            password_hash: Encoded Argon2id hash

        Returns:
            The persisted Account, including its generated id

        Raises:
            FieldTaken: If a unique constraint rejected the insert
            StoreUnavailable: For any other store failure
        """
        ...

    def find_by_identifier(self, identifier: str) -> Account | None:
        """
        Look up an account by email or username.

        Raises:
            StoreUnavailable: If the store cannot be queried
        """
        ...

    def update_password_hash(self, account_id: str, password_hash: str) -> None:
        """
        Replace an account's stored hash, e.g. after a cost upgrade.

        Raises:
            StoreUnavailable: If the store cannot be written
        """
        ...


class KeyValueStore(Protocol):
    """
    Port interface for the local secure key-value store.

    Writes are pending in memory until ``save`` flushes them.
    """

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def delete(self, key: str) -> None: ...

    def save(self) -> None:
        """
        Flush the current state to durable storage.

        Raises:
            OSError: If the state could not be written
        """
        ...


class TelemetrySink(Protocol):
    """Port interface for the remote monitoring collaborator."""

    def send(self, event: ClientErrorEvent) -> None:
        """Deliver one client error event. The response is not inspected."""
        ...
