"""
Domain exceptions - Semantic error types for authentication.

This module defines domain-specific exceptions that communicate
business rule violations and infrastructure failures without leaking
infrastructure details to the user.
"""

from .models import Field

GENERIC_FAILURE_MESSAGE = "An unexpected error occurred. Please try again."


class AuthError(Exception):
    """Base class for authentication domain errors."""

    pass


class FieldTaken(AuthError):
    """
    The account store rejected an insert on a unique constraint.

    ``field`` is the violated Field, or None when the constraint
    could not be identified.
    """

    def __init__(self, field: Field | None = None) -> None:
        super().__init__(field.value if field is not None else "unknown field")
        self.field = field


class StoreUnavailable(AuthError):
    """The account store could not be queried or written."""

    pass


class ServiceUnavailable(AuthError):
    """Infrastructure failure, carrying only a user-safe message."""

    def __init__(self, message: str = GENERIC_FAILURE_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class HashingFailed(AuthError):
    """Password hashing failed internally."""

    def __init__(self) -> None:
        super().__init__(GENERIC_FAILURE_MESSAGE)


class TokenStorageError(AuthError):
    """The local token store could not be flushed to disk."""

    pass


class ClientError(AuthError):
    """Desktop-side failure, carrying only a user-safe message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
