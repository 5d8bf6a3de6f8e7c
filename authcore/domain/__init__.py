"""
Domain layer - Pure business logic behind narrow port interfaces.

This package contains credential hashing, field availability,
registration, login and the local token store. It defines its own
port interfaces for infrastructure abstraction, so the adapters
(PostgreSQL, local file, HTTP) stay outside.
"""

from .availability import FieldAvailabilityChecker
from .exceptions import (
    AuthError,
    ClientError,
    FieldTaken,
    HashingFailed,
    ServiceUnavailable,
    StoreUnavailable,
    TokenStorageError,
)
from .hashing import CredentialHasher
from .login import Authenticator
from .models import (
    Account,
    ClientErrorEvent,
    Field,
    FieldError,
    PublicUser,
    RegistrationRequest,
    RegistrationResult,
    TokenPair,
)
from .ports import AccountRepository, KeyValueStore, TelemetrySink
from .registration import RegistrationCoordinator
from .tokens import TokenStore

__all__ = [
    "Account",
    "AccountRepository",
    "AuthError",
    "Authenticator",
    "ClientError",
    "ClientErrorEvent",
    "CredentialHasher",
    "Field",
    "FieldAvailabilityChecker",
    "FieldError",
    "FieldTaken",
    "HashingFailed",
    "KeyValueStore",
    "PublicUser",
    "RegistrationCoordinator",
    "RegistrationRequest",
    "RegistrationResult",
    "ServiceUnavailable",
    "StoreUnavailable",
    "TelemetrySink",
    "TokenPair",
    "TokenStorageError",
    "TokenStore",
]
