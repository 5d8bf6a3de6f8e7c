"""
Domain models - Plain data carried between the domain and its ports.

Credentials only ever exist transiently in a RegistrationRequest;
nothing in this module is persisted with a plaintext password.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Field(str, Enum):
    """
    Account fields that must be unique across all accounts.

    This is a closed set: adapters map each member to a fixed,
    pre-written query. A caller-supplied string is only ever
    converted into a member, never placed into SQL.
    """

    EMAIL = "email"
    USERNAME = "username"


@dataclass(frozen=True)
class RegistrationRequest:
    """Input to RegistrationCoordinator.register()."""

    email: str
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class FieldError:
    """One rejected input field and the reason it was rejected."""

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


@dataclass(frozen=True)
class PublicUser:
    """Account data that may leave the service. Never carries the hash."""

    id: str
    username: str
    email: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "username": self.username, "email": self.email}


@dataclass(frozen=True)
class Account:
    """Account row as owned by the account store."""

    id: str
    email: str
    username: str
    password_hash: str = field(repr=False)

    def public(self) -> PublicUser:
        return PublicUser(id=self.id, username=self.username, email=self.email)


@dataclass(frozen=True)
class RegistrationResult:
    """
    Outcome of a registration attempt.

    success=True always carries a user and no field errors;
    success=False means no account row was created.
    """

    success: bool
    message: str
    field_errors: tuple[FieldError, ...] | None = None
    user: PublicUser | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire format, omitting absent optional members."""
        data: dict[str, Any] = {"success": self.success}
        if self.field_errors:
            data["field_errors"] = [error.to_dict() for error in self.field_errors]
        data["message"] = self.message
        if self.user is not None:
            data["user"] = self.user.to_dict()
        return data


@dataclass(frozen=True)
class TokenPair:
    access_token: str = field(repr=False)
    refresh_token: str = field(repr=False)


@dataclass(frozen=True)
class ClientErrorEvent:
    """Payload sent to the monitoring collaborator."""

    timestamp: str
    error_type: str
    error_message: str
    app_version: str
    os: str

    def to_dict(self) -> dict[str, str]:
        return {
            "timestamp": self.timestamp,
            "error_type": self.error_type,
            "error_message": self.error_message,
            "app_version": self.app_version,
            "os": self.os,
        }
