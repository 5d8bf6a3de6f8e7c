"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
The same models describe the wire format for the desktop client.
"""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

USERNAME_PATTERN = re.compile(r"@[a-z0-9]{3,16}")
INVALID_CHARACTERS = "Invalid characters detected"


def _reject_nul(value: object) -> object:
    if isinstance(value, str) and "\x00" in value:
        raise ValueError(INVALID_CHARACTERS)
    return value


class RegisterRequest(BaseModel):
    """Request model for account registration."""

    email: EmailStr = Field(..., description="Email address (max 255 characters)")
    username: str = Field(..., description="Username: @ followed by 3-16 lowercase letters or digits")
    password: str = Field(..., description="Password (8-72 characters, mixed character classes)")

    @field_validator("email", mode="before")
    @classmethod
    def email_length(cls, value: object) -> object:
        _reject_nul(value)
        if isinstance(value, str) and len(value) > 255:
            raise ValueError("Email must not exceed 255 characters")
        return value

    @field_validator("username")
    @classmethod
    def username_format(cls, value: str) -> str:
        _reject_nul(value)
        if len(value) > 17:
            raise ValueError("Username must not exceed 17 characters")
        if not USERNAME_PATTERN.fullmatch(value):
            raise ValueError("Username must start with @ and contain 3-16 lowercase letters or digits")
        return value

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        _reject_nul(value)
        if len(value) < 8:
            raise ValueError("Password must be at least 8 characters")
        if len(value) > 72:
            raise ValueError("Password must not exceed 72 characters")
        has_lower = re.search(r"[a-z]", value)
        has_upper = re.search(r"[A-Z]", value)
        has_digit = re.search(r"\d", value)
        has_special = re.search(r"[^A-Za-z0-9]", value)
        if not (has_lower and has_upper and has_digit and has_special):
            raise ValueError(
                "Password must include lowercase, uppercase, number and special character"
            )
        return value


class FieldErrorModel(BaseModel):
    """One rejected field."""

    field: str
    message: str


class UserModel(BaseModel):
    """Public account record. Never includes the password hash."""

    id: str
    username: str
    email: str


class RegisterResponse(BaseModel):
    """Response model for registration, successful or not."""

    success: bool
    field_errors: list[FieldErrorModel] | None = None
    message: str
    user: UserModel | None = None


class CheckFieldResponse(BaseModel):
    """Availability answer; null means the store could not be queried."""

    available: bool | None


class LoginRequest(BaseModel):
    """Request model for login by email or username."""

    identifier: str = Field(..., min_length=1, max_length=255, description="Email or username")
    password: str = Field(..., min_length=1, max_length=72)

    @field_validator("identifier", "password")
    @classmethod
    def no_nul_bytes(cls, value: str) -> str:
        _reject_nul(value)
        return value


class LoginResponse(BaseModel):
    """Response model for login."""

    success: bool
    message: str
    user: UserModel | None = None


class ClientErrorLog(BaseModel):
    """Client error event received from the desktop client."""

    timestamp: str = Field(..., min_length=1)
    error_type: str = Field(..., min_length=1, max_length=100)
    error_message: str = Field(..., min_length=1, max_length=1000)
    app_version: str = Field(..., min_length=1, max_length=50)
    os: str = Field(..., min_length=1, max_length=20)


class ErrorResponse(BaseModel):
    """Standard failure response model."""

    success: bool = False
    message: str
    field_errors: list[FieldErrorModel] | None = None
