"""
Account service client - Desktop side of the account service API.

Performs the HTTP calls and hands back typed results. Transport and
decoding failures are passed through the ErrorReporter and surface as
ClientError carrying only the fixed user-facing message.

Non-2xx responses that still carry a well-formed body (conflicts,
validation failures, 503) are returned as results, not raised.
"""

import logging

import httpx
from pydantic import BaseModel

from authcore.api.models import CheckFieldResponse, LoginResponse, RegisterResponse
from authcore.domain.exceptions import GENERIC_FAILURE_MESSAGE, ClientError
from authcore.domain.models import (
    Field,
    FieldError,
    PublicUser,
    RegistrationRequest,
    RegistrationResult,
)
from authcore.reporting.reporter import ErrorReporter

logger = logging.getLogger(__name__)


class AccountServiceClient:
    """Typed wrapper over the account service's /api/auth endpoints."""

    def __init__(
        self,
        base_url: str,
        reporter: ErrorReporter,
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._reporter = reporter
        self._http = http or httpx.Client(timeout=timeout)

    @classmethod
    def from_settings(cls, settings, reporter: ErrorReporter) -> "AccountServiceClient":
        """Build a client for the configured account service URL and timeout."""
        return cls(settings.api_base_url, reporter, timeout=settings.request_timeout_seconds)

    def auth_url(self, endpoint: str) -> str:
        return f"{self._base_url}/api/auth/{endpoint}"

    def register(self, request: RegistrationRequest) -> RegistrationResult:
        """
        Submit a registration.

        Raises:
            ClientError: On transport failure or an unreadable response
        """
        body = self._call(
            "POST",
            "register",
            RegisterResponse,
            json={
                "email": request.email,
                "username": request.username,
                "password": request.password,
            },
        )

        field_errors = None
        if body.field_errors:
            field_errors = tuple(
                FieldError(field=error.field, message=error.message) for error in body.field_errors
            )
        user = PublicUser(**body.user.model_dump()) if body.user is not None else None
        return RegistrationResult(
            success=body.success,
            message=body.message,
            field_errors=field_errors,
            user=user,
        )

    def check_email_available(self, email: str) -> bool | None:
        return self._check_field(Field.EMAIL, email)

    def check_username_available(self, username: str) -> bool | None:
        return self._check_field(Field.USERNAME, username)

    def login(self, identifier: str, password: str) -> LoginResponse:
        """
        Submit login credentials.

        Raises:
            ClientError: On transport failure or an unreadable response
        """
        return self._call(
            "POST",
            "login",
            LoginResponse,
            json={"identifier": identifier, "password": password},
        )

    def close(self) -> None:
        self._http.close()

    def _check_field(self, field: Field, value: str) -> bool | None:
        body = self._call(
            "GET",
            "check-field",
            CheckFieldResponse,
            params={"field": field.value, "value": value},
        )
        return body.available

    def _call(self, method: str, endpoint: str, model: type[BaseModel], **kwargs):
        try:
            response = self._http.request(method, self.auth_url(endpoint), **kwargs)
        except httpx.HTTPError as e:
            logger.warning("Request to %s failed: %s", endpoint, type(e).__name__)
            raise ClientError(self._reporter.handle(e)) from None

        try:
            return model.model_validate(response.json())
        except ValueError as e:
            # JSONDecodeError and pydantic's ValidationError are both ValueErrors
            if not response.is_success:
                raise ClientError(GENERIC_FAILURE_MESSAGE) from None
            raise ClientError(self._reporter.handle(e)) from None
