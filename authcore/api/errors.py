"""
Exception handlers - Convert failures into the API's fixed response shapes.

Handlers:
    validation_exception_handler: RequestValidationError -> 400 with field errors
    service_unavailable_handler: ServiceUnavailable -> 503 with a generic message

Neither handler returns internal detail; ServiceUnavailable only ever
carries a user-safe message.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from authcore.api.models import ErrorResponse, FieldErrorModel
from authcore.domain.exceptions import ServiceUnavailable

logger = logging.getLogger(__name__)

VALIDATION_FAILED = "Validation failed"


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Convert pydantic validation errors into field errors.

    Example:
        >>> # POST /api/auth/register with username "alice"
        >>> # {
        >>> #   "success": false,
        >>> #   "message": "Validation failed",
        >>> #   "field_errors": [
        >>> #     {"field": "username", "message": "Username must start with @ ..."}
        >>> #   ]
        >>> # }
    """
    field_errors: list[FieldErrorModel] = []
    for error in exc.errors():
        # ["body", "email"] -> "email"
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field_name = ".".join(loc) if loc else "general"

        ctx_error = (error.get("ctx") or {}).get("error")
        message = str(ctx_error) if ctx_error is not None else error.get("msg", VALIDATION_FAILED)
        field_errors.append(FieldErrorModel(field=field_name, message=message))

    body = ErrorResponse(message=VALIDATION_FAILED, field_errors=field_errors or None)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(exclude_none=True),
    )


async def service_unavailable_handler(request: Request, exc: ServiceUnavailable) -> JSONResponse:
    """Return the exception's user-safe message with 503."""
    logger.error("Service unavailable on %s", request.url.path)
    body = ErrorResponse(message=exc.message)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ServiceUnavailable, service_unavailable_handler)
