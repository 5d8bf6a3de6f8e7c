"""
Monitoring routes.

- POST /monitoring/client-errors - Receive a desktop client error event
"""

import logging

from fastapi import APIRouter

from authcore.api.models import ClientErrorLog, ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["monitoring"])


@router.post(
    "/client-errors",
    responses={400: {"model": ErrorResponse, "description": "Validation error"}},
    summary="Record a client error",
)
async def log_client_error(payload: ClientErrorLog) -> dict[str, bool]:
    """Log a client error event. The client does not read the response."""
    logger.error(
        "client_critical_error type=%s version=%s os=%s client_timestamp=%s message=%s",
        payload.error_type,
        payload.app_version,
        payload.os,
        payload.timestamp,
        payload.error_message,
    )
    return {"success": True}
