"""
Error reporter - User-safe messages and throttled telemetry.

Low-level failures are mapped onto a closed set of ErrorKinds, each with
a fixed, pre-written message for the user. The original error text is
only ever sent to the monitoring collaborator, and only through the
cooldown throttle and the background dispatcher.
"""

import json
import logging
import platform
from datetime import datetime, timezone
from enum import Enum

import httpx
from pydantic import ValidationError

from authcore.domain.exceptions import TokenStorageError
from authcore.domain.models import ClientErrorEvent

from .dispatcher import TelemetryDispatcher
from .throttle import CooldownThrottle

logger = logging.getLogger(__name__)

MAX_ERROR_MESSAGE_LENGTH = 1000


class ErrorKind(Enum):
    """
    Failure categories, each carrying its user-facing message.

    ``error_type`` is the telemetry label; None means the kind is
    shown to the user but not reported.
    """

    DECODE = (
        "Received invalid response from server. Please try again.",
        "json_decode_network",
    )
    TIMEOUT = ("Connection timed out. Please try again.", None)
    CONNECT = (
        "Could not connect to server. Please check your internet connection.",
        None,
    )
    BODY = ("Received invalid response from server. Please try again.", None)
    STORAGE = (
        "Could not access local storage. Please check your permissions.",
        "storage_error",
    )
    UNKNOWN = ("Network error occurred. Please try again.", "unexpected_error")

    def __init__(self, user_message: str, error_type: str | None) -> None:
        self.user_message = user_message
        self.error_type = error_type


def classify(error: BaseException) -> ErrorKind:
    """Map a raw exception onto its ErrorKind."""
    if isinstance(error, (httpx.DecodingError, json.JSONDecodeError, ValidationError)):
        return ErrorKind.DECODE
    if isinstance(error, httpx.TimeoutException):
        return ErrorKind.TIMEOUT
    if isinstance(error, httpx.ConnectError):
        return ErrorKind.CONNECT
    if isinstance(error, (httpx.ReadError, httpx.RemoteProtocolError)):
        return ErrorKind.BODY
    if isinstance(error, (TokenStorageError, OSError)):
        return ErrorKind.STORAGE
    return ErrorKind.UNKNOWN


def _os_name() -> str:
    name = platform.system().lower()
    return {"darwin": "macos"}.get(name, name) or "unknown"


class ErrorReporter:
    """
    Classifies failures and reports them, at most once per cooldown window.

    Build one per process (see create_error_reporter) and pass it to
    every caller that handles failures.
    """

    def __init__(
        self,
        throttle: CooldownThrottle,
        dispatcher: TelemetryDispatcher,
        app_version: str,
        os_name: str | None = None,
    ) -> None:
        self._throttle = throttle
        self._dispatcher = dispatcher
        self._app_version = app_version
        self._os_name = os_name or _os_name()

    def classify(self, error: BaseException) -> str:
        """Return the fixed user-facing message for ``error``."""
        return classify(error).user_message

    def should_send(self, error_type: str) -> bool:
        return self._throttle.should_send(error_type)

    def report(self, error_type: str, message: str) -> None:
        """
        Send a client error event in the background, if not throttled.

        Never blocks and never raises.
        """
        if not self.should_send(error_type):
            return

        event = ClientErrorEvent(
            timestamp=datetime.now(timezone.utc).isoformat(),
            error_type=error_type,
            error_message=message[:MAX_ERROR_MESSAGE_LENGTH],
            app_version=self._app_version,
            os=self._os_name,
        )
        try:
            self._dispatcher.submit(event)
        except Exception as e:
            logger.debug("Could not queue telemetry: %s", e)

    def handle(self, error: BaseException) -> str:
        """
        Classify ``error``, report it when its kind is reportable,
        and return the user-safe message.
        """
        kind = classify(error)
        if kind.error_type is not None:
            self.report(kind.error_type, _describe(kind, error))
        return kind.user_message

    def close(self, timeout: float | None = 5.0) -> None:
        """Flush queued telemetry and stop the background worker within ``timeout``."""
        self._dispatcher.close(timeout)


def _describe(kind: ErrorKind, error: BaseException) -> str:
    if kind is ErrorKind.DECODE:
        return f"JSON decode failed: {error}"
    if kind is ErrorKind.STORAGE:
        return f"Storage error: {error!r}"
    return f"{type(error).__name__}: {error}"
