"""
Logging telemetry sink - Implements TelemetrySink protocol.

This module provides a logging-based implementation of the domain's
telemetry port, for development and for running without a monitoring
endpoint.
"""

import logging

from authcore.domain.models import ClientErrorEvent

logger = logging.getLogger(__name__)


class LoggingTelemetrySink:
    """
    Implements TelemetrySink protocol via logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def send(self, event: ClientErrorEvent) -> None:
        """
        Log the client error event at WARNING level.

        Args:
            event: Client error event built by ErrorReporter
        """
        logger.warning(
            "[CLIENT ERROR] type=%s version=%s os=%s message=%s",
            event.error_type,
            event.app_version,
            event.os,
            event.error_message,
        )
