"""
Reporting - Error classification and throttled client telemetry.
"""

from authcore.adapters.telemetry import HttpTelemetrySink
from authcore.config.settings import Settings
from authcore.domain.ports import TelemetrySink

from .dispatcher import TelemetryDispatcher
from .reporter import ErrorKind, ErrorReporter, classify
from .throttle import CooldownThrottle

__all__ = [
    "CooldownThrottle",
    "ErrorKind",
    "ErrorReporter",
    "TelemetryDispatcher",
    "classify",
    "create_error_reporter",
]


def create_error_reporter(settings: Settings, sink: TelemetrySink | None = None) -> ErrorReporter:
    """
    Build the process-wide ErrorReporter.

    Call once at startup and pass the result to every caller. Without an
    explicit sink, events go to the account service's monitoring endpoint.
    """
    if sink is None:
        sink = HttpTelemetrySink(
            settings.api_base_url,
            timeout=settings.telemetry_timeout_seconds,
        )
    dispatcher = TelemetryDispatcher(sink, maxsize=settings.telemetry_queue_size)
    throttle = CooldownThrottle(cooldown_seconds=settings.error_cooldown_seconds)
    return ErrorReporter(throttle, dispatcher, app_version=settings.app_version)
