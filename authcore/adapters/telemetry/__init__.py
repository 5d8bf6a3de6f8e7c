"""Telemetry adapters - Destinations for client error events."""

from .console import LoggingTelemetrySink
from .http import HttpTelemetrySink

__all__ = ["HttpTelemetrySink", "LoggingTelemetrySink"]
