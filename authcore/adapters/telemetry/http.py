"""
HTTP telemetry sink - Implements TelemetrySink protocol.

Posts client error events to the account service's monitoring
endpoint. The response is not inspected; errors propagate to the
TelemetryDispatcher worker, which discards them.
"""

import httpx

from authcore.domain.models import ClientErrorEvent

CLIENT_ERRORS_PATH = "/monitoring/client-errors"


class HttpTelemetrySink:
    """
    Implements TelemetrySink protocol via httpx.

    Uses structural subtyping - no explicit inheritance from Protocol.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._url = base_url.rstrip("/") + CLIENT_ERRORS_PATH
        self._client = client or httpx.Client(timeout=timeout)

    def send(self, event: ClientErrorEvent) -> None:
        self._client.post(self._url, json=event.to_dict())

    def close(self) -> None:
        self._client.close()
