"""
Telemetry dispatcher - Bounded fire-and-forget delivery.

Events are handed to a bounded queue drained by one daemon worker
thread. submit() never blocks: when the queue is full the event is
dropped. Whatever the sink raises is logged at DEBUG and discarded.
"""

import logging
import queue
import threading
import time

from authcore.domain.models import ClientErrorEvent
from authcore.domain.ports import TelemetrySink

logger = logging.getLogger(__name__)

_STOP = object()


class TelemetryDispatcher:
    """Background worker delivering ClientErrorEvents to a TelemetrySink."""

    def __init__(self, sink: TelemetrySink, maxsize: int = 100) -> None:
        self._sink = sink
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._worker: threading.Thread | None = None
        self._start_lock = threading.Lock()
        self._closed = False

    def start(self) -> None:
        """Start the worker thread. Safe to call more than once."""
        with self._start_lock:
            if self._worker is not None:
                return
            self._worker = threading.Thread(
                target=self._run, name="telemetry-dispatcher", daemon=True
            )
            self._worker.start()

    def submit(self, event: ClientErrorEvent) -> bool:
        """
        Queue an event for delivery without waiting.

        Returns:
            True if queued, False if dropped (queue full or closed)
        """
        if self._closed:
            return False
        self.start()
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            logger.debug("Telemetry queue full, dropping %s", event.error_type)
            return False
        return True

    def close(self, timeout: float | None = 5.0) -> None:
        """
        Stop accepting events, deliver what is queued and join the worker.

        ``timeout`` bounds the whole call, including waiting for queue
        space. A worker still busy when it expires is left behind; it is
        a daemon thread and does not hold up interpreter exit.
        """
        self._closed = True
        if self._worker is None:
            return

        deadline = None if timeout is None else time.monotonic() + timeout
        try:
            self._queue.put(_STOP, timeout=timeout)
        except queue.Full:
            logger.warning("Telemetry worker busy, abandoning %d queued event(s)", self._queue.qsize())
            return

        remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
        self._worker.join(remaining)
        if self._worker.is_alive():
            logger.warning("Telemetry worker did not stop within %ss", timeout)

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._sink.send(item)
            except Exception as e:
                logger.debug("Telemetry delivery failed: %s", e)
            finally:
                self._queue.task_done()
