"""
Cooldown throttle - At most one telemetry send per error type per window.

One instance is created at process start and shared by every caller.
The lock covers only the read-compare-update of the cooldown map and is
never held across a network or storage call.
"""

import threading
import time
from collections.abc import Callable


class CooldownThrottle:
    """Per-key leaky bucket of one, keyed by error type."""

    def __init__(
        self,
        cooldown_seconds: float = 60.0,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._cooldown = cooldown_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._last_sent: dict[str, float] = {}

    def should_send(self, error_type: str) -> bool:
        """
        Claim the send slot for ``error_type`` if its cooldown has passed.

        Returns True and records the current time when no send was
        recorded yet or at least ``cooldown_seconds`` have elapsed since
        the last one. Otherwise returns False and records nothing.
        """
        now = self._clock()
        with self._lock:
            last = self._last_sent.get(error_type)
            if last is not None and now - last < self._cooldown:
                return False
            self._last_sent[error_type] = now
            return True
