"""
Coalescing of bursty triggers.

Copying a batch of photos into the watched directory produces one event per
file. `Debouncer` turns such a burst into a single callback that runs once the
events have stopped for `delay` seconds.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Run `callback` once per burst of `trigger()` calls.

    Each `trigger()` restarts a timer of `delay` seconds. A `delay` of 0 or
    less disables coalescing and runs the callback synchronously on every
    trigger.
    """

    def __init__(self, callback: Callable[[], object], delay: float):
        self.callback = callback
        self.delay = delay
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None

    def trigger(self) -> None:
        if self.delay <= 0:
            self._fire()
            return

        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                logger.debug("Pending relaunch postponed by a new event.")
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> None:
        """Drop a pending callback, if any."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    def _fire(self) -> None:
        with self._lock:
            # A timer cancelled too late must not forget its replacement
            if self._timer is threading.current_thread():
                self._timer = None
        try:
            self.callback()
        except Exception:
            logger.exception("Debounced callback failed")
