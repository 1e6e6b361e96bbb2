"""
idle.py

Collapses a burst of edit notifications into a single "idle" flag that is
raised once no new edit has arrived for a fixed delay.
"""

import logging
import threading

from ..config import settings

logger = logging.getLogger(__name__)


class IdleDetector:
    """
    Restart-on-event timer producing an edge-triggered readiness flag.

    Call `notify()` on every edit. Call `poll_and_reset()` to find out (and clear)
    whether the delay elapsed since the most recent `notify()`. Both may be called
    from different threads.
    """

    def __init__(self, delay=None, timer_factory=threading.Timer):
        """
        :param delay:         Quiet interval in seconds. Defaults to settings.IDLE_DELAY.
        :param timer_factory: Callable (interval, function) -> object with start()/cancel(),
                              same shape as threading.Timer. This is the only
                              time source, so tests pass a fake scheduler here.
        """
        self.delay = delay if delay is not None else getattr(settings, "IDLE_DELAY", 0.3)
        self._timer_factory = timer_factory

        self._lock = threading.Lock()
        self._ready = False
        self._generation = 0
        self._timer = None

    def notify(self):
        """Record that an edit happened now and restart the delay window."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            self._ready = False

            # Cancel any previous timer and schedule a new one
            if self._timer is not None:
                self._timer.cancel()
            self._timer = self._timer_factory(self.delay, lambda: self._on_timeout(generation))
            if hasattr(self._timer, "daemon"):
                self._timer.daemon = True
            self._timer.start()

    def poll_and_reset(self):
        """
        Return True if the delay elapsed with no intervening `notify()`,
        clearing the flag in the same step.
        """
        with self._lock:
            was_ready = self._ready
            self._ready = False
        return was_ready

    def cancel(self):
        """Drop any pending timer; the flag is left as it is."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _on_timeout(self, generation):
        with self._lock:
            # A newer notify() superseded this window
            if generation != self._generation:
                return
            self._ready = True
            self._timer = None
        logger.debug("Idle for %.3fs; readiness flag raised", self.delay)
