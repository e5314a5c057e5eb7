"""
ClockDriver: the one-second tick source.

Built on threading.Timer, re-scheduled after each tick. Every call to arm()
starts a new generation; the callback receives the generation it was
scheduled under so the owner can throw away ticks that belong to an older
arming.
"""

import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class ClockDriver:
    """Cancellable periodic timer. At most one pending tick at a time."""

    def __init__(self, on_tick: Callable[[int], None], interval: float = 1.0):
        """
        Args:
            on_tick: Called with the tick's generation number
            interval: Seconds between ticks
        """
        self._on_tick = on_tick
        self.interval = interval
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._generation = 0
        self._armed = False

    @property
    def armed(self) -> bool:
        with self._lock:
            return self._armed

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    def is_current(self, generation: int) -> bool:
        """True if a tick of this generation should still be honoured."""
        with self._lock:
            return self._armed and generation == self._generation

    def arm(self) -> int:
        """Start ticking from now. Any previous schedule is dropped."""
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._armed = True
            self._schedule_tick(self._generation)
            logger.debug(f"Clock armed (generation {self._generation})")
            return self._generation

    def disarm(self) -> None:
        """Stop ticking. Ticks already in flight become stale."""
        with self._lock:
            if not self._armed:
                return
            self._cancel_timer()
            self._generation += 1
            self._armed = False
            logger.debug("Clock disarmed")

    def shutdown(self) -> None:
        self.disarm()

    def _cancel_timer(self):
        """Cancel the pending timer thread. Caller holds the lock."""
        if self._timer:
            self._timer.cancel()
            self._timer = None

    def _schedule_tick(self, generation: int):
        """Schedule the next tick. Caller holds the lock."""
        self._timer = threading.Timer(self.interval, self._tick, args=(generation,))
        self._timer.daemon = True
        self._timer.start()

    def _tick(self, generation: int):
        """Runs on the timer thread once per interval."""
        if not self.is_current(generation):
            return

        try:
            self._on_tick(generation)
        except Exception as e:
            logger.exception(f"Clock tick error: {e}")

        with self._lock:
            # The callback may have disarmed or re-armed us
            if self._armed and generation == self._generation:
                self._schedule_tick(generation)
