"""Cancellable one-shot and repeating timers driven by the frame loop.

Timers never run on their own thread: `run_due()` is called from the frame
loop, so timer callbacks are serialized with frame processing.
"""

import time
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)


class SystemClock:
    """Monotonic milliseconds. Only differences between readings are meaningful."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


class TimerPurpose(Enum):
    SEQUENCE_RESET = "sequence_reset"
    COOLDOWN = "cooldown"
    TICK = "tick"


@dataclass
class ScheduledTimer:
    purpose: TimerPurpose
    due_ms: float
    callback: Callable[[], None]
    interval_ms: Optional[float] = None  # Set for repeating timers


class TimerScheduler:
    """Holds at most one pending timer per purpose."""

    def __init__(self, clock=None):
        self.clock = clock or SystemClock()
        self._timers: Dict[TimerPurpose, ScheduledTimer] = {}

    def schedule(self, purpose: TimerPurpose, delay_ms: float, callback: Callable[[], None]) -> None:
        """Schedule a one-shot callback, replacing any pending timer of the same purpose."""
        self._timers[purpose] = ScheduledTimer(
            purpose=purpose,
            due_ms=self.clock.now_ms() + delay_ms,
            callback=callback,
        )
        logger.debug(f"Scheduled {purpose.value} in {delay_ms:.0f}ms")

    def schedule_repeating(self, purpose: TimerPurpose, interval_ms: float,
                           callback: Callable[[], None]) -> None:
        """Schedule a callback every `interval_ms`, replacing any pending timer of the same purpose."""
        if interval_ms <= 0:
            raise ValueError("interval_ms must be positive")
        self._timers[purpose] = ScheduledTimer(
            purpose=purpose,
            due_ms=self.clock.now_ms() + interval_ms,
            callback=callback,
            interval_ms=interval_ms,
        )
        logger.debug(f"Scheduled {purpose.value} every {interval_ms:.0f}ms")

    def cancel(self, purpose: TimerPurpose) -> bool:
        """Cancel the pending timer for a purpose. Returns True if one was pending."""
        timer = self._timers.pop(purpose, None)
        if timer is not None:
            logger.debug(f"Cancelled {purpose.value}")
        return timer is not None

    def cancel_all(self) -> None:
        for purpose in list(self._timers):
            self.cancel(purpose)

    def is_pending(self, purpose: TimerPurpose) -> bool:
        return purpose in self._timers

    def run_due(self) -> int:
        """Run every timer due at the current time, earliest first.

        Returns:
            Number of callbacks fired
        """
        now = self.clock.now_ms()
        fired = 0
        while True:
            due = [t for t in self._timers.values() if t.due_ms <= now]
            if not due:
                break
            timer = min(due, key=lambda t: t.due_ms)

            # Update bookkeeping before the callback so it may cancel or reschedule
            if timer.interval_ms is not None:
                timer.due_ms += timer.interval_ms
            else:
                del self._timers[timer.purpose]

            timer.callback()
            fired += 1
        return fired
