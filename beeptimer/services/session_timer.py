"""Session timer and elapsed-time formatting."""

import logging
from datetime import datetime

from ..models.session import TimerState

logger = logging.getLogger(__name__)


def format_elapsed(start_ms: float, now_ms: float) -> str:
    """Format a raw duration as HH:MM:SS.

    Hours keep counting past 24; negative durations are shown as zero.
    """
    total_seconds = max(0, int((now_ms - start_ms) // 1000))
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


class SessionTimer:
    """Tracks the start and end of the current session."""

    def __init__(self, clock):
        self.clock = clock
        self.state = TimerState()

    @property
    def running(self) -> bool:
        return self.state.running

    def start(self) -> bool:
        """Open a new session. Returns False if one is already running."""
        if self.state.running:
            logger.debug("Timer already running, ignoring start")
            return False
        self.state = TimerState(start_ms=self.clock.now_ms(), running=True, start_time=datetime.now())
        logger.info(f"Session started at {self.state.start_time}")
        return True

    def stop(self) -> bool:
        """Finalize the running session. Returns False if none is running."""
        if not self.state.running:
            logger.debug("Timer not running, ignoring stop")
            return False
        self.state.end_ms = self.clock.now_ms()
        self.state.end_time = datetime.now()
        self.state.running = False
        logger.info(f"Session stopped at {self.state.end_time} after {self.elapsed_text()}")
        return True

    def elapsed_ms(self) -> float:
        if self.state.start_ms is None:
            return 0.0
        end = self.state.end_ms if self.state.end_ms is not None else self.clock.now_ms()
        return max(0.0, end - self.state.start_ms)

    def elapsed_text(self) -> str:
        if self.state.start_ms is None:
            return format_elapsed(0, 0)
        end = self.state.end_ms if self.state.end_ms is not None else self.clock.now_ms()
        return format_elapsed(self.state.start_ms, end)
