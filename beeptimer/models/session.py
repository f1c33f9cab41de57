"""Session-related data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class TimerState:
    """State of one timed session.

    `start_ms`/`end_ms` are scheduler clock readings used for elapsed time;
    `start_time`/`end_time` are the wall-clock stamps shown to the user.
    """
    start_ms: Optional[float] = None
    end_ms: Optional[float] = None
    running: bool = False
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    @property
    def finished(self) -> bool:
        return self.end_ms is not None
