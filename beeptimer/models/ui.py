"""UI-related data models."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class DisplayStatus:
    """Everything the status screen shows."""
    status_text: str = "Press 'l' to start listening"
    elapsed: str = "00:00:00"
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    peak_frequency_hz: float = 0.0
    peak_amplitude: float = 0.0
    session_running: bool = False
