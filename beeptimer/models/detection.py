"""Detection configuration and live detection state."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class EdgePolicy(Enum):
    """How per-frame tone presence turns into beep events."""
    LEVEL = "level"        # one event per sustained tone, with dropout grace
    DEBOUNCE = "debounce"  # re-counts a sustained tone every debounce interval


class StopBehavior(Enum):
    """What happens to the listener once a session is stopped."""
    TERMINAL = "terminal"  # listening ends, start_listening() is needed again
    REARM = "rearm"        # keep listening for the next start sequence


@dataclass(frozen=True)
class DetectionConfig:
    """Static beep detection parameters, fixed for the lifetime of a run."""
    target_frequencies: Tuple[float, ...] = (2179.0, 6537.0)
    freq_tolerance: float = 150.0
    sensitivity: float = 75.0
    beep_debounce_ms: float = 150.0
    min_beep_duration_ms: float = 100.0
    max_pause_between_beeps_ms: float = 400.0
    start_beep_count: int = 2
    stop_beep_count: int = 5
    cooldown_period_ms: float = 5000.0
    tick_interval_ms: float = 1000.0
    edge_policy: EdgePolicy = EdgePolicy.LEVEL
    stop_behavior: StopBehavior = StopBehavior.TERMINAL

    def __post_init__(self):
        if not self.target_frequencies:
            raise ValueError("At least one target frequency is required")
        if self.freq_tolerance <= 0:
            raise ValueError("freq_tolerance must be positive")
        if not 0 <= self.sensitivity <= 255:
            raise ValueError("sensitivity must be within the 0-255 amplitude scale")
        # Counts below 2 never produce a visible status, so a start at 1 could not fire
        if self.start_beep_count < 2:
            raise ValueError("start_beep_count must be at least 2")
        if self.start_beep_count > self.stop_beep_count:
            raise ValueError("start_beep_count must not exceed stop_beep_count")
        for name in ("beep_debounce_ms", "min_beep_duration_ms", "max_pause_between_beeps_ms",
                     "cooldown_period_ms", "tick_interval_ms"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")
        if self.tick_interval_ms == 0:
            raise ValueError("tick_interval_ms must be positive")


@dataclass
class DetectionState:
    """Mutable detection state; a single instance is owned by the controller."""
    beep_count: int = 0
    is_beeping: bool = False
    last_beep_ms: Optional[float] = None
    last_tone_ms: Optional[float] = None
    is_paused: bool = False
    is_listening: bool = False

    def reset(self) -> None:
        """Return to the freshly-armed state, keeping the listening flag."""
        self.beep_count = 0
        self.is_beeping = False
        self.last_beep_ms = None
        self.last_tone_ms = None
        self.is_paused = False
