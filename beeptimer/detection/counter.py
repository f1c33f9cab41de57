"""Beep sequence counting and start/stop decisions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..models.detection import DetectionConfig, DetectionState


class SequenceAction(Enum):
    NONE = "none"
    START = "start"
    STOP = "stop"


@dataclass(frozen=True)
class SequenceDecision:
    """Outcome of registering one beep."""
    count: int
    action: SequenceAction = SequenceAction.NONE
    status_text: Optional[str] = None


class SequenceCounter:
    """Two-state machine keyed on whether a session is running.

    The counter only decides; the controller owns the reset timer and performs
    the start/stop side effects.
    """

    # The first beep of a sequence is silent
    MIN_REPORTED_COUNT = 2

    def __init__(self, config: DetectionConfig):
        self.config = config

    def register_beep(self, state: DetectionState, running: bool) -> SequenceDecision:
        state.beep_count += 1
        count = state.beep_count

        if count < self.MIN_REPORTED_COUNT:
            return SequenceDecision(count=count)

        if not running:
            status = f"Beep detected ({count}) of {self.config.start_beep_count} to start."
            action = SequenceAction.START if count == self.config.start_beep_count else SequenceAction.NONE
        else:
            status = f"Beep detected ({count}) of {self.config.stop_beep_count} to stop."
            action = SequenceAction.STOP if count >= self.config.stop_beep_count else SequenceAction.NONE

        return SequenceDecision(count=count, action=action, status_text=status)

    def reset(self, state: DetectionState) -> None:
        state.beep_count = 0
