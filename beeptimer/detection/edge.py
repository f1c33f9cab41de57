"""Beep edge detectors.

Both detectors turn the per-frame "tone present" signal into discrete
`BeepEvent`s. They keep no state of their own: everything lives in the
`DetectionState` owned by the controller, so that re-arming after a cooldown
is a matter of resetting that state.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from ..models.audio import PeakResult
from ..models.detection import DetectionConfig, DetectionState, EdgePolicy
from ..models.events import BeepEvent

logger = logging.getLogger(__name__)


class BeepEdgeDetector(ABC):
    """Base class for beep edge detection policies."""

    policy: EdgePolicy

    def __init__(self, config: DetectionConfig):
        self.config = config
        self.events_emitted = 0

    @abstractmethod
    def update(self, state: DetectionState, tone_active: bool, peak: PeakResult,
               now_ms: float) -> Optional[BeepEvent]:
        """Feed one frame's tone decision. Returns a BeepEvent on a new beep."""
        pass

    def rearm(self, state: DetectionState, now_ms: float) -> None:
        """Reset edge state after a cooldown."""
        state.is_beeping = False
        state.last_tone_ms = None
        state.last_beep_ms = now_ms

    def _emit(self, state: DetectionState, peak: PeakResult, now_ms: float) -> BeepEvent:
        state.last_beep_ms = now_ms
        self.events_emitted += 1
        event = BeepEvent(
            timestamp_ms=now_ms,
            frequency_hz=peak.frequency_hz,
            amplitude=peak.amplitude,
            sequence_index=self.events_emitted,
        )
        logger.debug(f"Beep #{event.sequence_index} at {peak.frequency_hz:.1f}Hz "
                     f"(amplitude {peak.amplitude:.0f}, policy {self.policy.value})")
        return event


class LevelTriggeredDetector(BeepEdgeDetector):
    """One event per physical beep.

    A rising edge of tone presence emits an event. The beep is considered over
    only after `min_beep_duration_ms` of continuous silence, so short spectral
    dropouts inside a single beep do not split it into several events.
    """

    policy = EdgePolicy.LEVEL

    def update(self, state, tone_active, peak, now_ms):
        if tone_active:
            state.last_tone_ms = now_ms
            if state.is_beeping:
                return None
            state.is_beeping = True
            return self._emit(state, peak, now_ms)

        if state.is_beeping and state.last_tone_ms is not None:
            if now_ms - state.last_tone_ms >= self.config.min_beep_duration_ms:
                state.is_beeping = False
        return None


class DebounceDetector(BeepEdgeDetector):
    """Re-triggering detector gated only by the debounce interval.

    A tone that stays on is counted again every `beep_debounce_ms`.
    """

    policy = EdgePolicy.DEBOUNCE

    def update(self, state, tone_active, peak, now_ms):
        if not tone_active:
            return None
        if state.last_beep_ms is not None and now_ms - state.last_beep_ms < self.config.beep_debounce_ms:
            return None
        return self._emit(state, peak, now_ms)


def create_edge_detector(config: DetectionConfig) -> BeepEdgeDetector:
    """Build the detector for the configured policy."""
    if config.edge_policy is EdgePolicy.DEBOUNCE:
        return DebounceDetector(config)
    return LevelTriggeredDetector(config)
