"""Data models for the BeepTimer application."""

from .audio import AudioStats, AnalyserSettings, SpectralFrame, PeakResult
from .detection import DetectionConfig, DetectionState, EdgePolicy, StopBehavior
from .events import AudioEvent, BeepEvent, SessionEvent
from .session import TimerState
from .ui import DisplayStatus

__all__ = [
    "AudioStats",
    "AnalyserSettings",
    "SpectralFrame",
    "PeakResult",
    "DetectionConfig",
    "DetectionState",
    "EdgePolicy",
    "StopBehavior",
    "AudioEvent",
    "BeepEvent",
    "SessionEvent",
    "TimerState",
    "DisplayStatus",
]
