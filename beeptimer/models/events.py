"""Event models for pub/sub audio processing and beep detection."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class AudioEvent:
    """One captured chunk of 16-bit PCM audio."""
    chunk_id: str
    audio_data: bytes
    timestamp: float  # Unix time the chunk was read
    sequence_number: int
    sample_rate: int = 48000
    channels: int = 1
    chunk_duration_ms: Optional[int] = None

    def __post_init__(self):
        if self.chunk_duration_ms is None and self.audio_data:
            frames = len(self.audio_data) // (2 * self.channels)
            self.chunk_duration_ms = int(frames * 1000 / self.sample_rate)


@dataclass(frozen=True)
class BeepEvent:
    """A discrete, debounced detection of a qualifying tone."""
    timestamp_ms: float
    frequency_hz: float
    amplitude: float
    sequence_index: int  # Running number of beeps since listening began


@dataclass
class SessionEvent:
    """Session lifecycle event."""
    event_type: str  # "started", "stopped"
    timestamp: datetime = field(default_factory=datetime.now)
