"""Audio-related data models."""

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class AudioStats:
    """Audio capture statistics."""
    is_recording: bool
    duration_seconds: float
    sample_rate: int
    chunk_size: int
    total_chunks: int


@dataclass
class AnalyserSettings:
    """Parameters of the spectrum analyser feeding the detector."""
    sample_rate: int = 48000
    chunk_size: int = 1024
    channels: int = 1
    input_device: Optional[int] = None  # PyAudio device index, None for the default input
    fft_size: int = 2048
    smoothing_time_constant: float = 0.8
    min_decibels: float = -100.0
    max_decibels: float = -30.0
    frame_rate: float = 60.0

    def __post_init__(self):
        if self.fft_size < 32 or self.fft_size & (self.fft_size - 1):
            raise ValueError(f"fft_size must be a power of two >= 32, got {self.fft_size}")
        if not 0.0 <= self.smoothing_time_constant <= 1.0:
            raise ValueError("smoothing_time_constant must be within [0, 1]")
        if self.min_decibels >= self.max_decibels:
            raise ValueError("min_decibels must be lower than max_decibels")
        if self.frame_rate <= 0:
            raise ValueError("frame_rate must be positive")

    @property
    def frequency_bin_count(self) -> int:
        return self.fft_size // 2


@dataclass
class SpectralFrame:
    """One amplitude-by-frequency-bin snapshot (0-255 per bin)."""
    amplitudes: np.ndarray
    sample_rate: int
    fft_size: int
    timestamp_ms: float  # Capture time on the scheduler clock, in milliseconds

    def bin_to_hz(self, index: int) -> float:
        return index * self.sample_rate / self.fft_size


@dataclass(frozen=True)
class PeakResult:
    """Strongest bin of a spectral frame."""
    frequency_hz: float
    amplitude: float
    bin_index: int
