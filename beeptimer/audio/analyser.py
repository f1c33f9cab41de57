"""Byte-scaled frequency analyser over the most recent microphone samples.

Produces the same kind of spectrum a browser AnalyserNode reports from
getByteFrequencyData(): a Blackman-windowed FFT of the latest `fft_size`
samples, magnitudes normalised by the FFT size, smoothed over time, converted
to decibels and mapped linearly from [min_decibels, max_decibels] onto 0-255.
"""

import logging
import threading

import numpy as np
from scipy.signal import get_window

from ..models.audio import AnalyserSettings, SpectralFrame
from ..models.events import AudioEvent

logger = logging.getLogger(__name__)


class SpectrumAnalyser:
    """Keeps a sliding window of samples and turns it into spectral frames."""

    def __init__(self, settings: AnalyserSettings):
        self.settings = settings
        self.fft_size = settings.fft_size
        self.bin_count = settings.frequency_bin_count
        self.window = get_window("blackman", self.fft_size)

        # Written by the capture thread, read by the frame loop
        self.lock = threading.Lock()
        self._samples = np.zeros(self.fft_size, dtype=np.float64)
        self.chunks_received = 0

        # Only touched from the frame loop
        self._smoothed = np.zeros(self.bin_count, dtype=np.float64)

        logger.info(f"SpectrumAnalyser initialized: fft_size={self.fft_size}, "
                    f"{self.bin_count} bins, {settings.sample_rate / self.fft_size:.2f}Hz/bin")

    def on_audio_event(self, event: AudioEvent) -> None:
        """Pub/sub listener for captured 16-bit PCM chunks."""
        samples = np.frombuffer(event.audio_data, dtype=np.int16).astype(np.float64) / 32768.0
        if event.channels > 1:
            usable = len(samples) - len(samples) % event.channels
            samples = samples[:usable].reshape(-1, event.channels).mean(axis=1)
        self.add_samples(samples)

    def add_samples(self, samples: np.ndarray) -> None:
        """Append float samples in [-1, 1], keeping only the latest fft_size."""
        samples = np.asarray(samples, dtype=np.float64)
        n = len(samples)
        if n == 0:
            return
        with self.lock:
            if n >= self.fft_size:
                self._samples[:] = samples[-self.fft_size:]
            else:
                self._samples[:-n] = self._samples[n:]
                self._samples[-n:] = samples
            self.chunks_received += 1

    def magnitudes(self) -> np.ndarray:
        """Smoothed linear magnitude per bin."""
        with self.lock:
            block = self._samples.copy()

        spectrum = np.fft.rfft(block * self.window)[:self.bin_count]
        magnitude = np.abs(spectrum) / self.fft_size

        tau = self.settings.smoothing_time_constant
        self._smoothed = tau * self._smoothed + (1.0 - tau) * magnitude
        return self._smoothed

    def byte_frequency_data(self) -> np.ndarray:
        """Current spectrum scaled to 0-255, one value per bin."""
        with np.errstate(divide="ignore"):
            decibels = 20.0 * np.log10(self.magnitudes())

        min_db = self.settings.min_decibels
        scale = 255.0 / (self.settings.max_decibels - min_db)
        scaled = np.floor(scale * (decibels - min_db))
        return np.clip(np.nan_to_num(scaled, neginf=0.0), 0, 255).astype(np.uint8)

    def get_frame(self, timestamp_ms: float) -> SpectralFrame:
        return SpectralFrame(
            amplitudes=self.byte_frequency_data(),
            sample_rate=self.settings.sample_rate,
            fft_size=self.fft_size,
            timestamp_ms=timestamp_ms,
        )

    def reset(self) -> None:
        """Forget buffered samples and smoothing history."""
        with self.lock:
            self._samples[:] = 0.0
            self.chunks_received = 0
        self._smoothed[:] = 0.0
