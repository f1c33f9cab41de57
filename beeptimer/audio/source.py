"""Microphone-backed spectral source."""

import logging
from typing import Optional
from pubsub import pub

from ..models.audio import AnalyserSettings, AudioStats, SpectralFrame
from ..models.events import AudioEvent
from ..services.scheduler import SystemClock
from .analyser import SpectrumAnalyser
from .capture import AudioCapture
from .errors import AcquisitionFailure

logger = logging.getLogger(__name__)

AUDIO_TOPIC = "audio.chunk"


class MicrophoneSource:
    """Captures the microphone and exposes its live spectrum frame by frame.

    Capture runs on its own thread and publishes each chunk on the audio
    topic, where the analyser is subscribed while the source is open.
    `get_frame()` is called from the frame loop.
    """

    def __init__(self, settings: AnalyserSettings, clock=None, topic: str = AUDIO_TOPIC):
        self.settings = settings
        self.clock = clock or SystemClock()
        self.topic = topic
        self.analyser = SpectrumAnalyser(settings)
        self.capture: Optional[AudioCapture] = None

    @property
    def sample_rate(self) -> int:
        return self.settings.sample_rate

    @property
    def fft_size(self) -> int:
        return self.settings.fft_size

    @property
    def is_open(self) -> bool:
        return self.capture is not None

    def publish_chunk(self, event: AudioEvent) -> None:
        """Capture thread callback: forward the chunk to the audio topic."""
        pub.sendMessage(self.topic, event=event)

    def open(self) -> None:
        """Acquire the microphone.

        Raises:
            AcquisitionFailure: If the microphone cannot be opened
        """
        if self.capture is not None:
            logger.warning("Microphone source already open")
            return

        pub.subscribe(self.analyser.on_audio_event, self.topic)
        capture = AudioCapture(
            on_chunk=self.publish_chunk,
            sample_rate=self.settings.sample_rate,
            chunk_size=self.settings.chunk_size,
            channels=self.settings.channels,
            input_device_index=self.settings.input_device,
        )
        try:
            capture.start_recording()
        except AcquisitionFailure:
            pub.unsubscribe(self.analyser.on_audio_event, self.topic)
            raise
        self.capture = capture
        logger.info(f"Microphone source open, publishing on '{self.topic}'")

    def close(self) -> None:
        if self.capture is None:
            return
        self.capture.stop_recording()
        self.capture = None
        pub.unsubscribe(self.analyser.on_audio_event, self.topic)
        self.analyser.reset()

    def get_frame(self) -> SpectralFrame:
        return self.analyser.get_frame(self.clock.now_ms())

    def get_stats(self) -> Optional[AudioStats]:
        return self.capture.get_recording_stats() if self.capture else None
