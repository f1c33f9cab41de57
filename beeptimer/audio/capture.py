"""PyAudio microphone capture on a background thread."""

import time
import logging
import threading
from datetime import datetime
from typing import Callable, Optional

import pyaudio

from ..models.audio import AudioStats
from ..models.events import AudioEvent
from .errors import AcquisitionFailure

logger = logging.getLogger(__name__)


class AudioCapture:
    """Reads fixed-size 16-bit PCM chunks from an input device.

    The stream is opened by `start_recording()` on the caller's thread, so a
    missing or refused device surfaces there as `AcquisitionFailure`. Only the
    blocking reads run on the capture thread, which hands every chunk to
    `on_chunk` as an `AudioEvent`.
    """

    def __init__(
        self,
        on_chunk: Callable[[AudioEvent], None],
        sample_rate: int = 48000,
        chunk_size: int = 1024,
        channels: int = 1,
        input_device_index: Optional[int] = None,
    ):
        """Initialize audio capture.

        Args:
            on_chunk: Receives every captured AudioEvent (called on the capture thread)
            sample_rate: Sample rate in Hz
            chunk_size: Samples per channel in each chunk
            channels: Number of input channels
            input_device_index: PyAudio device index, None for the system default
        """
        self.on_chunk = on_chunk
        self.sample_rate = sample_rate
        self.chunk_size = chunk_size
        self.channels = channels
        self.input_device_index = input_device_index

        self.thread: Optional[threading.Thread] = None
        self.is_recording = False
        self._stop = threading.Event()
        self._pa: Optional[pyaudio.PyAudio] = None
        self._stream = None

        self.start_time: Optional[datetime] = None
        self.total_chunks = 0

    @property
    def chunk_duration_ms(self) -> int:
        return int(self.chunk_size * 1000 / self.sample_rate)

    def start_recording(self) -> None:
        """Open the input stream and start the capture thread.

        Raises:
            AcquisitionFailure: If the input device cannot be opened
        """
        if self.is_recording:
            logger.warning("Capture already running")
            return

        self._pa, self._stream = self._open_stream()
        self._stop.clear()
        self.total_chunks = 0
        self.start_time = datetime.now()
        self.is_recording = True

        self.thread = threading.Thread(target=self._run, name="AudioCaptureThread", daemon=True)
        self.thread.start()
        logger.info(f"Capture started: {self.sample_rate}Hz, {self.channels} channel(s), "
                    f"{self.chunk_size} samples/chunk ({self.chunk_duration_ms}ms)")

    def stop_recording(self) -> None:
        """Stop the capture thread; the stream is closed by the thread on its way out."""
        if not self.is_recording:
            logger.debug("Capture not running")
            return

        self._stop.set()
        if self.thread is not None:
            self.thread.join(timeout=2.0)
            if self.thread.is_alive():
                logger.warning("Capture thread did not stop cleanly")

        self.is_recording = False
        logger.info(f"Capture stopped after {self.total_chunks} chunks")

    def _open_stream(self):
        pa = pyaudio.PyAudio()
        try:
            stream = pa.open(
                format=pyaudio.paInt16,
                channels=self.channels,
                rate=self.sample_rate,
                input=True,
                frames_per_buffer=self.chunk_size,
                input_device_index=self.input_device_index,
            )
        except (OSError, IOError) as e:
            pa.terminate()
            raise AcquisitionFailure(f"Could not open input device: {e}") from e
        return pa, stream

    def _close_stream(self) -> None:
        stream, pa = self._stream, self._pa
        self._stream = None
        self._pa = None
        if stream is not None:
            stream.stop_stream()
            stream.close()
        if pa is not None:
            pa.terminate()

    def _run(self) -> None:
        try:
            while not self._stop.is_set():
                data = self._stream.read(self.chunk_size, exception_on_overflow=False)
                self.total_chunks += 1
                self.on_chunk(AudioEvent(
                    chunk_id=f"chunk_{self.total_chunks}",
                    audio_data=data,
                    timestamp=time.time(),
                    sequence_number=self.total_chunks,
                    sample_rate=self.sample_rate,
                    channels=self.channels,
                    chunk_duration_ms=self.chunk_duration_ms,
                ))
        except (OSError, IOError) as e:
            logger.error(f"Audio stream read failed: {e}")
        finally:
            self._close_stream()

    def get_recording_stats(self) -> AudioStats:
        """Get current capture statistics."""
        duration = 0.0
        if self.start_time:
            duration = (datetime.now() - self.start_time).total_seconds()

        return AudioStats(
            is_recording=self.is_recording,
            duration_seconds=duration,
            sample_rate=self.sample_rate,
            chunk_size=self.chunk_size,
            total_chunks=self.total_chunks,
        )
