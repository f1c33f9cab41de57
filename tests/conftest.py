"""Pytest configuration and fixtures for BeepTimer tests."""

import pytest
import logging
from unittest.mock import Mock, patch
import numpy as np

from beeptimer.audio.errors import AcquisitionFailure
from beeptimer.models.audio import SpectralFrame
from beeptimer.models.detection import DetectionConfig
from beeptimer.services.controller import BeepTimerController
from beeptimer.services.scheduler import TimerScheduler
from beeptimer.services.status_publisher import SessionObserver


# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

SAMPLE_RATE = 48000
FFT_SIZE = 2048
BIN_COUNT = FFT_SIZE // 2
TONE_BIN = 93        # 93 * 48000 / 2048 = 2179.69 Hz
HARMONIC_BIN = 279   # 6539.06 Hz
OFF_TARGET_BIN = 43  # 1007.81 Hz
FRAME_MS = 16.0


def pytest_configure(config):
    for marker, description in (
        ("unit", "fast tests of a single component"),
        ("integration", "tests that run synthetic audio through several components"),
        ("hardware", "tests that need a real microphone"),
        ("slow", "tests that take more than a second"),
    ):
        config.addinivalue_line("markers", f"{marker}: {description}")


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start_ms: float = 1_700_000_000_000.0):
        self.now = start_ms

    def now_ms(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class RecordingObserver(SessionObserver):
    """Keeps every notification for later assertions."""

    def __init__(self):
        self.peaks = []
        self.statuses = []
        self.ticks = []
        self.starts = []
        self.ends = []

    def on_peak_update(self, freq_hz, amplitude):
        self.peaks.append((freq_hz, amplitude))

    def on_status_change(self, text):
        self.statuses.append(text)

    def on_timer_tick(self, elapsed):
        self.ticks.append(elapsed)

    def on_session_start(self, start):
        self.starts.append(start)

    def on_session_end(self, end):
        self.ends.append(end)


class FakeSource:
    """Spectral source that serves silent frames unless told otherwise."""

    def __init__(self, clock: FakeClock, fail: bool = False):
        self.clock = clock
        self.fail = fail
        self.sample_rate = SAMPLE_RATE
        self.fft_size = FFT_SIZE
        self.open_count = 0
        self.close_count = 0
        self.next_frames = []

    def open(self):
        if self.fail:
            raise AcquisitionFailure("permission denied")
        self.open_count += 1

    def close(self):
        self.close_count += 1

    def get_frame(self):
        if self.next_frames:
            return self.next_frames.pop(0)
        return make_frame(self.clock.now_ms(), amplitude=0)


def make_frame(timestamp_ms: float, amplitude: float = 200, bin_index: int = TONE_BIN) -> SpectralFrame:
    """Frame with low background noise and one peak bin."""
    amplitudes = np.full(BIN_COUNT, 10 if amplitude else 0, dtype=np.uint8)
    amplitudes[bin_index] = amplitude
    return SpectralFrame(
        amplitudes=amplitudes,
        sample_rate=SAMPLE_RATE,
        fft_size=FFT_SIZE,
        timestamp_ms=timestamp_ms,
    )


class FrameFeeder:
    """Pumps frames and timers through a controller the way the frame loop does."""

    def __init__(self, controller: BeepTimerController, clock: FakeClock):
        self.controller = controller
        self.clock = clock

    def feed(self, amplitude: float = 200, bin_index: int = TONE_BIN, advance_ms: float = FRAME_MS):
        self.clock.advance(advance_ms)
        self.controller.scheduler.run_due()
        return self.controller.process_frame(make_frame(self.clock.now_ms(), amplitude, bin_index))

    def silence(self, duration_ms: float):
        events = []
        elapsed = 0.0
        while elapsed < duration_ms:
            event = self.feed(amplitude=0)
            if event:
                events.append(event)
            elapsed += FRAME_MS
        return events

    def beep(self, duration_ms: float = 80, gap_ms: float = 120, bin_index: int = TONE_BIN):
        """One physical beep followed by silence. Returns the emitted events."""
        events = []
        elapsed = 0.0
        while elapsed < duration_ms:
            event = self.feed(bin_index=bin_index)
            if event:
                events.append(event)
            elapsed += FRAME_MS
        events.extend(self.silence(gap_ms))
        return events

    def beeps(self, count: int, **kwargs):
        events = []
        for _ in range(count):
            events.extend(self.beep(**kwargs))
        return events

    def wait(self, ms: float):
        """Let time pass with no frames at all (timers still run)."""
        self.clock.advance(ms)
        self.controller.scheduler.run_due()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def observer():
    return RecordingObserver()


@pytest.fixture
def detection_config():
    return DetectionConfig()


@pytest.fixture
def source(clock):
    return FakeSource(clock)


@pytest.fixture
def make_controller(clock, source, observer):
    """Factory building a controller on the fake clock, optionally with a custom config."""
    def _make(config: DetectionConfig = None, listening: bool = True) -> BeepTimerController:
        controller = BeepTimerController(
            config=config or DetectionConfig(),
            source=source,
            observer=observer,
            scheduler=TimerScheduler(clock),
        )
        if listening:
            assert controller.start_listening()
        return controller
    return _make


@pytest.fixture
def controller(make_controller):
    return make_controller()


@pytest.fixture
def feeder(controller, clock):
    return FrameFeeder(controller, clock)


@pytest.fixture
def sine_chunk():
    """Generate 16-bit PCM audio for testing."""
    def generate(freq_hz: float = 2179.0, amplitude: float = 0.3, samples: int = 1024,
                 sample_rate: int = SAMPLE_RATE, start_sample: int = 0) -> bytes:
        t = (np.arange(samples) + start_sample) / sample_rate
        wave_data = amplitude * np.sin(2 * np.pi * freq_hz * t)
        return (wave_data * 32767).astype(np.int16).tobytes()
    return generate


@pytest.fixture
def mock_pyaudio():
    """Mock PyAudio for testing without actual audio hardware."""
    with patch('pyaudio.PyAudio') as mock_pyaudio_class:
        mock_pyaudio_instance = Mock()
        mock_stream = Mock()

        mock_stream.read.return_value = b'\x00' * 2048  # Silent audio
        mock_stream.stop_stream.return_value = None
        mock_stream.close.return_value = None

        mock_pyaudio_instance.open.return_value = mock_stream
        mock_pyaudio_instance.terminate.return_value = None

        mock_pyaudio_class.return_value = mock_pyaudio_instance

        yield {
            'class': mock_pyaudio_class,
            'instance': mock_pyaudio_instance,
            'stream': mock_stream
        }
