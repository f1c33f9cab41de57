"""Tests that need a real input device. Run with: pytest -m hardware"""

import time
import pytest

pytest.importorskip("pyaudio")

from beeptimer.audio.source import MicrophoneSource
from beeptimer.models.audio import AnalyserSettings


@pytest.mark.hardware
@pytest.mark.slow
def test_microphone_produces_frames():
    """Test that a real microphone produces spectral frames."""
    source = MicrophoneSource(AnalyserSettings())
    source.open()
    try:
        time.sleep(0.5)
        frame = source.get_frame()
        stats = source.get_stats()
    finally:
        source.close()

    assert stats.total_chunks > 0
    assert len(frame.amplitudes) == 1024
    assert 0 <= int(frame.amplitudes.max()) <= 255
    assert not source.is_open
