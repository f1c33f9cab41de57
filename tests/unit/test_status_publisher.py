"""Unit tests for StatusPublisher and StatusScreen."""

import pytest
from datetime import datetime
from rich.console import Console

from beeptimer.models.audio import AudioStats
from beeptimer.services.status_publisher import StatusPublisher, SessionObserver
from beeptimer.ui.status_screen import StatusScreen


@pytest.mark.unit
class TestStatusPublishing:
    """Notifications flow from the publisher to the screen over pub/sub."""

    @pytest.fixture
    def pair(self, request):
        prefix = f"{request.node.name}_"
        return StatusPublisher(prefix), StatusScreen(prefix)

    def test_base_observer_is_noop(self):
        """Test that the base observer hooks do nothing."""
        observer = SessionObserver()
        observer.on_peak_update(1.0, 2.0)
        observer.on_status_change("text")
        observer.on_timer_tick("00:00:01")
        observer.on_session_start(datetime.now())
        observer.on_session_end(datetime.now())

    def test_status_and_peak(self, pair):
        """Test status and peak updates reaching the screen."""
        publisher, screen = pair
        publisher.on_status_change("Beep detected (2) of 2 to start.")
        publisher.on_peak_update(2179.69, 180)

        assert screen.status.status_text == "Beep detected (2) of 2 to start."
        assert screen.status.peak_frequency_hz == 2179.69
        assert screen.status.peak_amplitude == 180

    def test_session_start_tick_and_end(self, pair):
        """Test session start tick and end."""
        publisher, screen = pair
        start = datetime(2026, 1, 2, 3, 4, 5)
        end = datetime(2026, 1, 2, 4, 5, 6)

        publisher.on_session_start(start)
        assert screen.status.session_running is True
        assert screen.status.start_time == start

        publisher.on_timer_tick("01:01:01")
        publisher.on_session_end(end)

        assert screen.status.elapsed == "01:01:01"
        assert screen.status.end_time == end
        assert screen.status.session_running is False

    def test_render(self, pair):
        """Test rendering the status panel."""
        publisher, screen = pair
        publisher.on_session_start(datetime(2026, 1, 2, 3, 4, 5))
        publisher.on_timer_tick("00:00:42")
        publisher.on_status_change("🟢 Timer active. Listening for stop sequence...")

        console = Console(record=True, width=100)
        console.print(screen.render())
        output = console.export_text()

        assert "00:00:42" in output
        assert "2026-01-02 03:04:05" in output
        assert "Timer active" in output

    def test_render_with_capture_stats(self, pair):
        """Test render with capture stats."""
        _, screen = pair
        stats = AudioStats(is_recording=True, duration_seconds=12.4, sample_rate=48000,
                           chunk_size=1024, total_chunks=562)

        console = Console(record=True, width=100)
        console.print(screen.render(stats))

        assert "48000Hz, 562 chunks, 12s" in console.export_text()
