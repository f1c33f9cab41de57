"""Terminal status screen fed by the status pub/sub topics."""

import logging
import threading
from typing import Optional
from pubsub import pub
from rich.align import Align
from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models.audio import AudioStats
from ..models.events import SessionEvent
from ..models.ui import DisplayStatus
from ..services.status_publisher import PEAK_TOPIC, STATUS_TOPIC, TICK_TOPIC, SESSION_TOPIC

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class StatusScreen:
    """Collects controller notifications and renders them with Rich."""

    def __init__(self, prefix: str = ""):
        self.status = DisplayStatus()
        self.lock = threading.Lock()
        self.prefix = prefix

        pub.subscribe(self._on_peak, f"{prefix}{PEAK_TOPIC}")
        pub.subscribe(self._on_status, f"{prefix}{STATUS_TOPIC}")
        pub.subscribe(self._on_tick, f"{prefix}{TICK_TOPIC}")
        pub.subscribe(self._on_session, f"{prefix}{SESSION_TOPIC}")
        logger.info("StatusScreen subscribed to status topics")

    def _on_peak(self, freq_hz: float, amplitude: float) -> None:
        with self.lock:
            self.status.peak_frequency_hz = freq_hz
            self.status.peak_amplitude = amplitude

    def _on_status(self, text: str) -> None:
        with self.lock:
            self.status.status_text = text

    def _on_tick(self, elapsed: str) -> None:
        with self.lock:
            self.status.elapsed = elapsed

    def _on_session(self, event: SessionEvent) -> None:
        with self.lock:
            if event.event_type == "started":
                self.status.start_time = event.timestamp
                self.status.end_time = None
                self.status.elapsed = "00:00:00"
                self.status.session_running = True
            else:
                self.status.end_time = event.timestamp
                self.status.session_running = False

    def render(self, stats: Optional[AudioStats] = None) -> Panel:
        """Build the renderable for the current status.

        Args:
            stats: Capture statistics of the open microphone, if any
        """
        with self.lock:
            status = DisplayStatus(**vars(self.status))

        timer_style = "bold green" if status.session_running else "bold white"
        timer = Align.center(Text(status.elapsed, style=timer_style))

        table = Table(show_header=False, box=None, expand=True)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="white")
        table.add_row("Status", status.status_text)
        table.add_row("Start", status.start_time.strftime(TIME_FORMAT) if status.start_time else "--")
        table.add_row("End", status.end_time.strftime(TIME_FORMAT) if status.end_time else "--")
        table.add_row("Peak frequency", f"{status.peak_frequency_hz:.2f} Hz")

        level_bar = "█" * int(status.peak_amplitude / 255 * 20)
        table.add_row("Peak volume", f"{level_bar:<20} {status.peak_amplitude:.0f}")
        if stats is not None:
            table.add_row("Capture", f"{stats.sample_rate}Hz, {stats.total_chunks} chunks, "
                                     f"{stats.duration_seconds:.0f}s")

        footer = Text("l = start listening   space/m = start/stop timer   q = quit", style="dim")
        return Panel(Group(timer, table, footer), title="⏱️  BeepTimer", border_style="bright_blue")
