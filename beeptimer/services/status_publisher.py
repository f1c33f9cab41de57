"""Observer interface for display collaborators and its pub/sub implementation."""

import logging
from datetime import datetime
from pubsub import pub

from ..models.events import SessionEvent

logger = logging.getLogger(__name__)

PEAK_TOPIC = "beeptimer.peak"
STATUS_TOPIC = "beeptimer.status"
TICK_TOPIC = "beeptimer.tick"
SESSION_TOPIC = "beeptimer.session"


class SessionObserver:
    """Receives state changes from the controller. All hooks default to no-ops."""

    def on_peak_update(self, freq_hz: float, amplitude: float) -> None:
        pass

    def on_status_change(self, text: str) -> None:
        pass

    def on_timer_tick(self, elapsed: str) -> None:
        pass

    def on_session_start(self, start: datetime) -> None:
        pass

    def on_session_end(self, end: datetime) -> None:
        pass


class StatusPublisher(SessionObserver):
    """Publishes controller notifications using pubsub.pub."""

    def __init__(self, prefix: str = ""):
        """Initialize status publisher.

        Args:
            prefix: Optional prefix prepended to every topic name
        """
        self.prefix = prefix
        logger.info(f"StatusPublisher initialized with topic prefix: '{prefix}'")

    def topic(self, name: str) -> str:
        return f"{self.prefix}{name}"

    def on_peak_update(self, freq_hz, amplitude):
        pub.sendMessage(self.topic(PEAK_TOPIC), freq_hz=freq_hz, amplitude=amplitude)

    def on_status_change(self, text):
        pub.sendMessage(self.topic(STATUS_TOPIC), text=text)
        logger.debug(f"Published status: {text}")

    def on_timer_tick(self, elapsed):
        pub.sendMessage(self.topic(TICK_TOPIC), elapsed=elapsed)

    def on_session_start(self, start):
        pub.sendMessage(self.topic(SESSION_TOPIC), event=SessionEvent(event_type="started", timestamp=start))

    def on_session_end(self, end):
        pub.sendMessage(self.topic(SESSION_TOPIC), event=SessionEvent(event_type="stopped", timestamp=end))
