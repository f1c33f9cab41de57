"""Services layer for BeepTimer application logic."""

from .scheduler import TimerScheduler, TimerPurpose, SystemClock
from .session_timer import SessionTimer, format_elapsed
from .status_publisher import SessionObserver, StatusPublisher
from .controller import BeepTimerController

__all__ = [
    "TimerScheduler",
    "TimerPurpose",
    "SystemClock",
    "SessionTimer",
    "format_elapsed",
    "SessionObserver",
    "StatusPublisher",
    "BeepTimerController",
]
