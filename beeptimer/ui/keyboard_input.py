"""Keyboard command input for the terminal UI.

Handlers read keys on a daemon thread and pass each one to a callback. The
callback must not touch controller state; `App.handle_key` only enqueues a
command for the frame loop.
"""

import sys
import threading
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

KeyCallback = Callable[[str], bool]


class InputHandler(ABC):
    """Runs `_next_key()` in a loop until stopped or the callback returns False."""

    thread_name = "KeyboardInputThread"

    def __init__(self, callback: KeyCallback):
        """Initialize input handler.

        Args:
            callback: Takes a lower-case key and returns True to continue, False to quit
        """
        self.callback = callback
        self.running = False
        self.thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self.thread = threading.Thread(target=self._run, name=self.thread_name, daemon=True)
        self.thread.start()
        logger.info(f"{type(self).__name__} started")

    def stop(self) -> None:
        self.running = False
        logger.info(f"{type(self).__name__} stopped")

    def _run(self) -> None:
        while self.running:
            key = self._next_key()
            if key is None:
                continue
            logger.debug(f"Key pressed: {key!r}")
            if not self.callback(key):
                break
        self.running = False

    @abstractmethod
    def _next_key(self) -> Optional[str]:
        """Block briefly for one key. None means nothing was pressed."""
        pass


class KeyboardInputHandler(InputHandler):
    """Single key presses from a real terminal, without waiting for Enter."""

    poll_seconds = 0.1

    def stop(self) -> None:
        super().stop()
        if self.thread is not None:
            self.thread.join(timeout=1.0)

    def _next_key(self) -> Optional[str]:
        if sys.platform == "win32":
            return self._next_key_windows()
        return self._next_key_posix()

    def _next_key_windows(self) -> Optional[str]:
        import msvcrt
        import time

        if not msvcrt.kbhit():
            time.sleep(self.poll_seconds)
            return None
        return msvcrt.getwch().lower()

    def _next_key_posix(self) -> Optional[str]:
        import select
        import termios
        import tty

        ready, _, _ = select.select([sys.stdin], [], [], self.poll_seconds)
        if not ready:
            return None
        saved = termios.tcgetattr(sys.stdin)
        try:
            tty.setcbreak(sys.stdin.fileno())
            return sys.stdin.read(1).lower()
        finally:
            termios.tcsetattr(sys.stdin, termios.TCSADRAIN, saved)


class LineInputHandler(InputHandler):
    """One command per line, for stdin that is a pipe or a dumb terminal.

    An empty line counts as the space bar.
    """

    def _next_key(self) -> Optional[str]:
        try:
            line = input().strip().lower()
        except EOFError:
            self.running = False
            return None
        return line[0] if line else " "


def create_input_handler(callback: KeyCallback) -> InputHandler:
    """Pick single-key input on a terminal, line input otherwise."""
    if sys.platform != "win32" and not sys.stdin.isatty():
        logger.warning("stdin is not a terminal, falling back to line input")
        return LineInputHandler(callback)
    return KeyboardInputHandler(callback)
