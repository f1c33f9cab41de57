"""Terminal user interface for BeepTimer."""

from .keyboard_input import InputHandler, KeyboardInputHandler, LineInputHandler, create_input_handler
from .status_screen import StatusScreen

__all__ = [
    "InputHandler",
    "KeyboardInputHandler",
    "LineInputHandler",
    "create_input_handler",
    "StatusScreen",
]
