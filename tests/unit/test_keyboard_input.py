"""Unit tests for keyboard input handlers."""

import pytest
from unittest.mock import Mock, patch

from beeptimer.ui.keyboard_input import (
    InputHandler,
    KeyboardInputHandler,
    LineInputHandler,
    create_input_handler,
)


@pytest.mark.unit
class TestLineInputHandler:
    """Line input runs on its thread until EOF or a quit from the callback."""

    def test_lines_become_keys(self):
        """Test lines become keys."""
        callback = Mock(return_value=True)
        handler = LineInputHandler(callback)

        with patch("builtins.input", side_effect=["L", "", "  m  ", EOFError]):
            handler.start()
            handler.thread.join(timeout=1.0)

        assert [c.args[0] for c in callback.call_args_list] == ["l", " ", "m"]
        assert handler.running is False

    def test_callback_false_ends_loop(self):
        """Test callback false ends loop."""
        callback = Mock(side_effect=[True, False])
        handler = LineInputHandler(callback)

        with patch("builtins.input", side_effect=["l", "q", "l"]):
            handler.start()
            handler.thread.join(timeout=1.0)

        assert callback.call_count == 2
        assert handler.running is False


@pytest.mark.unit
class TestCreateInputHandler:

    def test_pipe_uses_line_input(self):
        """Test pipe uses line input."""
        with patch("sys.stdin") as stdin, patch("sys.platform", "linux"):
            stdin.isatty.return_value = False
            handler = create_input_handler(Mock())

        assert isinstance(handler, LineInputHandler)

    def test_terminal_uses_single_keys(self):
        """Test terminal uses single keys."""
        with patch("sys.stdin") as stdin:
            stdin.isatty.return_value = True
            handler = create_input_handler(Mock())

        assert isinstance(handler, KeyboardInputHandler)

    def test_base_handler_is_abstract(self):
        """Test that InputHandler cannot be used without a key reader."""
        with pytest.raises(TypeError):
            InputHandler(Mock())
