"""Main application entry point for BeepTimer."""

import sys
import time
import queue
import argparse
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.live import Live

from beeptimer import __version__
from beeptimer.audio.source import MicrophoneSource
from beeptimer.services import BeepTimerController, StatusPublisher
from beeptimer.ui import StatusScreen, create_input_handler

from .config import BeepTimerConfig

logger = logging.getLogger(__name__)

CMD_LISTEN = "listen"
CMD_TOGGLE = "toggle"
CMD_QUIT = "quit"


class App:
    """Wires the microphone, controller and terminal UI into one frame loop."""

    def __init__(self, config_path: Optional[str] = None,
                 log_level: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None):
        self.config = BeepTimerConfig(config_path)
        for key_path, value in (overrides or {}).items():
            self.config.set(key_path, value)

        # Command line level wins over the config file
        setup_logging(self.config, log_level or self.config.get('logging.level', 'INFO'))

        # Filled by the keyboard thread, drained by the frame loop
        self.commands: "queue.Queue[str]" = queue.Queue()
        self.should_exit = False
        self.console = Console()

    def init(self) -> None:
        logger.info("Initializing services...")

        detection_config = self.config.get_detection_config()
        analyser_settings = self.config.get_analyser_settings()
        logger.info(f"Audio settings: {analyser_settings.sample_rate}Hz, "
                    f"FFT {analyser_settings.fft_size}, {analyser_settings.frame_rate:g} frames/s")

        self.frame_interval = 1.0 / analyser_settings.frame_rate
        self.source = MicrophoneSource(analyser_settings)
        self.screen = StatusScreen()
        self.controller = BeepTimerController(
            config=detection_config,
            source=self.source,
            observer=StatusPublisher(),
        )
        self.input_handler = create_input_handler(self.handle_key)

    def handle_key(self, key: str) -> bool:
        """Keyboard thread callback; only enqueues commands."""
        if key == "q":
            self.commands.put(CMD_QUIT)
            return False
        if key == "l":
            self.commands.put(CMD_LISTEN)
        elif key in (" ", "m", "\r", "\n"):
            self.commands.put(CMD_TOGGLE)
        return True

    def process_commands(self) -> None:
        while True:
            try:
                command = self.commands.get_nowait()
            except queue.Empty:
                return
            logger.debug(f"Command: {command}")
            if command == CMD_LISTEN:
                self.controller.start_listening()
            elif command == CMD_TOGGLE:
                self.controller.manual_toggle()
            elif command == CMD_QUIT:
                self.should_exit = True

    def run(self, duration: Optional[float] = None) -> None:
        deadline = time.monotonic() + duration if duration else None
        try:
            self.input_handler.start()
            self.controller.start_listening()
            with Live(self.screen.render(), console=self.console, refresh_per_second=10) as live:
                while not self.should_exit:
                    self.process_commands()
                    self.controller.tick()
                    live.update(self.screen.render(self.source.get_stats()))
                    if deadline is not None and time.monotonic() >= deadline:
                        logger.info(f"Duration of {duration}s reached, exiting")
                        break
                    time.sleep(self.frame_interval)
        finally:
            self.cleanup()

    def cleanup(self) -> None:
        self.input_handler.stop()
        self.controller.stop_listening()


def setup_logging(config: BeepTimerConfig, level: str = "INFO") -> None:
    """Set up logging configuration from YAML config."""
    log_file_path = config.get_log_file_path()
    console_output = config.get('logging.console_output', True)

    log_dir = Path(log_file_path).parent
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers = []

    # File handler - always write to file
    file_handler = logging.FileHandler(log_file_path)
    file_handler.setLevel(logging.DEBUG)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    handlers.append(file_handler)

    # Console handler - warnings only, the status screen owns the terminal
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.WARNING)
        console_formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        console_handler.setFormatter(console_formatter)
        handlers.append(console_handler)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper()))
    for handler in handlers:
        root_logger.addHandler(handler)

    logger.info("=" * 50)
    logger.info("BeepTimer starting up")
    logger.info(f"Log file: {log_file_path}")
    logger.info(f"Log level set to: {level}")
    logger.info("=" * 50)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="BeepTimer - start and stop a session timer with beep codes",
        epilog="Keys: l=Start listening, space/m=Start/stop timer, q=Quit"
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration YAML file (default: built-in settings)"
    )

    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Set logging level (default: from config, else INFO)"
    )

    parser.add_argument(
        "--policy",
        type=str,
        choices=["level", "debounce"],
        help="Beep edge policy: 'level' counts a sustained tone once, "
             "'debounce' re-counts it every debounce interval (overrides config)"
    )

    parser.add_argument(
        "--stop-behavior",
        type=str,
        choices=["terminal", "rearm"],
        help="After a stop: 'terminal' ends listening, 'rearm' waits for a new start sequence"
    )

    parser.add_argument(
        "--sensitivity",
        type=int,
        help="Amplitude threshold on the 0-255 scale (overrides config)"
    )

    parser.add_argument(
        "--duration",
        type=float,
        help="Exit automatically after this many seconds"
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"BeepTimer v{__version__}"
    )
    return parser


def collect_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.policy:
        overrides['detection.edge_policy'] = args.policy
    if args.stop_behavior:
        overrides['detection.stop_behavior'] = args.stop_behavior
    if args.sensitivity is not None:
        overrides['detection.sensitivity'] = args.sensitivity
    return overrides


def main() -> None:
    """Main entry point for BeepTimer."""
    args = build_parser().parse_args()

    try:
        app = App(args.config, args.log_level, collect_overrides(args))
        app.init()
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Configuration error: {e}")
        sys.exit(2)

    try:
        app.run(args.duration)
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
    except Exception as e:
        logger.exception(f"Application error: {e}")
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
