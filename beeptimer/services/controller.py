"""Beep timer controller: owns detection state and drives the session timer."""

import logging
from typing import Optional

from ..audio.errors import AcquisitionFailure
from ..detection import (
    SequenceAction,
    SequenceCounter,
    create_edge_detector,
    extract_peak,
    is_tone_active,
)
from ..models.audio import SpectralFrame
from ..models.detection import DetectionConfig, DetectionState, StopBehavior
from ..models.events import BeepEvent
from .scheduler import TimerPurpose, TimerScheduler
from .session_timer import SessionTimer
from .status_publisher import SessionObserver

logger = logging.getLogger(__name__)

STATUS_LISTENING = "Microphone active, waiting for beep..."
STATUS_MIC_ERROR = "Error: Could not access the microphone."
STATUS_ACTIVE = "🟢 Timer active. Listening for stop sequence..."
STATUS_COMPLETE = '✅ Session Complete. Press "l" to start listening for a new session.'
STATUS_REARMED = "Listening for the next start sequence..."
STATUS_STOPPED_LISTENING = "Listening stopped."


class BeepTimerController:
    """Single owner of all detection and timer state.

    Every mutation goes through the methods below, which are only ever called
    from the frame loop thread: frames via `process_frame`/`tick`, timers via
    `TimerScheduler.run_due`, user commands via the loop's command queue.
    """

    def __init__(self,
                 config: DetectionConfig,
                 source,
                 observer: Optional[SessionObserver] = None,
                 scheduler: Optional[TimerScheduler] = None):
        """Initialize controller.

        Args:
            config: Detection configuration
            source: Spectral source providing open(), close() and get_frame()
            observer: Receiver of status, peak, tick and session notifications
            scheduler: Timer scheduler; its clock is used for all timestamps
        """
        self.config = config
        self.source = source
        self.observer = observer or SessionObserver()
        self.scheduler = scheduler or TimerScheduler()
        self.clock = self.scheduler.clock

        self.state = DetectionState()
        self.edge_detector = create_edge_detector(config)
        self.counter = SequenceCounter(config)
        self.timer = SessionTimer(self.clock)

        logger.info(f"Controller ready: policy={config.edge_policy.value}, "
                    f"stop_behavior={config.stop_behavior.value}, "
                    f"targets={list(config.target_frequencies)}Hz ±{config.freq_tolerance}Hz, "
                    f"sensitivity={config.sensitivity}")

    @property
    def is_listening(self) -> bool:
        return self.state.is_listening

    @property
    def is_paused(self) -> bool:
        return self.state.is_paused

    @property
    def running(self) -> bool:
        return self.timer.running

    # --- Listening lifecycle ---

    def start_listening(self) -> bool:
        """Open the spectral source and begin detection.

        Returns:
            True if listening started, False if already listening or the
            microphone could not be acquired
        """
        if self.state.is_listening:
            logger.debug("Already listening, ignoring start_listening")
            return False

        try:
            self.source.open()
        except AcquisitionFailure as e:
            logger.error(f"Error during microphone setup: {e}")
            self.observer.on_status_change(STATUS_MIC_ERROR)
            return False

        self.state.reset()
        self.state.is_listening = True
        logger.info("Listening started")
        self.observer.on_status_change(STATUS_LISTENING)
        return True

    def stop_listening(self) -> None:
        """Stop detection, ending any running session, and cancel every pending timer."""
        if not self.state.is_listening:
            return
        if self.timer.running:
            self._finish_session()
        self._teardown()
        self.observer.on_status_change(STATUS_STOPPED_LISTENING)

    def _teardown(self) -> None:
        self.scheduler.cancel_all()
        self.state.is_listening = False
        self.state.is_paused = False
        self.state.beep_count = 0
        self.source.close()
        logger.info("Listening stopped")

    # --- Frame processing ---

    def tick(self) -> Optional[BeepEvent]:
        """One cooperative step: run due timers, then process one frame."""
        self.scheduler.run_due()
        if not self.state.is_listening or self.state.is_paused:
            return None
        return self.process_frame(self.source.get_frame())

    def process_frame(self, frame: SpectralFrame) -> Optional[BeepEvent]:
        """Run one frame through peak extraction, matching and edge detection."""
        if not self.state.is_listening or self.state.is_paused:
            return None

        peak = extract_peak(frame)
        self.observer.on_peak_update(peak.frequency_hz, peak.amplitude)

        tone_active = is_tone_active(peak, self.config)
        event = self.edge_detector.update(self.state, tone_active, peak, frame.timestamp_ms)
        if event is not None:
            self._handle_beep(event)
        return event

    def _handle_beep(self, event: BeepEvent) -> None:
        decision = self.counter.register_beep(self.state, self.timer.running)
        self.scheduler.schedule(
            TimerPurpose.SEQUENCE_RESET,
            self.config.max_pause_between_beeps_ms,
            self._on_sequence_timeout,
        )

        if decision.status_text:
            self.observer.on_status_change(decision.status_text)

        if decision.action is SequenceAction.START:
            self.start_timer()
        elif decision.action is SequenceAction.STOP:
            self.stop_timer()

    def _on_sequence_timeout(self) -> None:
        if not self.state.is_listening or self.state.is_paused:
            return
        if self.state.beep_count:
            logger.debug(f"Sequence abandoned after {self.state.beep_count} beep(s)")
        self.counter.reset(self.state)

    # --- Session timer ---

    def start_timer(self) -> None:
        if not self.timer.start():
            return

        self.observer.on_session_start(self.timer.state.start_time)
        self._enter_cooldown("🟢 Timer started.")
        self.scheduler.schedule_repeating(TimerPurpose.TICK, self.config.tick_interval_ms, self._on_tick)

    def _enter_cooldown(self, prefix: str) -> None:
        """Suspend detection for the cooldown period after a start or stop."""
        self.scheduler.cancel(TimerPurpose.SEQUENCE_RESET)
        self.counter.reset(self.state)
        self.state.is_paused = True
        cooldown_s = self.config.cooldown_period_ms / 1000.0
        self.observer.on_status_change(f"{prefix} Detection paused for {cooldown_s:g}s...")
        self.scheduler.schedule(TimerPurpose.COOLDOWN, self.config.cooldown_period_ms, self._end_cooldown)

    def _end_cooldown(self) -> None:
        if not self.state.is_listening or not self.state.is_paused:
            return
        self.state.is_paused = False
        self.counter.reset(self.state)
        self.edge_detector.rearm(self.state, self.clock.now_ms())
        logger.info("Cooldown over, detection re-armed")
        self.observer.on_status_change(STATUS_ACTIVE if self.timer.running else STATUS_REARMED)

    def _on_tick(self) -> None:
        if not self.timer.running:
            self.scheduler.cancel(TimerPurpose.TICK)
            return
        self.observer.on_timer_tick(self.timer.elapsed_text())

    def stop_timer(self) -> None:
        if not self._finish_session():
            return

        if self.config.stop_behavior is StopBehavior.TERMINAL:
            self._teardown()
            self.observer.on_status_change(STATUS_COMPLETE)
        else:
            # Beeps past the stop count fall inside this cooldown
            self._enter_cooldown("✅ Session Complete.")

    def _finish_session(self) -> bool:
        """Stop the timer and report the final elapsed time and end stamp."""
        if not self.timer.stop():
            return False

        self.scheduler.cancel(TimerPurpose.TICK)
        self.scheduler.cancel(TimerPurpose.SEQUENCE_RESET)
        self.counter.reset(self.state)
        self.observer.on_timer_tick(self.timer.elapsed_text())
        self.observer.on_session_end(self.timer.state.end_time)
        return True

    # --- User commands ---

    def manual_toggle(self) -> None:
        """Stop the running session or start a new one, unless in cooldown."""
        if not self.state.is_listening:
            logger.debug("Manual toggle ignored, not listening")
            return
        if self.state.is_paused:
            logger.info("Cannot manually operate timer during cooldown.")
            return
        if self.timer.running:
            self.stop_timer()
        else:
            self.start_timer()
