"""Unit tests for SequenceCounter."""

import pytest

from beeptimer.detection import SequenceAction, SequenceCounter
from beeptimer.models.detection import DetectionConfig, DetectionState


@pytest.mark.unit
class TestSequenceCounter:
    """Test cases for SequenceCounter."""

    @pytest.fixture
    def counter(self):
        return SequenceCounter(DetectionConfig(start_beep_count=3, stop_beep_count=5))

    def test_first_beep_is_silent(self, counter):
        """Test first beep is silent."""
        state = DetectionState()
        decision = counter.register_beep(state, running=False)

        assert decision.count == 1
        assert decision.action is SequenceAction.NONE
        assert decision.status_text is None

    def test_progress_toward_start(self, counter):
        """Test progress toward start."""
        state = DetectionState(beep_count=1)
        decision = counter.register_beep(state, running=False)

        assert decision.status_text == "Beep detected (2) of 3 to start."
        assert decision.action is SequenceAction.NONE

    def test_start_on_exact_count_only(self, counter):
        """Test start on exact count only."""
        state = DetectionState(beep_count=2)
        assert counter.register_beep(state, running=False).action is SequenceAction.START
        assert counter.register_beep(state, running=False).action is SequenceAction.NONE

    def test_stop_on_reaching_or_exceeding(self, counter):
        """Test stopping on reaching or exceeding the stop count."""
        state = DetectionState(beep_count=3)
        decision = counter.register_beep(state, running=True)
        assert decision.action is SequenceAction.NONE
        assert decision.status_text == "Beep detected (4) of 5 to stop."

        assert counter.register_beep(state, running=True).action is SequenceAction.STOP
        assert counter.register_beep(state, running=True).action is SequenceAction.STOP

    def test_reset(self, counter):
        """Test resetting the beep count."""
        state = DetectionState(beep_count=4)
        counter.reset(state)

        assert state.beep_count == 0
