"""Beep detection pipeline: peak extraction, tone matching, edges and counting."""

from .peak import extract_peak
from .matcher import is_tone_active, matches_target
from .edge import BeepEdgeDetector, LevelTriggeredDetector, DebounceDetector, create_edge_detector
from .counter import SequenceCounter, SequenceDecision, SequenceAction

__all__ = [
    "extract_peak",
    "is_tone_active",
    "matches_target",
    "BeepEdgeDetector",
    "LevelTriggeredDetector",
    "DebounceDetector",
    "create_edge_detector",
    "SequenceCounter",
    "SequenceDecision",
    "SequenceAction",
]
