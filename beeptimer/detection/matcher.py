from ..models.audio import PeakResult
from ..models.detection import DetectionConfig


def matches_target(frequency_hz: float, config: DetectionConfig) -> bool:
    """True when the frequency lies strictly inside the band of any target."""
    return any(
        abs(frequency_hz - target) < config.freq_tolerance
        for target in config.target_frequencies
    )


def is_tone_active(peak: PeakResult, config: DetectionConfig) -> bool:
    """True when the peak is loud enough and sits on one of the target tones."""
    return peak.amplitude > config.sensitivity and matches_target(peak.frequency_hz, config)
