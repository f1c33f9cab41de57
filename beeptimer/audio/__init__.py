"""Audio capture and spectrum analysis module.

`AudioCapture` and `MicrophoneSource` need PyAudio and are imported from
their own modules.
"""

from .errors import AcquisitionFailure
from .analyser import SpectrumAnalyser

__all__ = [
    'AcquisitionFailure',
    'SpectrumAnalyser',
]
