import numpy as np

from ..models.audio import SpectralFrame, PeakResult


def extract_peak(frame: SpectralFrame) -> PeakResult:
    """Return the strongest bin of a frame, ties resolved to the lowest bin."""
    amplitudes = np.asarray(frame.amplitudes)
    if amplitudes.size == 0:
        return PeakResult(frequency_hz=0.0, amplitude=0.0, bin_index=0)

    # argmax reports the first occurrence of the maximum
    peak_bin = int(np.argmax(amplitudes))
    return PeakResult(
        frequency_hz=frame.bin_to_hz(peak_bin),
        amplitude=float(amplitudes[peak_bin]),
        bin_index=peak_bin,
    )
