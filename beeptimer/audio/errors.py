"""Audio acquisition errors."""


class AcquisitionFailure(RuntimeError):
    """The microphone could not be opened (permission denied or no device)."""
