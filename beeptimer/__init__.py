"""BeepTimer - hands-free session timer driven by acoustic beep codes."""

__version__ = "0.1.0"
