"""Simple YAML configuration loader for BeepTimer."""

import copy
import os
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from ..models.audio import AnalyserSettings
from ..models.detection import DetectionConfig, EdgePolicy, StopBehavior

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    "detection": {
        "target_frequencies": [2179, 6537],
        "freq_tolerance": 150,
        "sensitivity": 75,
        "beep_debounce_ms": 150,
        "min_beep_duration_ms": 100,
        "max_pause_between_beeps_ms": 400,
        "start_beep_count": 2,
        "stop_beep_count": 5,
        "cooldown_period_ms": 5000,
        "tick_interval_ms": 1000,
        "edge_policy": "level",
        "stop_behavior": "terminal",
    },
    "audio": {
        "sample_rate": 48000,
        "chunk_size": 1024,
        "channels": 1,
        "input_device": None,
        "fft_size": 2048,
        "smoothing_time_constant": 0.8,
        "min_decibels": -100,
        "max_decibels": -30,
        "frame_rate": 60,
    },
    "logging": {
        "level": "INFO",
        "file_path": "logs/beeptimer.log",
        "console_output": True,
    },
}


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class BeepTimerConfig:
    """BeepTimer configuration loader."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file. If None, built-in defaults are used.
        """
        if config_path is None:
            self.config_file = None
            self.config = copy.deepcopy(DEFAULT_CONFIG)
            logger.info("No configuration file given, using defaults")
            return

        self.config_file = Path(config_path)
        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file over the defaults."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        if not loaded:
            raise ValueError("Configuration file is empty")
        if not isinstance(loaded, dict):
            raise ValueError("Configuration file must contain a mapping")

        config = _merge(DEFAULT_CONFIG, loaded)
        for name in DEFAULT_CONFIG:
            if not isinstance(config[name], dict):
                raise ValueError(f"Configuration section '{name}' must be a mapping")
        self._resolve_paths(config)
        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve the log file path relative to the config file location."""
        config_dir = self.config_file.parent
        log_path = config.get('logging', {}).get('file_path')
        if log_path and not os.path.isabs(log_path):
            config['logging']['file_path'] = str(config_dir / log_path)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'detection.sensitivity').

        Args:
            key_path: Dot-separated key path
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            key_path: Dot-separated path to config value (e.g., 'detection.edge_policy')
            value: Value to set
        """
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.get(name, {})
        if not isinstance(section, dict):
            raise ValueError(f"Configuration section '{name}' must be a mapping")
        return section

    def get_detection_config(self) -> DetectionConfig:
        """Build the immutable detection configuration.

        Raises:
            ValueError: If a detection setting is missing its valid range or choice
        """
        section = self._section('detection')
        targets = section.get('target_frequencies')
        if isinstance(targets, (int, float)):
            targets = [targets]
        try:
            return DetectionConfig(
                target_frequencies=tuple(float(t) for t in targets or ()),
                freq_tolerance=float(section['freq_tolerance']),
                sensitivity=float(section['sensitivity']),
                beep_debounce_ms=float(section['beep_debounce_ms']),
                min_beep_duration_ms=float(section['min_beep_duration_ms']),
                max_pause_between_beeps_ms=float(section['max_pause_between_beeps_ms']),
                start_beep_count=int(section['start_beep_count']),
                stop_beep_count=int(section['stop_beep_count']),
                cooldown_period_ms=float(section['cooldown_period_ms']),
                tick_interval_ms=float(section['tick_interval_ms']),
                edge_policy=EdgePolicy(section['edge_policy']),
                stop_behavior=StopBehavior(section['stop_behavior']),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid detection configuration: {e}")

    def get_analyser_settings(self) -> AnalyserSettings:
        """Build the audio capture and analyser settings."""
        section = self._section('audio')
        try:
            return AnalyserSettings(
                sample_rate=int(section['sample_rate']),
                chunk_size=int(section['chunk_size']),
                channels=int(section['channels']),
                input_device=section.get('input_device'),
                fft_size=int(section['fft_size']),
                smoothing_time_constant=float(section['smoothing_time_constant']),
                min_decibels=float(section['min_decibels']),
                max_decibels=float(section['max_decibels']),
                frame_rate=float(section['frame_rate']),
            )
        except (KeyError, TypeError) as e:
            raise ValueError(f"Invalid audio configuration: {e}")

    def get_log_file_path(self) -> str:
        """Get log file path."""
        log_path = self.get('logging.file_path', 'logs/beeptimer.log')
        return str(Path(log_path).absolute())
