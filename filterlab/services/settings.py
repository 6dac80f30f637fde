"""
Settings management for filterlab.

Holds user preferences (default filter parameters, log level, the last filter
and pipeline that were run) in a ConfigParser. Settings stay in memory unless
a settings file is given.
"""

import logging
from configparser import ConfigParser, Error as ConfigError
from pathlib import Path
from typing import Any, Dict, Optional, Union

from ..logger import get_logger, parse_level
from ..processing import ProcessingPipeline

logger = get_logger("settings")


class Settings:
    """Manages application settings via an optional settings.ini."""

    # Section and keys
    SECTION = "preferences"
    KEY_LAST_FILTER = "last_filter"
    KEY_LOG_LEVEL = "log_level"
    KEY_GAUSSIAN_RADIUS = "gaussian_radius"
    KEY_GAUSSIAN_SIGMA = "gaussian_sigma"
    KEY_MOTION_BLUR_SIZE = "motion_blur_size"
    KEY_GLASS_SEED = "glass_seed"
    KEY_LAST_PIPELINE = "last_pipeline"

    DEFAULTS = {
        KEY_LAST_FILTER: "",
        KEY_LOG_LEVEL: "info",
        KEY_GAUSSIAN_RADIUS: "3",
        KEY_GAUSSIAN_SIGMA: "2.0",
        KEY_MOTION_BLUR_SIZE: "5",
        KEY_GLASS_SEED: "-1",
        KEY_LAST_PIPELINE: "",
    }

    def __init__(self, settings_file: Optional[Union[str, Path]] = None):
        """Initialize settings from file (if given and present) or defaults."""
        self.settings_file = Path(settings_file) if settings_file else None
        self.config = ConfigParser()
        self._load()

    def _load(self) -> None:
        """Load settings from file or create defaults."""
        self.config.read_dict({self.SECTION: self.DEFAULTS})
        if self.settings_file is not None:
            if self.settings_file.exists():
                self.config.read(self.settings_file)
            else:
                self._save()

    def _save(self) -> None:
        """Save settings to file. No-op for in-memory settings."""
        if self.settings_file is None:
            return
        self.settings_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self.settings_file, "w") as f:
            self.config.write(f)

    def _set(self, key: str, value: Any) -> None:
        if not self.config.has_section(self.SECTION):
            self.config.add_section(self.SECTION)
        self.config.set(self.SECTION, key, str(value))
        self._save()

    def _get_int(self, key: str) -> int:
        try:
            return self.config.getint(self.SECTION, key)
        except (ConfigError, ValueError):
            return int(self.DEFAULTS[key])

    def _get_float(self, key: str) -> float:
        try:
            return self.config.getfloat(self.SECTION, key)
        except (ConfigError, ValueError):
            return float(self.DEFAULTS[key])

    def get_last_filter(self) -> Optional[str]:
        """Get last used filter id."""
        try:
            val = self.config.get(self.SECTION, self.KEY_LAST_FILTER)
            return val if val else None
        except ConfigError:
            return None

    def set_last_filter(self, filter_id: str) -> None:
        """Set and save last used filter id."""
        self._set(self.KEY_LAST_FILTER, filter_id)

    def get_last_pipeline(self) -> Optional[ProcessingPipeline]:
        """Get the last pipeline that was run, or None if none is stored or it is unreadable."""
        try:
            text = self.config.get(self.SECTION, self.KEY_LAST_PIPELINE)
        except ConfigError:
            return None
        if not text:
            return None
        try:
            return ProcessingPipeline.from_json(text)
        except ValueError as e:
            logger.warning("Ignoring stored pipeline: %s", e)
            return None

    def set_last_pipeline(self, pipeline: ProcessingPipeline) -> None:
        """Set and save the last pipeline as JSON."""
        self._set(self.KEY_LAST_PIPELINE, pipeline.to_json())

    def get_log_level(self) -> int:
        """Get log level as a logging constant (default: INFO)."""
        try:
            return parse_level(self.config.get(self.SECTION, self.KEY_LOG_LEVEL))
        except ConfigError:
            return logging.INFO

    def set_log_level(self, level: str) -> None:
        """Set and save log level name ("debug", "info", ...)."""
        self._set(self.KEY_LOG_LEVEL, level.lower())

    def get_gaussian_radius(self) -> int:
        return self._get_int(self.KEY_GAUSSIAN_RADIUS)

    def set_gaussian_radius(self, radius: int) -> None:
        self._set(self.KEY_GAUSSIAN_RADIUS, radius)

    def get_gaussian_sigma(self) -> float:
        return self._get_float(self.KEY_GAUSSIAN_SIGMA)

    def set_gaussian_sigma(self, sigma: float) -> None:
        self._set(self.KEY_GAUSSIAN_SIGMA, sigma)

    def get_motion_blur_size(self) -> int:
        return self._get_int(self.KEY_MOTION_BLUR_SIZE)

    def set_motion_blur_size(self, size: int) -> None:
        self._set(self.KEY_MOTION_BLUR_SIZE, size)

    def get_glass_seed(self) -> int:
        """Get glass filter seed (-1 = unseeded)."""
        return self._get_int(self.KEY_GLASS_SEED)

    def set_glass_seed(self, seed: int) -> None:
        self._set(self.KEY_GLASS_SEED, seed)

    def filter_overrides(self, filter_id: str) -> Dict[str, Any]:
        """Parameter values to apply to a freshly created filter."""
        if filter_id == "gaussian":
            return {"radius": self.get_gaussian_radius(), "sigma": self.get_gaussian_sigma()}
        if filter_id == "motion_blur":
            return {"size": self.get_motion_blur_size()}
        if filter_id == "glass":
            return {"seed": self.get_glass_seed()}
        return {}
