"""Emulator configuration.

Settings come from the defaults below, then an optional YAML file, then
command-line overrides. The presentation colors live here and are handed to
the frontend when it is created.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import yaml

from .constants import FRAMES_PER_SECOND, INSTRUCTIONS_PER_SECOND
from .errors import ConfigError

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class EmulatorConfig:
    instructions_per_second: int = INSTRUCTIONS_PER_SECOND
    frames_per_second: int = FRAMES_PER_SECOND
    scale: int = 10
    on_color: Tuple[int, int, int] = (0, 255, 0)   # green pixels for on
    off_color: Tuple[int, int, int] = (0, 0, 0)    # black pixels for off
    keymap_path: Optional[str] = None
    show_stats: bool = False
    log_level: str = "INFO"

    def validate(self):
        for name in ("instructions_per_second", "frames_per_second", "scale"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigError(f"{name} must be a positive integer, got {value!r}")
        if self.instructions_per_second < self.frames_per_second:
            raise ConfigError("instructions_per_second must be at least frames_per_second")
        self.on_color = _color("on_color", self.on_color)
        self.off_color = _color("off_color", self.off_color)
        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return self

    def merged(self, **overrides):
        """Return a copy with every override that is not None applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes).validate()


def _color(name, value):
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ConfigError(f"{name} must be an [r, g, b] triple, got {value!r}")
    for c in value:
        if isinstance(c, bool) or not isinstance(c, int) or not 0 <= c <= 255:
            raise ConfigError(f"{name} components must be integers in 0-255, got {value!r}")
    return tuple(value)


def config_from_dict(data):
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("configuration must be a mapping")
    known = {f.name for f in dataclasses.fields(EmulatorConfig)}
    unknown = sorted(map(str, set(data) - known))
    if unknown:
        raise ConfigError(f"unknown configuration keys: {', '.join(unknown)}")
    return EmulatorConfig(**data).validate()


def load_config(path=None):
    if path is None:
        return EmulatorConfig().validate()
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"could not read configuration {path}: {e.strerror or e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"could not parse configuration {path}: {e}") from e
    logger.debug("Loaded configuration from %s", path)
    return config_from_dict(data)
