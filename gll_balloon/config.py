"""
Engine configuration.

Defaults mirror what the balloon and polar blocks use when the page does
not override them. Every field can be set from the environment:

    GLL_BALLOON_DB_RANGE=50
    GLL_BALLOON_SCALE=1.5
    GLL_BALLOON_POLAR_STEP=5
    GLL_BALLOON_PLACEHOLDER=-100
    GLL_BALLOON_CACHE_SIZE=256
    GLL_BALLOON_LOG_LEVEL=debug
    GLL_BALLOON_JSON_LOGS=0
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

from gll_balloon.errors import InvalidBuildOptions
from gll_balloon.monitoring.logging import LogLevel

ENV_PREFIX = "GLL_BALLOON_"

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class BalloonConfig:
    """gll_balloon engine configuration."""

    db_range: float = 40.0
    scale: float = 1.0
    polar_step_deg: float = 10.0
    placeholder_level: float = -100.0
    cache_size: int = 128
    log_level: str = "info"
    json_logs: bool = True

    def __post_init__(self):
        if not self.db_range > 0:
            raise InvalidBuildOptions("db_range", self.db_range, "db_range must be positive")
        if not self.scale > 0:
            raise InvalidBuildOptions("scale", self.scale, "scale must be positive")
        if not self.polar_step_deg > 0:
            raise InvalidBuildOptions(
                "polar_step_deg", self.polar_step_deg, "polar_step_deg must be positive",
            )
        if self.cache_size < 1:
            raise InvalidBuildOptions("cache_size", self.cache_size, "cache_size must be >= 1")
        self.log_level = self.log_level.lower()
        if self.log_level not in {level.value for level in LogLevel}:
            raise InvalidBuildOptions(
                "log_level",
                self.log_level,
                f"log_level must be one of: {', '.join(level.value for level in LogLevel)}",
            )

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "BalloonConfig":
        """Build a config from GLL_BALLOON_* variables, defaults elsewhere."""
        env = os.environ if environ is None else environ
        kwargs = {}

        def read(name: str):
            return env.get(ENV_PREFIX + name)

        if (value := read("DB_RANGE")) is not None:
            kwargs["db_range"] = float(value)
        if (value := read("SCALE")) is not None:
            kwargs["scale"] = float(value)
        if (value := read("POLAR_STEP")) is not None:
            kwargs["polar_step_deg"] = float(value)
        if (value := read("PLACEHOLDER")) is not None:
            kwargs["placeholder_level"] = float(value)
        if (value := read("CACHE_SIZE")) is not None:
            kwargs["cache_size"] = int(value)
        if (value := read("LOG_LEVEL")) is not None:
            kwargs["log_level"] = value
        if (value := read("JSON_LOGS")) is not None:
            kwargs["json_logs"] = value.strip().lower() in _TRUE_VALUES

        return cls(**kwargs)
