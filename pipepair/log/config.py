"""
Configuration classes for the logging system.

LogConfig is immutable so the same instance can be shared between the root
logger, its formatter and the configuration handed to child processes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class LogConfig:
    """
    Immutable configuration for root loggers.

    Derived "view" loggers only carry a level and read everything else from
    the root's formatter.
    """

    level: int | bool = logging.INFO  # int for normal levels, False to disable logging
    location: int = 0
    micros: bool = False
    colors: bool = True
    location_color: str | None = None  # ANSI color code for code locations

    @staticmethod
    def _resolve_level(level: str | int | bool) -> int | bool:
        """Resolve level parameter to int or False."""
        from .constants import LogConstants
        from .exceptions import InvalidLogLevelError

        if isinstance(level, bool):
            return False if not level else logging.INFO
        elif isinstance(level, str):
            if level.isnumeric():
                return int(level)
            elif level.lower() in LogConstants.LEVEL_NAMES:
                return LogConstants.LEVEL_NAMES[level.lower()]
            else:
                raise InvalidLogLevelError(level)
        return level

    @staticmethod
    def _resolve_location_color(location_color: Any) -> Any:
        """Resolve location color name to ANSI code if needed."""
        if not isinstance(location_color, str):
            return location_color

        from .colors import ColorManager

        resolved_color = ColorManager.from_name(location_color)
        if resolved_color is not None:
            return resolved_color
        # Keep original string (might be direct ANSI code)
        return location_color

    @classmethod
    def from_params(
        cls,
        level: str | int | bool,
        location: bool | int = 0,
        micros: bool = False,
        colors: bool = True,
        location_color: str | None = None,
    ) -> LogConfig:
        """
        Create LogConfig from individual parameters.

        Args:
            level: Log level (string name, numeric value, or False to disable logging)
            location: Location display level (bool or int)
            micros: Whether to show microsecond precision
            colors: Whether to enable colored output
            location_color: Color name or ANSI code for code locations

        Returns:
            LogConfig instance
        """
        resolved_location = (
            1 if location is True else (0 if location is False else int(location))
        )
        return cls(
            level=cls._resolve_level(level),
            location=resolved_location,
            micros=micros,
            colors=colors,
            location_color=cls._resolve_location_color(location_color),
        )

    @classmethod
    def from_config(cls, config_dict: dict, section: str = "logging") -> LogConfig:
        """
        Create LogConfig from a configuration dictionary.

        Args:
            config_dict: Configuration dictionary (e.g., Config.to_dict())
            section: Dot-separated section to read (default: "logging")

        Returns:
            LogConfig instance

        Example:
            config = Config("etc/pipepair.yaml")
            log_config = LogConfig.from_config(config.to_dict())
        """
        current: Any = config_dict
        for part in section.split("."):
            if isinstance(current, dict) and part in current:
                current = current[part]
            else:
                current = {}
                break

        level = current.get("level", "info")
        # Handle string "false" to disable logging
        if level == "false":
            level = False

        return cls.from_params(
            level=level,
            location=current.get("location", 0),
            micros=current.get("microseconds", current.get("micros", False)),
            colors=current.get("colors", True),
            location_color=current.get("location_color", None),
        )
