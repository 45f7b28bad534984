"""
Color management for the logging system.

Centralizes the ANSI color codes used for log levels and record metadata.
"""

import logging

from .constants import LogConstants


class ColorManager:
    """Centralized ANSI color code management."""

    # Basic ANSI color escape sequences (without the trailing "m")
    BLACK = "\x1b[30"
    RED = "\x1b[31"
    GREEN = "\x1b[32"
    YELLOW = "\x1b[33"
    BLUE = "\x1b[34"
    MAGENTA = "\x1b[35"
    CYAN = "\x1b[36"
    WHITE = "\x1b[37"
    DEFAULT = "\x1b[38"

    RESET = LogConstants.RESET

    COLORS: dict[int, str] = {
        logging.DEBUG: "\x1b[38;5;32",
        logging.INFO: CYAN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: MAGENTA,
    }

    @staticmethod
    def get_color_for_level(level: int) -> str | None:
        """
        Get appropriate color for log level.

        Args:
            level: Log level number

        Returns:
            Color escape sequence or None if not found
        """
        return ColorManager.COLORS.get(level)

    @staticmethod
    def create_gray_level(level: int) -> str:
        """
        Create gray color escape sequence, clamping level to 0-23.
        """
        level = max(0, min(level, LogConstants.GRAY_MAX_LEVELS - 1))
        return f"\x1b[38;5;{LogConstants.GRAY_BASE + level}"

    @staticmethod
    def create_color_256(color_code: int) -> str:
        """Create 256-color escape sequence."""
        return f"\x1b[38;5;{color_code}"

    @staticmethod
    def create_bold_color(base_color: str) -> str:
        """Create bold version of a color."""
        return f"{base_color};1m"

    @staticmethod
    def from_name(color_name: str) -> str | None:
        """
        Convert color name to ANSI escape sequence.

        Supports the basic color names and "gray-N"/"grey-N" for N in 0-23.
        Case insensitive. Returns None for unknown names.

        Examples:
            >>> ColorManager.from_name("cyan")
            "\\x1b[36"
            >>> ColorManager.from_name("gray-12")
            "\\x1b[38;5;244"
        """
        if not color_name:
            return None

        name = color_name.lower().strip()
        color_map = {
            "black": ColorManager.BLACK,
            "red": ColorManager.RED,
            "green": ColorManager.GREEN,
            "yellow": ColorManager.YELLOW,
            "blue": ColorManager.BLUE,
            "magenta": ColorManager.MAGENTA,
            "cyan": ColorManager.CYAN,
            "white": ColorManager.WHITE,
            "default": ColorManager.DEFAULT,
        }
        if name in color_map:
            return color_map[name]

        if name.startswith("gray-") or name.startswith("grey-"):
            try:
                level = int(name.split("-", 1)[1])
            except ValueError:
                return None
            if 0 <= level < LogConstants.GRAY_MAX_LEVELS:
                return ColorManager.create_gray_level(level)
        return None

    @staticmethod
    def add_custom_level_colors() -> None:
        """Add colors for custom log levels after they are defined."""
        ColorManager.COLORS[LogConstants.CUSTOM_LEVELS["TRACE"]] = (
            ColorManager.create_color_256(24)
        )
