"""
Logging with colored console output and structured fields.

This module extends Python's standard logging with:
- Custom TRACE log level for detailed debugging
- Colored console output with ANSI escape sequences
- Microsecond precision timestamps
- File location tracking in log messages
- Structured logging with extra fields
- Derived "view" loggers sharing the root's handlers
- Queue-based transport for records from child processes (see .mp)

Log Level Control:
- Use standard levels: debug, info, warning, error, critical
- Use custom level: trace
- Disable logging completely: False or "false"
"""

import logging

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants
from .exceptions import FormatterError, InvalidLogLevelError, LogError
from .factory import LoggerFactory
from .formatters import LogFormatter
from .logger import Logger

# Define custom log level for more granular debugging
logging.TRACE = LogConstants.CUSTOM_LEVELS["TRACE"]  # type: ignore[attr-defined]
logging.addLevelName(logging.TRACE, "TRACE")  # type: ignore[attr-defined]

LogConstants.LEVEL_NAMES["trace"] = logging.TRACE  # type: ignore[attr-defined]

ColorManager.add_custom_level_colors()


def resolve_level(s: str | int | bool) -> int | bool:
    """
    Resolve log level from string, numeric value, or boolean.

    Args:
        s: Log level as string name, numeric value, or False to disable logging

    Returns:
        Numeric log level or False to disable logging

    Raises:
        InvalidLogLevelError: If the log level is invalid
    """
    if isinstance(s, bool):
        return s

    if str(s).isnumeric():
        return int(s)

    if isinstance(s, str) and s.lower() in LogConstants.LEVEL_NAMES:
        return LogConstants.LEVEL_NAMES[s.lower()]

    raise InvalidLogLevelError(s)


__all__ = [
    "ColorManager",
    "LogConfig",
    "LogConstants",
    "LogError",
    "FormatterError",
    "InvalidLogLevelError",
    "LoggerFactory",
    "LogFormatter",
    "Logger",
    "resolve_level",
]
