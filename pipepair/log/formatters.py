"""
Log formatters for the logging system.

Renders records as a timestamped message followed by bracketed structured
fields, the process id and logger name, and optionally the caller location:

    [12:34:56,789] [I] sent               [value:3] [4242] [/pair-1/producer]
"""

import collections
import logging
import os
import re
from typing import Any

from .colors import ColorManager
from .config import LogConfig
from .constants import LogConstants
from .exceptions import FormatterError

# Pattern to match ANSI escape sequences
_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _visual_len(text: str) -> int:
    """Calculate visual width of text, excluding ANSI escape codes."""
    if "\x1b" not in text:
        return len(text)
    return len(_ANSI_PATTERN.sub("", text))


def _ordered_keys(extra: dict[str, Any]) -> list[str]:
    """Insertion order for OrderedDict extras, sorted otherwise."""
    if isinstance(extra, collections.OrderedDict):
        return list(extra.keys())
    return sorted(extra.keys())


def _escape(text: str) -> str:
    """Escape % so field values survive %-style formatting."""
    return text.replace("%", "%%")


class PreFormatter(logging.Formatter):
    """Standard formatter with optional microsecond suffix on timestamps."""

    def __init__(self, fmt: str, micros: bool) -> None:
        self._micros = micros
        super().__init__(fmt)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        """Format timestamp with optional microsecond precision."""
        s = super().formatTime(record)
        if self._micros:
            micros = int((record.created % 1) * 1000000) % 1000
            s += f".{micros:03d}"
        return s


class LogFormatter(logging.Formatter):
    """
    Log formatter with colored output and structured field formatting.

    Provides console output with:
    - ANSI color codes per log level (when colors are enabled)
    - Structured fields rendered as ``[key:value]``
    - Exception rendering for ``extra={"exception": e}``
    - Process id and logger name
    - Optional file location display
    """

    def __init__(self, config: LogConfig):
        """
        Initialize the log formatter.

        Args:
            config: Logger configuration
        """
        super().__init__()
        self._config = config
        self._pre_formatter = PreFormatter(LogConstants.DEFAULT_FORMAT, config.micros)

    @property
    def config(self) -> LogConfig:
        """Get formatter configuration."""
        return self._config

    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record.

        Args:
            record: Log record to format

        Returns:
            Formatted log message
        """
        width = self._calculate_width(record)
        if self._config.colors:
            fmt = self._format_colored(record, width)
        else:
            fmt = self._format_plain(record, width)

        self._pre_formatter._fmt = fmt
        self._pre_formatter._style._fmt = fmt
        return self._pre_formatter.format(record)

    def _calculate_width(self, record: logging.LogRecord) -> int:
        """Display width of "[timestamp] [L] message"."""
        timestamp_len = 16 if self._config.micros else 12
        return 1 + timestamp_len + 4 + 1 + 2 + _visual_len(record.getMessage())

    def _padding(self, width: int) -> str:
        rule = (
            LogConstants.MICRO_RULE_WIDTH
            if self._config.micros
            else LogConstants.DEFAULT_RULE_WIDTH
        )
        return " " * max(1, rule - width)

    def _format_plain(self, record: logging.LogRecord, width: int) -> str:
        """Format log record without colors."""
        fmt = LogConstants.DEFAULT_FORMAT + self._padding(width)

        extra = getattr(record, "__pipepair__extra", None)
        parts = []
        exception = None
        if extra:
            for key in _ordered_keys(extra):
                value = extra[key]
                if key == "exception" and isinstance(value, BaseException):
                    exception = value
                    parts.append(f"[{key}:{value.__class__.__name__}]")
                else:
                    parts.append(_escape(f"[{key}:{value}]"))
        if parts:
            fmt += " ".join(parts) + " "

        fmt += "[%(process)d] [%(name)s]"
        fmt += self._render_location(record, color=False)
        if exception is not None:
            fmt += "\n" + _escape(self._render_exception(exception))
        return fmt

    def _format_colored(self, record: logging.LogRecord, width: int) -> str:
        """Format log record with colors and styling."""
        col = ColorManager.get_color_for_level(record.levelno) or ColorManager.DEFAULT
        bold = ColorManager.create_bold_color(col)
        col += "m"

        fmt = self._field("%(asctime)s", col, "")
        fmt += " " + self._field("%(levelname).1s", col, bold)
        fmt += " " + bold + "%(message)s" + self._padding(width)

        extra = getattr(record, "__pipepair__extra", None)
        exception = None
        if extra:
            fields = []
            for key in _ordered_keys(extra):
                value = extra[key]
                if key == "exception" and isinstance(value, BaseException):
                    exception = value
                    continue
                fields.append(self._field(_escape(str(value)), col, bold, key))
            if fields:
                fmt += " ".join(fields) + " "

        gray = ColorManager.create_gray_level(9)
        fmt += self._field("%(process)d", gray + "m", gray + ";1m")
        fmt += " " + self._field("%(name)s", gray + "m", gray + ";1m")
        fmt += self._render_location(record, color=True)
        if exception is not None:
            fmt += "\n" + _escape(self._render_exception(exception))
        return col + fmt + ColorManager.RESET

    @staticmethod
    def _field(value: str, col: str, bold: str, name: str = "") -> str:
        """Render one ``name[value]`` field with colors."""
        head = ColorManager.RESET + col + name + "["
        tail = ColorManager.RESET + col + "]"
        return head + bold + value + tail

    def _render_location(self, record: logging.LogRecord, color: bool) -> str:
        """Render file location(s) when location display is enabled."""
        if not self._config.location:
            return ""

        pathnames = getattr(record, "__pipepair__pathnames", None) or [record.pathname]
        linenos = getattr(record, "__pipepair__linenos", None) or [record.lineno]

        out = " "
        if color:
            location_color = (
                self._config.location_color or ColorManager.create_gray_level(6)
            )
            out += ColorManager.RESET + location_color + "m"
        for pathname, lineno in zip(pathnames, linenos):
            out += f"[./{os.path.relpath(pathname, os.getcwd())}:{lineno}]"
        return _escape(out)

    @staticmethod
    def _render_exception(e: BaseException) -> str:
        """Render an exception passed through extra fields."""
        if not isinstance(e, BaseException):
            raise FormatterError("exception field is not an exception", type=type(e).__name__)
        return f"{e.__class__.__name__}: {e}"
