"""
Logger class for the logging system.

Extends the standard Python logger with structured extra fields, a TRACE
level, caller-location tracking and "view" loggers that share the root
logger's handlers.

Every supervisor and unit logger is one of these; unit processes hand their
records to the supervisor through pipepair.log.mp.
"""

import collections
import logging
import sys
import threading
from typing import Any

from .config import LogConfig
from .constants import LogConstants


class Logger(logging.Logger):
    """
    Enhanced logger with custom record creation.

    Extends the standard Python logger with:
    - Structured extra fields attached to records as ``__pipepair__extra``
    - Location tracking configuration
    - Custom trace method
    - Handler delegation for derived "view" loggers
    """

    def __init__(
        self,
        name: str,
        config: LogConfig | None = None,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
    ):
        """
        Initialize the enhanced logger.

        Args:
            name: Logger name
            config: Logger configuration. Will create default LogConfig if None.
            extra: Pre-populated extra fields to include in all log records
        """
        # Handle case where Logger is instantiated by standard logging system
        if config is None:
            config = LogConfig.from_params("info", location=0, micros=False)

        # Handle disabled logging (level = False)
        if config.level is False:
            super().__init__(name, logging.CRITICAL + 1)
            self._logging_disabled = True
        else:
            super().__init__(name, config.level)
            self._logging_disabled = False

        self._config = config
        self._extra = extra or {}
        self._root_logger: Logger | None = None  # Set for derived "view" loggers
        # Thread-safe storage for caller traces, keyed by thread ID
        self._pending_traces: dict[int, tuple[list[str], list[int]]] = {}

    @property
    def config(self) -> LogConfig:
        """Get logger configuration."""
        return self._config

    @property
    def location(self) -> int:
        """Get location display depth."""
        return self._config.location

    @property
    def disabled(self) -> bool:
        """Check if logging is disabled."""
        return self._logging_disabled

    @disabled.setter
    def disabled(self, value: bool) -> None:
        """Set the disabled state."""
        self._logging_disabled = value

    def get_level(self) -> int | bool:
        """Get configured log level."""
        return self._config.level

    def _merge_extra(
        self, extra: dict[str, Any] | collections.OrderedDict | None
    ) -> dict[str, Any] | collections.OrderedDict:
        """Merge pre-populated extra fields with per-call extra fields."""
        # Use OrderedDict if either source is OrderedDict to preserve key ordering
        merged: dict[str, Any] | collections.OrderedDict
        if isinstance(self._extra, collections.OrderedDict) or isinstance(
            extra, collections.OrderedDict
        ):
            merged = collections.OrderedDict(self._extra)
        else:
            merged = self._extra.copy()
        if extra:
            merged.update(extra)
        return merged

    def makeRecord(  # type: ignore[override]
        self,
        name: str,
        level: int,
        fn: str,
        lno: int,
        msg: str,
        args: tuple,
        exc_info: Any | None,
        func: str | None = None,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
        sinfo: str | None = None,
    ) -> logging.LogRecord:
        """Create log record, keeping the extra fields together for formatters."""
        merged_extra = self._merge_extra(extra)
        # Extra keys are not copied onto the record itself; they live in
        # __pipepair__extra so they cannot collide with LogRecord attributes.
        record = super().makeRecord(
            name, level, fn, lno, msg, args, exc_info, func=func, sinfo=sinfo
        )
        # Use setattr to avoid Python name mangling with __ prefix
        setattr(record, "__pipepair__extra", merged_extra)

        pending_trace = self._pending_traces.pop(threading.get_ident(), None)
        if pending_trace is not None:
            pathnames, linenos = pending_trace
            setattr(record, "__pipepair__pathnames", pathnames)
            setattr(record, "__pipepair__linenos", linenos)
        return record

    def trace(self, msg: str, *args: Any, **kwargs: Any) -> None:
        """
        Log a TRACE level message.

        Args:
            msg: Log message
            *args: Message format arguments
            **kwargs: Additional keyword arguments including 'extra' for structured data
        """
        if self._logging_disabled:
            return
        trace_level = LogConstants.CUSTOM_LEVELS["TRACE"]
        if self.isEnabledFor(trace_level):
            self._log(trace_level, msg, args, **kwargs)

    def _log(self, level: int, msg: str, args: tuple, **kwargs: Any) -> None:  # type: ignore[override]
        """Log unless disabled, reporting format errors to stderr."""
        if self._logging_disabled:
            return

        try:
            super()._log(level, msg, args, **kwargs)
        except (TypeError, ValueError) as e:
            # Log to stderr so format bugs don't go unnoticed
            msg_preview = msg[:80] + "..." if len(msg) > 80 else msg
            sys.stderr.write(
                f"LOG_FORMAT_ERROR [{self.name}]: {e.__class__.__name__}: {e} "
                f"| msg={msg_preview!r} args={args!r}\n"
            )

    def callHandlers(self, record: logging.LogRecord) -> None:
        """
        Pass a record to all relevant handlers.

        Derived "view" loggers (those with _root_logger set) delegate to the
        root logger's handlers instead of using their own.
        """
        if self._root_logger is not None:
            for handler in self._root_logger.handlers:
                if record.levelno >= handler.level:
                    handler.handle(record)
        else:
            super().callHandlers(record)

    def findCaller(
        self, stack_info: bool = False, stacklevel: int = 1
    ) -> tuple[str, int, str, str | None]:
        """
        Find the calling frame, recording up to ``location`` callers.

        Returns standard (pathname, lineno, funcname, sinfo). The full trace
        is stored in _pending_traces and attached to the record in makeRecord.
        """
        from types import FrameType

        f: FrameType | None = logging.currentframe()
        while f is not None and f.f_code is not None:
            fname = f.f_code.co_filename
            if fname == logging.__file__ or fname == __file__:
                f = f.f_back
            else:
                break

        if f is None:
            return "(unknown file)", 0, "(unknown function)", None

        files, linenos = self._trace_callers(f)
        self._pending_traces[threading.get_ident()] = (files, linenos)
        return files[0], linenos[0], f.f_code.co_name, None

    def _trace_callers(self, f: Any) -> tuple[list[str], list[int]]:
        """Trace multiple callers for location display."""
        linenos = [f.f_lineno]
        files = [f.f_code.co_filename]

        while len(files) < self.location:
            f = f.f_back
            if f is None or f.f_code is None:
                break

            name = f.f_code.co_filename
            if "site-packages" in name or "/usr/lib" in name:
                continue

            linenos.append(f.f_lineno)
            files.append(name)

        return files, linenos
