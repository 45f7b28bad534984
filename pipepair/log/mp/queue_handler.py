"""
Multiprocessing-safe queue handler.

Runs inside execution units. Records are flattened into a picklable form and
put on the shared log queue, where the supervisor's LogQueueListener picks
them up.
"""

from __future__ import annotations

import logging
import sys
import traceback
from typing import TYPE_CHECKING, Any

from ..config import LogConfig
from ..logger import Logger

if TYPE_CHECKING:
    from multiprocessing import Queue as QueueType


class MPQueueHandler(logging.Handler):
    """
    Multiprocessing-safe queue handler.

    Unlike Python's standard QueueHandler, this handler properly handles:
    - Exception tracebacks (formatted to string before pickling)
    - Exception objects passed as ``extra={"exception": e}``
    - Format arguments that may not be picklable
    """

    def __init__(self, queue: QueueType[logging.LogRecord | None]) -> None:
        """
        Initialize the queue handler.

        Args:
            queue: multiprocessing.Queue to send records to
        """
        super().__init__()
        self.queue = queue

    def emit(self, record: logging.LogRecord) -> None:
        """
        Emit a record by preparing it and putting it on the queue.

        Args:
            record: Log record to emit
        """
        try:
            prepared = self._prepare(record)
            self.queue.put_nowait(prepared)
        except Exception:
            self.handleError(record)

    def _prepare(self, record: logging.LogRecord) -> logging.LogRecord:
        """
        Prepare a record for cross-process pickling.

        1. Formats exception tracebacks to strings (tracebacks aren't picklable)
        2. Replaces exception objects in ``__pipepair__extra`` with strings
        3. Formats message arguments into the message string

        Args:
            record: Log record to prepare

        Returns:
            Prepared log record safe for pickling
        """
        if record.exc_info:
            record.exc_text = self._format_exc_info(record.exc_info)
            record.exc_info = None

        self._prepare_extra_fields(record)

        try:
            record.msg = record.getMessage()
        except Exception:
            pass  # keep original msg; args are dropped below either way
        record.args = None

        return record

    def _prepare_extra_fields(self, record: logging.LogRecord) -> None:
        """Convert an exception object in ``__pipepair__extra`` to text."""
        extra = getattr(record, "__pipepair__extra", None)
        if not extra or "exception" not in extra:
            return

        exc = extra["exception"]
        if not isinstance(exc, BaseException):
            return

        # Copy to avoid modifying the dict shared with the emitting logger
        extra = extra.copy()
        extra["exception_formatted"] = self._format_exception_in_context(exc)
        del extra["exception"]
        setattr(record, "__pipepair__extra", extra)

    def _format_exc_info(
        self, exc_info: tuple[type, BaseException, Any] | tuple[None, None, None]
    ) -> str:
        """Format exc_info tuple to string."""
        if exc_info[0] is None:
            return ""
        return "".join(traceback.format_exception(*exc_info))

    def _format_exception_in_context(self, exc: BaseException) -> str:
        """
        Format an exception, with traceback if it is the one being handled.
        """
        current_exc_info = sys.exc_info()
        if current_exc_info[1] is exc:
            return "".join(traceback.format_exception(*current_exc_info))
        return f"{exc.__class__.__name__}: {exc}"


def create_queue_logger(
    queue: QueueType[logging.LogRecord | None],
    name: str,
    level: int | bool = logging.INFO,
    extra: dict[str, Any] | None = None,
) -> Logger:
    """
    Build a logger for an execution unit that ships records to the supervisor.

    The logger is not registered with the logging manager: a forked unit
    inherits the supervisor's loggers and must not write to their handlers.

    Args:
        queue: Shared log queue drained by a LogQueueListener
        name: Logger name (e.g. "/pair-1/producer")
        level: Log level, or False to disable logging
        extra: Fields attached to every record from this unit

    Returns:
        Logger with a single MPQueueHandler
    """
    lg = Logger(name, LogConfig(level=level), extra)
    lg.addHandler(MPQueueHandler(queue))
    lg.propagate = False
    return lg
