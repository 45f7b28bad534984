"""
Queue listener for receiving log records from execution units.

Runs in the supervisor process, receiving records from the units' queue
handlers and dispatching them to the supervisor logger's handlers.
"""

from __future__ import annotations

import logging
import queue
import sys
import threading
import traceback
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from multiprocessing import Queue as QueueType

    from ..logger import Logger


class LogQueueListener:
    """
    Receives log records from units and dispatches them to handlers.

    Runs a background thread that reads from a multiprocessing.Queue and
    passes records to the specified logger's handlers (the root's handlers
    for view loggers).

    Usage:
        log_queue = multiprocessing.get_context("fork").Queue()
        with LogQueueListener(log_queue, lg):
            unit = spawn(run_producer, write_end, 1, 6, log_queue=log_queue, ...)
            wait(unit)

    Every record put on the queue before stop() is dispatched before the
    thread exits: stop() enqueues a sentinel behind them and the thread
    drains up to it.
    """

    def __init__(
        self,
        log_queue: QueueType[logging.LogRecord | None],
        logger: Logger,
        respect_handler_level: bool = True,
    ) -> None:
        """
        Initialize the queue listener.

        Args:
            log_queue: multiprocessing.Queue to receive records from
            logger: Logger whose handlers will process the records
            respect_handler_level: If True, only dispatch to handlers whose
                                   level is <= record level (default True)
        """
        self._queue = log_queue
        self._logger = logger
        self._respect_handler_level = respect_handler_level
        self._thread: threading.Thread | None = None

    def __enter__(self) -> LogQueueListener:
        self.start()
        return self

    def __exit__(self, *args: object) -> None:
        self.stop()

    def start(self) -> None:
        """
        Start the listener thread.

        The thread runs as a daemon, so it won't prevent process exit.
        """
        if self._thread is not None and self._thread.is_alive():
            return  # Already running

        self._thread = threading.Thread(
            target=self._listen, name="log-queue-listener", daemon=True
        )
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        """
        Stop the listener thread after draining queued records.

        Args:
            timeout: Maximum seconds to wait for the drain, None to wait until done
        """
        if self._thread is None:
            return

        self._queue.put(None)
        self._thread.join(timeout)
        self._thread = None

    def _listen(self) -> None:
        """Main listener loop, runs until the sentinel is received."""
        while True:
            try:
                record = self._queue.get(timeout=0.5)
            except queue.Empty:
                continue
            except (EOFError, OSError):
                break  # queue closed underneath us

            if record is None:
                break

            try:
                self._handle_record(record)
            except Exception:
                # Don't let listener thread die from unexpected errors
                sys.stderr.write("LogQueueListener: error handling record:\n")
                traceback.print_exc(file=sys.stderr)

    def _handle_record(self, record: logging.LogRecord) -> None:
        """
        Dispatch a record to the logger's handlers.

        The record was already level-filtered in the unit, so the logger's own
        level is not applied again.
        """
        for handler in self._get_handlers():
            if self._respect_handler_level and record.levelno < handler.level:
                continue
            try:
                handler.handle(record)
            except Exception:
                handler.handleError(record)

    def _get_handlers(self) -> list[logging.Handler]:
        """Handlers of the root logger for views, else the logger's own."""
        root = getattr(self._logger, "_root_logger", None)
        if root is not None:
            return list(root.handlers)
        return list(self._logger.handlers)

    @property
    def is_alive(self) -> bool:
        """Check if the listener thread is running."""
        return self._thread is not None and self._thread.is_alive()
