"""
Spawn and reap independent execution units.

A unit is an OS process created with the fork start method, so channel
descriptors created by the supervisor are inherited. Ownership is made
explicit at spawn time: handles listed in ``release`` are closed in the child
before the entry function runs, and the handles passed as arguments belong to
the child from then on.

The entry function is called as ``entry(lg, *args)`` with a logger that ships
records to the supervisor through the log queue. Its return value (an int or
None) becomes the unit's exit code; an exception escaping it exits with 1.
"""

from __future__ import annotations

import logging
import multiprocessing
import signal
import sys
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .channel import _Endpoint
from .exceptions import ReapError, SpawnError
from .log import LogConfig, Logger
from .log.mp import create_queue_logger

_CONTEXT = multiprocessing.get_context("fork")

# Reported in place of an exit code when a unit was killed by a signal
ABNORMAL_EXIT = -1


def new_log_queue() -> Any:
    """Create a log queue units can inherit."""
    return _CONTEXT.Queue()


@dataclass(frozen=True)
class TerminationStatus:
    """
    Outcome of one unit: a normal exit code, or the signal that killed it.
    """

    exit_code: int | None = None
    signal: int | None = None

    @property
    def normal(self) -> bool:
        """True when the unit exited on its own (with any code)."""
        return self.signal is None

    @property
    def success(self) -> bool:
        return self.normal and self.exit_code == 0

    @property
    def code(self) -> int:
        """Exit code, or ABNORMAL_EXIT for a unit killed by a signal."""
        if self.normal and self.exit_code is not None:
            return self.exit_code
        return ABNORMAL_EXIT

    @classmethod
    def from_exitcode(cls, exitcode: int) -> TerminationStatus:
        """Translate multiprocessing's exitcode (negative means signal)."""
        if exitcode < 0:
            return cls(signal=-exitcode)
        return cls(exit_code=exitcode)

    def __str__(self) -> str:
        if self.normal:
            return f"exited with status {self.exit_code}"
        try:
            name = signal.Signals(self.signal).name  # type: ignore[arg-type]
        except ValueError:
            name = str(self.signal)
        return f"terminated by {name}"


class Unit:
    """
    Handle of a spawned unit, consumed exactly once by wait().
    """

    def __init__(self, name: str, process: Any) -> None:
        self.name = name
        self.pid: int = process.pid
        self._process = process
        self._status: TerminationStatus | None = None

    @property
    def reaped(self) -> bool:
        return self._status is not None

    def __repr__(self) -> str:
        return f"<Unit {self.name} pid={self.pid}>"


def _unit_main(
    entry: Callable[..., int | None],
    args: tuple,
    name: str,
    release: list[_Endpoint],
    log_queue: Any,
    log_level: int | bool,
) -> None:
    """Runs in the child: drop unowned handles, set up logging, run entry."""
    for handle in release:
        handle.close()

    if log_queue is not None:
        lg = create_queue_logger(log_queue, name, log_level)
    else:
        lg = Logger(name, LogConfig(level=False))

    try:
        code = entry(lg, *args)
    except Exception as e:
        lg.error("unit failed", extra={"exception": e})
        code = 1
    sys.exit(code or 0)


def spawn(
    entry: Callable[..., int | None],
    *args: Any,
    name: str,
    release: Iterable[_Endpoint] = (),
    log_queue: Any = None,
    log_level: int | bool = logging.INFO,
) -> Unit:
    """
    Start a new unit running ``entry(lg, *args)``.

    Args:
        entry: Unit entry point
        *args: State captured by the unit (channel ends, ranges, pacing)
        name: Unit name, also its logger name
        release: Handles the child must close before running entry
        log_queue: Queue from new_log_queue(), or None to disable unit logging
        log_level: Level of the unit's logger

    Returns:
        Handle for wait()

    Raises:
        SpawnError: If the process cannot be created
    """
    process = _CONTEXT.Process(
        target=_unit_main,
        args=(entry, args, name, list(release), log_queue, log_level),
        name=name,
    )
    try:
        process.start()
    except OSError as e:
        raise SpawnError("cannot start unit", unit=name, error=e.strerror) from e
    return Unit(name, process)


def wait(unit: Unit) -> TerminationStatus:
    """
    Block until the unit terminates and return how it ended.

    Raises:
        ReapError: If the unit was already reaped
    """
    if unit.reaped:
        raise ReapError("unit already reaped", unit=unit.name, pid=unit.pid)

    unit._process.join()
    status = TerminationStatus.from_exitcode(unit._process.exitcode)
    unit._status = status
    unit._process.close()
    return status
