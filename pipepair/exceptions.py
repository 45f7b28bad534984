"""
Exception hierarchy for pipepair.

Every failure the supervisors can observe maps to one class here. Failures are
local: channel and spawn errors abort one pair, send failures abort one unit,
and receive faults are folded into end-of-stream by the consumer.
"""

from typing import Any


class PipePairError(Exception):
    """
    Base exception for all pipepair errors.

    Carries a human-readable message plus arbitrary keyword context, which is
    appended to the string form so log lines show what failed and where.

    Example:
        try:
            read_end, write_end = create_channel()
        except PipePairError as e:
            lg.error("pair setup failed", extra={"exception": e})
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(PipePairError):
    """
    Configuration-related errors.

    Examples:
        - Config file not found or not valid YAML
        - Negative span or pacing delay
        - Pair count below one
    """

    pass


class ChannelCreationError(PipePairError):
    """
    Raised when a channel cannot be allocated.

    Usually descriptor exhaustion. Fatal to the pair being set up: the pair is
    skipped and no units are spawned for it.
    """

    pass


class SpawnError(PipePairError):
    """
    Raised when an execution unit cannot be started.

    Fatal to the pair being set up. Units of that pair that were already
    started before the failure are listed in ``spawned`` so the caller can
    still reap them.
    """

    def __init__(
        self, message: str, spawned: list[Any] | None = None, **context: Any
    ) -> None:
        super().__init__(message, **context)
        self.spawned = list(spawned or [])


class SendFailure(PipePairError):
    """
    Raised when a message cannot be written as one whole word.

    Covers short writes, broken pipes and values that do not fit the wire
    width. Fatal to the producing unit.
    """

    pass


class ReceiveFault(PipePairError):
    """
    Transport-level read error or a partial word on the read end.

    Never propagated out of ReadEnd.receive(): it is recorded on the read end
    and reported to the caller as end of stream.
    """

    pass


class ReapError(PipePairError):
    """Raised when a unit is waited on more than once."""

    pass
