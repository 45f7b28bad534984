"""
Errors raised while configuring or formatting pipepair logs.

They derive from PipePairError so the CLI reports a bad ``--log-level`` or
``logging.level`` value the same way as any other configuration problem.
"""

from typing import Any

from ..exceptions import PipePairError
from .constants import LogConstants


class LogError(PipePairError):
    """Base exception for logging errors."""

    pass


class InvalidLogLevelError(LogError):
    """A level that is neither a known name, a number nor False."""

    def __init__(self, level: Any) -> None:
        self.level = level
        super().__init__(
            f"invalid log level '{level}'",
            expected=", ".join(LogConstants.LEVEL_NAMES),
        )


class FormatterError(LogError):
    """A structured field the formatter cannot render."""

    pass
