"""
Factory for creating and configuring loggers.

Root loggers own a console handler; derived loggers are lightweight "views"
that share the root's handlers, so a handler added to the root (for example
a test capture handler) sees records from every derived logger.
"""

import collections
import logging
import sys
from typing import Any, TextIO, cast

from .config import LogConfig
from .formatters import LogFormatter
from .logger import Logger


class LoggerFactory:
    """Factory for creating and configuring loggers."""

    @staticmethod
    def create_root(
        config: LogConfig, logger_class: type[Logger] = Logger, stream: TextIO | None = None
    ) -> Logger:
        """
        Create a root logger with the specified configuration.

        Example:
            >>> config = LogConfig.from_params(level="info", colors=False)
            >>> lg = LoggerFactory.create_root(config)
            >>> lg.info("supervisor started")
            [12:34:56,789] [I] supervisor started [1234] [/]
        """
        return LoggerFactory.create("/", config, logger_class, stream=stream)

    @staticmethod
    def create(
        name: str,
        config: LogConfig,
        logger_class: type[Logger] = Logger,
        extra: dict[str, Any] | collections.OrderedDict | None = None,
        stream: TextIO | None = None,
    ) -> Logger:
        """
        Create a logger with its own console handler.

        An existing logger with the same name is returned unchanged.

        Args:
            name: Logger name
            config: Logger configuration
            logger_class: Logger class to use
            extra: Pre-populated extra fields to include in all log records
            stream: Output stream for the console handler (default: stdout)

        Returns:
            Configured logger instance
        """
        existing = LoggerFactory._check_existing_logger(name)
        if existing:
            return existing

        lg = logger_class(name, config, extra)
        handler = logging.StreamHandler(stream or sys.stdout)
        if config.level is not False:
            handler.setLevel(config.level)
        handler.setFormatter(LogFormatter(config))
        lg.addHandler(handler)
        lg.propagate = False
        lg.parent = logging.root

        # Register in loggerDict so later lookups by name find it
        logging.root.manager.loggerDict[name] = lg

        lg.trace(
            "created logger",
            extra={"level": logging.getLevelName(lg.level), "location": config.location},
        )
        return lg

    @staticmethod
    def _check_existing_logger(name: str) -> Logger | None:
        """Return the registered logger if it is one of ours."""
        existing = logging.root.manager.loggerDict.get(name)
        if isinstance(existing, Logger):
            return cast(Logger, existing)
        return None

    @staticmethod
    def derive(parent: Logger, tags: str | list[str]) -> Logger:
        """
        Derive a "view" logger that delegates to root's handlers.

        Examples:
            >>> root = LoggerFactory.create_root(config)  # name: "/"
            >>> LoggerFactory.derive(root, "supervisor").name
            '/supervisor'
            >>> LoggerFactory.derive(root, ["pair-1", "producer"]).name
            '/pair-1/producer'

        Args:
            parent: Parent logger instance
            tags: Single tag string OR list of tag strings to form hierarchy

        Returns:
            Derived logger instance with the parent's level
        """
        if isinstance(tags, str):
            tags = [tags]

        prefix = parent.name if parent.name == "/" else parent.name + "/"
        name = prefix + "/".join(tags)

        existing = LoggerFactory._check_existing_logger(name)
        if existing:
            return existing

        root = parent._root_logger if parent._root_logger else parent
        lg = parent.__class__(name, LogConfig(level=parent.get_level(), location=root.location))
        lg._root_logger = root
        lg.parent = parent
        lg.propagate = False
        if parent.disabled:
            lg.disabled = True

        logging.root.manager.loggerDict[name] = lg
        lg.trace("derived logger", extra={"root": root.name})
        return lg
