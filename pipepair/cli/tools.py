"""
Command tools: one class per CLI command.

A tool declares its arguments, reads its settings from the loaded Config
(command-line values win), runs the supervisor and renders the report.
"""

from __future__ import annotations

import argparse
import dataclasses
from dataclasses import dataclass, field
from typing import Any

from ..config import NO_PACING, BasicSettings, Config, PairsSettings
from ..exceptions import PipePairError
from ..log import Logger, LoggerFactory
from ..supervisor import MultiPair, RunMode, RunReport, RunSupervisor, SinglePair
from ..ui import Console, render_report


@dataclass
class ToolConfig:
    """Configuration for a tool."""

    name: str
    aliases: list[str] = field(default_factory=list)
    help_text: str = ""
    description: str = ""


class Tool:
    """
    Base class for commands.

    Subclasses provide _create_config(), add_args() and build_mode().
    """

    def __init__(self, config: ToolConfig | None = None):
        self.config = config or self._create_config()
        self._logger: Logger | None = None

    def _create_config(self) -> ToolConfig:
        """Create default configuration. Override in subclasses."""
        raise NotImplementedError(f"{self.__class__.__name__} must define its ToolConfig")

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def lg(self) -> Logger:
        if self._logger is None:
            raise PipePairError("tool used before setup", tool=self.name)
        return self._logger

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        """
        Add arguments to the parser.

        Override this method in subclasses to add tool-specific arguments.
        """
        parser.add_argument(
            "--no-pacing",
            action="store_true",
            help="do not sleep between values",
        )

    def setup(self, parent_lg: Logger) -> None:
        """Derive the tool's logger from the application logger."""
        self._logger = LoggerFactory.derive(parent_lg, self.name)

    def build_mode(self, config: Config, args: argparse.Namespace) -> RunMode:
        raise NotImplementedError

    def run(self, config: Config, args: argparse.Namespace, console: Console) -> int:
        """
        Run the command.

        Returns:
            int: 0 when every pair ran and every unit exited 0, else 1

        Raises:
            ConfigError: If settings are invalid
        """
        mode = self.build_mode(config, args)
        self.lg.debug("running", extra={"mode": mode})
        report = RunSupervisor(self.lg).run(mode)
        render_report(console, report)
        return self.exit_code(report)

    @staticmethod
    def exit_code(report: RunReport) -> int:
        return 0 if report.ok else 1

    @staticmethod
    def _override(settings: Any, args: argparse.Namespace, *names: str) -> Any:
        """Replace settings fields with command-line values that were given."""
        changes: dict[str, Any] = {
            name: getattr(args, name) for name in names if getattr(args, name) is not None
        }
        if getattr(args, "no_pacing", False):
            changes["pacing"] = NO_PACING
        return dataclasses.replace(settings, **changes) if changes else settings


class BasicTool(Tool):
    """Single pair: one producer sends [lo, hi) to one consumer."""

    def _create_config(self) -> ToolConfig:
        return ToolConfig(
            name="basic",
            help_text="run a single producer-consumer pair",
            description="Send the integers in [lo, hi) from a producer to a consumer "
            "that sums them.",
        )

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--lo", type=int, help="first value sent")
        parser.add_argument("--hi", type=int, help="one past the last value sent")
        super().add_args(parser)

    def build_mode(self, config: Config, args: argparse.Namespace) -> RunMode:
        settings = self._override(BasicSettings.from_config(config), args, "lo", "hi")
        return SinglePair(lo=settings.lo, hi=settings.hi, pacing=settings.pacing)


class PairsTool(Tool):
    """Several concurrent pairs on consecutive, disjoint ranges."""

    def _create_config(self) -> ToolConfig:
        return ToolConfig(
            name="pairs",
            aliases=["multi"],
            help_text="run several producer-consumer pairs concurrently",
            description="Pair i sends [start + i*span, start + (i+1)*span) and all "
            "pairs run at the same time.",
        )

    def add_args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--count", type=int, help="number of pairs")
        parser.add_argument("--span", type=int, help="values per pair")
        parser.add_argument("--start", type=int, help="first value of the first pair")
        super().add_args(parser)

    def build_mode(self, config: Config, args: argparse.Namespace) -> RunMode:
        settings = self._override(
            PairsSettings.from_config(config), args, "count", "span", "start"
        )
        return MultiPair(
            count=settings.count,
            span=settings.span,
            start=settings.start,
            pacing=settings.pacing,
        )
