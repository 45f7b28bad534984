"""
Command-line entry point.

    pipepair [--etc-dir DIR] [--config FILE] [--log-level L] [-q] basic [--lo N] [--hi N]
    pipepair [...] pairs [--count N] [--span N] [--start N]
"""

from __future__ import annotations

import argparse
import dataclasses
import sys

from ..config import Config, find_config_file
from ..exceptions import PipePairError
from ..log import LogConfig, Logger, LoggerFactory, resolve_level
from ..ui import Console
from .args import DefaultsHelpFormatter
from .tools import BasicTool, PairsTool, Tool


def default_tools() -> list[Tool]:
    return [BasicTool(), PairsTool()]


def build_parser(tools: list[Tool]) -> argparse.ArgumentParser:
    """Create the main parser with one subcommand per tool."""
    parser = argparse.ArgumentParser(
        prog="pipepair",
        description="Producer-consumer pairs connected by one-way pipes.",
        formatter_class=DefaultsHelpFormatter,
    )
    parser.add_argument("--etc-dir", help="directory holding pipepair.yaml")
    parser.add_argument("--config", help="configuration file (overrides --etc-dir)")
    parser.add_argument(
        "--log-level",
        help="log level: trace, debug, info, warning, error, critical or false",
    )
    parser.add_argument(
        "-q", "--quiet", action="store_true", help="print only warnings and errors"
    )

    subs = parser.add_subparsers(dest="command", metavar="command")
    subs.required = True
    for tool in tools:
        sub = subs.add_parser(
            tool.name,
            aliases=tool.config.aliases,
            help=tool.config.help_text,
            description=tool.config.description or None,
            formatter_class=DefaultsHelpFormatter,
        )
        tool.add_args(sub)
        sub.set_defaults(tool=tool)
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """
    Load the config named on the command line, or search for etc/pipepair.yaml.

    Raises:
        ConfigError: If the file cannot be read or parsed
    """
    fname = args.config or find_config_file(args.etc_dir)
    return Config(fname)


def create_logger(config: Config, args: argparse.Namespace) -> Logger:
    """Root logger from the logging section, with --log-level taking precedence."""
    log_config = LogConfig.from_config(config.to_dict())
    if args.log_level is not None:
        log_config = dataclasses.replace(log_config, level=resolve_level(args.log_level))
    return LoggerFactory.create_root(log_config)


def main(argv: list[str] | None = None) -> int:
    """
    Run the command line.

    Returns:
        Exit code: 0 when the run succeeded, 1 otherwise, 2 for usage errors
    """
    tools = default_tools()
    parser = build_parser(tools)
    args = parser.parse_args(argv)
    console = Console(quiet=args.quiet)

    try:
        config = load_config(args)
        lg = create_logger(config, args)
        tool: Tool = args.tool
        tool.setup(lg)
        return tool.run(config, args, console)
    except PipePairError as e:
        console.print_error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
