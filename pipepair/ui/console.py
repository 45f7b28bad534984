"""
Console wrapper around rich with terminal auto-detection.

Color is disabled when NO_COLOR is set, forced when FORCE_COLOR is set, and
otherwise follows whether stdout is a TTY.
"""

from __future__ import annotations

import os
import sys
from typing import Any

from rich.console import Console as RichConsole
from rich.theme import Theme


def _is_interactive() -> bool:
    """Check if we're in an interactive terminal."""
    return sys.stdout.isatty()


def _should_use_color() -> bool:
    """Determine if color output should be used."""
    # Respect NO_COLOR environment variable (https://no-color.org/)
    if os.environ.get("NO_COLOR"):
        return False

    # Respect FORCE_COLOR for CI environments that support color
    if os.environ.get("FORCE_COLOR"):
        return True

    return _is_interactive()


PIPEPAIR_THEME = {
    "info": "cyan",
    "warning": "yellow",
    "error": "red bold",
    "success": "green",
    "muted": "dim",
    "key": "bold blue",
}


class Console:
    """
    Console for the run summary.

    Example:
        console = Console()
        console.print_success("all pairs completed")
        console.print_error("pair-2: channel creation failed")
    """

    def __init__(
        self,
        *,
        force_terminal: bool | None = None,
        no_color: bool | None = None,
        quiet: bool = False,
        file: Any = None,
    ):
        """
        Initialize the console.

        Args:
            force_terminal: Force terminal mode (True/False) or auto-detect (None)
            no_color: Disable color output (True/False) or auto-detect (None)
            quiet: Suppress everything except warnings and errors
            file: Output file (default: sys.stdout)
        """
        if no_color is None:
            no_color = not _should_use_color()
        if force_terminal is None:
            force_terminal = _is_interactive()

        self._quiet = quiet
        self._no_color = no_color
        self._rich_console = RichConsole(
            force_terminal=force_terminal,
            no_color=no_color,
            theme=Theme(PIPEPAIR_THEME),
            file=file or sys.stdout,
            highlight=False,
        )

    @property
    def quiet(self) -> bool:
        return self._quiet

    @property
    def no_color(self) -> bool:
        return self._no_color

    def print(self, *args: Any, **kwargs: Any) -> None:
        """Print objects (strings with rich markup, tables) unless quiet."""
        if self._quiet:
            return
        self._rich_console.print(*args, **kwargs)

    def print_success(self, message: str) -> None:
        self.print(f"[success]{message}[/success]")

    def print_warning(self, message: str) -> None:
        """Print a warning message, even when quiet."""
        self._rich_console.print(f"[warning]Warning:[/warning] {message}")

    def print_error(self, message: str) -> None:
        """Print an error message, even when quiet."""
        self._rich_console.print(f"[error]Error:[/error] {message}")
