"""
Command-line interface.

Commands:
    basic   Run a single producer-consumer pair
    pairs   Run several pairs concurrently on consecutive ranges
"""

from .cli import build_parser, main
from .tools import BasicTool, PairsTool, Tool, ToolConfig

__all__ = ["build_parser", "main", "Tool", "ToolConfig", "BasicTool", "PairsTool"]
