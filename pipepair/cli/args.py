"""
Argument parsing helpers.
"""

import argparse


class DefaultsHelpFormatter(argparse.HelpFormatter):
    """
    Help formatter that appends default values to help text.
    """

    def _get_help_string(self, action: argparse.Action) -> str:
        help_text = action.help or ""
        # Only show default if it's not suppressed and not None
        if action.default is not argparse.SUPPRESS and action.default is not None:
            return help_text + f" (default: {action.default})"
        return help_text
