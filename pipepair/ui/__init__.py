"""
Terminal output for run summaries.

Example:
    from pipepair.ui import Console, render_report

    console = Console()
    render_report(console, report)
"""

from .console import Console
from .report import render_report, report_table

__all__ = ["Console", "render_report", "report_table"]
