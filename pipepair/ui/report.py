"""
Rendering of a RunReport as a rich table.
"""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table

from ..supervisor import RunReport
from .console import Console


def report_table(report: RunReport) -> Table:
    """One row per reaped unit, in reap order."""
    table = Table(title="Units")
    table.add_column("Unit", style="key")
    table.add_column("PID", justify="right")
    table.add_column("Status")
    for unit in report.units:
        style = "success" if unit.status.success else "error"
        table.add_row(unit.name, str(unit.pid), f"[{style}]{unit.status}[/{style}]")
    return table


def render_report(console: Console, report: RunReport) -> None:
    """Print the unit table, skipped pairs and the overall outcome."""
    if report.units:
        console.print(report_table(report))

    for failure in report.failures:
        console.print_warning(
            f"{failure.descriptor.name} [{failure.descriptor.lo}, {failure.descriptor.hi}) "
            f"skipped: {escape(str(failure.error))}"
        )

    if report.ok:
        console.print_success(f"{len(report.pairs)} pair(s) completed")
    else:
        failed = sum(1 for u in report.units if not u.status.success)
        console.print_error(
            f"{len(report.failures)} pair(s) skipped, {failed} unit(s) failed"
        )
