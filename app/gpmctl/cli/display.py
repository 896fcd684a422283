"""Console reporting, prompting and result display.

Provides the Rich-backed Reporter and confirmation prompt injected into
the installation engine, and the tables used to summarize a run.
"""

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from gpmctl.models.outcome import OutcomeStatus, RunResult
from gpmctl.utils.formatting import console, print_error, print_success

_STATUS_LABELS: dict[OutcomeStatus, str] = {
    OutcomeStatus.SUCCEEDED: "[success]OK[/success]",
    OutcomeStatus.SKIPPED_BY_USER: "[warning]SKIP[/warning]",
    OutcomeStatus.SKIPPED_ALREADY_INSTALLED: "[muted]DONE[/muted]",
    OutcomeStatus.FAILED: "[error]FAIL[/error]",
}


class ConsoleReporter:
    """Writes status lines to a Rich console.

    Download progress is drawn on a single line that is redrawn in place
    until it reaches 100% or another status line is reported.
    """

    def __init__(self, out: Console | None = None) -> None:
        self._console = out or console
        self._last_percent: int | None = None

    def report(self, line: str) -> None:
        """Print one status line."""
        self._end_progress()
        self._console.print(line, highlight=False)

    def progress(self, percent: int) -> None:
        """Redraw the download progress line."""
        if self._last_percent is not None and percent <= self._last_percent:
            return
        self._last_percent = percent
        end = "\n" if percent >= 100 else "\r"
        self._console.print(f"  |- Downloading package... {percent:>5}%", end=end, highlight=False)

    def _end_progress(self) -> None:
        if self._last_percent is not None and self._last_percent < 100:
            self._console.print()
        self._last_percent = None


def console_confirm(question: str) -> bool:
    """Ask a yes/no question on the terminal, defaulting to no."""
    return typer.confirm(question, default=False)


def create_results_table(result: RunResult) -> Table:
    """Create a Rich table displaying per-package outcomes.

    Args:
        result: Run result to display.

    Returns:
        Rich Table with Status, Package and Message columns.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=6, justify="center")
    table.add_column("Package", no_wrap=True)
    table.add_column("Message")

    for outcome in result.outcomes:
        table.add_row(
            _STATUS_LABELS[outcome.status],
            outcome.package,
            f"[muted]{escape(outcome.reason or '')}[/muted]",
        )

    return table


def print_run_summary(result: RunResult) -> None:
    """Print a one-line summary of a run."""
    if result.aborted:
        print_error(result.error or "Installation aborted")
        return

    installed = len(result.installed)
    skipped = len(result.skipped)
    failed = len(result.failed)

    if failed == 0:
        print_success(f"{installed} package(s) installed, {skipped} skipped.")
    else:
        console.print(
            f"\n[success]{installed} installed[/success], [warning]{skipped} skipped[/warning], "
            f"[error]{failed} failed[/error]"
        )
