"""Unit tests for cli/display.py.

Tests for the console reporter and run result display.
"""

import io
from unittest.mock import patch

import pytest
from gpmctl.cli.display import ConsoleReporter, console_confirm, create_results_table, print_run_summary
from gpmctl.core.theme import get_theme
from gpmctl.models.outcome import RunResult, failed, skipped_already_installed, skipped_by_user, succeeded
from rich.console import Console


@pytest.fixture
def buffer() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def out(buffer: io.StringIO) -> Console:
    """Themed console writing into a buffer."""
    return Console(file=buffer, theme=get_theme(), width=120, color_system=None)


def _render(table: object) -> str:
    capture = Console(file=io.StringIO(), theme=get_theme(), width=120, color_system=None)
    capture.print(table)
    return capture.file.getvalue()  # type: ignore[attr-defined]


class TestConsoleReporter:
    """Tests for ConsoleReporter."""

    def test_report_prints_markup(self, out: Console, buffer: io.StringIO) -> None:
        """Theme markup is rendered, not printed literally."""
        ConsoleReporter(out).report("Preparing to install [package]foo[/]")

        assert buffer.getvalue() == "Preparing to install foo\n"

    def test_progress_redraws_in_place(self, out: Console, buffer: io.StringIO) -> None:
        """Progress uses carriage returns until it completes."""
        reporter = ConsoleReporter(out)

        reporter.progress(0)
        reporter.progress(50)
        reporter.progress(100)

        text = buffer.getvalue()
        assert text.count("Downloading package") == 3
        assert text.endswith("100%\n")

    def test_progress_ignores_non_increasing(self, out: Console, buffer: io.StringIO) -> None:
        """Repeated or lower percentages are not redrawn."""
        reporter = ConsoleReporter(out)

        reporter.progress(40)
        reporter.progress(40)
        reporter.progress(10)

        assert buffer.getvalue().count("Downloading package") == 1

    def test_report_ends_unfinished_progress(self, out: Console, buffer: io.StringIO) -> None:
        """A status line after partial progress starts on a new line."""
        reporter = ConsoleReporter(out)

        reporter.progress(30)
        reporter.report("error")

        text = buffer.getvalue()
        assert "30%" in text
        assert text.endswith("\nerror\n")


class TestConsoleConfirm:
    """Tests for console_confirm."""

    def test_defaults_to_no(self) -> None:
        """The prompt defaults to no."""
        with patch("gpmctl.cli.display.typer.confirm", return_value=False) as mock_confirm:
            assert console_confirm("Proceed?") is False

        mock_confirm.assert_called_once_with("Proceed?", default=False)


class TestResultsTable:
    """Tests for create_results_table."""

    def test_rows_per_outcome(self) -> None:
        """Each outcome becomes a row with its status label and reason."""
        result = RunResult(
            outcomes=[
                succeeded("foo"),
                skipped_by_user("bar", "Declined to overwrite installed package"),
                skipped_already_installed("baz", "Installed as a dependency"),
                failed("qux", "Symlink source not found"),
            ]
        )

        table = create_results_table(result)
        text = _render(table)

        assert table.row_count == 4
        for label in ("OK", "SKIP", "DONE", "FAIL"):
            assert label in text
        assert "Symlink source not found" in text


class TestRunSummary:
    """Tests for print_run_summary."""

    def test_success_summary(self) -> None:
        """A clean run prints installed and skipped counts."""
        result = RunResult(outcomes=[succeeded("foo"), skipped_by_user("bar", "no")])

        with patch("gpmctl.cli.display.print_success") as mock_success:
            print_run_summary(result)

        mock_success.assert_called_once_with("1 package(s) installed, 1 skipped.")

    def test_aborted_summary(self) -> None:
        """An aborted run prints the fatal error."""
        result = RunResult().abort("Installation aborted")

        with patch("gpmctl.cli.display.print_error") as mock_error:
            print_run_summary(result)

        mock_error.assert_called_once_with("Installation aborted")
