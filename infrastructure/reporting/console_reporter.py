# infrastructure/reporting/console_reporter.py
from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.markup import escape

from domain.results import RunStepResult, RunSummary

LABEL_WIDTH = 12


def _count_line(label: str, passed: int, failed: int, total: int) -> str:
    line = f"{label.ljust(LABEL_WIDTH)} [green]{passed} passed[/green]"
    if failed > 0:
        line += f", [red]{failed} failed[/red]"
    line += f", {total} total"
    return f"[bold]{line}[/bold]"


def summary_lines(summary: RunSummary) -> list:
    """The three Requests / Tests / Assertions lines, as rich markup."""
    return [
        _count_line("Requests:", summary.passed_requests, summary.failed_requests, summary.total_requests),
        _count_line("Tests:", summary.passed_tests, summary.failed_tests, summary.total_tests),
        _count_line("Assertions:", summary.passed_assertions, summary.failed_assertions, summary.total_assertions),
    ]


def _format_ms(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


class ConsoleReporter:
    """Human readable run output. Always printed, independent of the log level."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console or Console(highlight=False, emoji=False, soft_wrap=True)

    def run_started(self, mode: str) -> None:
        self._console.print(f"[yellow]{escape(mode)}[/yellow]\n")

    def request_finished(self, result: RunStepResult) -> None:
        location = escape(result.location)
        if result.error and result.response.status is None:
            self._console.print(f"{location} [red]({escape(result.error)})[/red] - {_format_ms(result.response.response_time)} ms")
        else:
            status = f"{result.response.status} {result.response.status_text or ''}".strip()
            colour = "green" if result.response.status is not None and result.response.status < 400 else "red"
            self._console.print(
                f"{location} [{colour}]({escape(status)})[/{colour}] - {_format_ms(result.response.response_time)} ms"
            )
            if result.error:
                self._console.print(f"   [red]{escape(result.error)}[/red]")

        for test in result.test_results:
            if test.passed:
                self._console.print(f"   [green]✓ {escape(test.description)}[/green]")
            else:
                self._console.print(f"   [red]✕ {escape(test.description)}[/red]")
                if test.error:
                    self._console.print(f"      [red]{escape(test.error)}[/red]")

        for assertion in result.assertion_results:
            text = escape(f"assert: {assertion.lhs_expr}: {assertion.rhs_expr}")
            if assertion.passed:
                self._console.print(f"   [green]✓ {text}[/green]")
            else:
                self._console.print(f"   [red]✕ {text}[/red]")
                if assertion.error:
                    self._console.print(f"      [red]{escape(assertion.error)}[/red]")

    def summary(self, summary: RunSummary) -> None:
        lines = summary_lines(summary)
        self._console.print("\n" + lines[0])
        for line in lines[1:]:
            self._console.print(line)
        self._console.print(f"[dim]Ran all requests - {_format_ms(summary.total_time)} ms[/dim]")

    def wrote_results(self, path: str) -> None:
        self._console.print(f"[dim]Wrote results to {escape(path)}[/dim]")

    def notice(self, message: str) -> None:
        self._console.print(f"[red]{escape(message)}[/red]")

    def error(self, message: str) -> None:
        self._console.print(f"[red]ERROR: {escape(message)}[/red]")
