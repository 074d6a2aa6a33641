"""Console reporter for testbot output using Rich."""

from __future__ import annotations

import sys
from datetime import timedelta
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape

from testbot.models import FixtureStatus, TestStatus
from testbot.reports.base import Reporter
from testbot.reports.stats import get_fixture_stats, summarize
from testbot.version import __version__


if TYPE_CHECKING:
    from testbot.models import Fixture, FixtureResult, TestResult


_STATUS_COLOR: dict[TestStatus, str] = {
    TestStatus.SUCCESS: "green",
    TestStatus.FAILURE: "red",
    TestStatus.ERROR: "yellow",
    TestStatus.RUNNING: "dim",
}

_FIXTURE_MESSAGES: dict[FixtureStatus, str] = {
    FixtureStatus.SETUP_FAILED: "Fixture setup failed and could therefore not be tested: ",
    FixtureStatus.TEARDOWN_FAILED: "Fixture teardown failed: ",
    FixtureStatus.IGNORED: "Fixture was ignored, reason: ",
}


def _seconds(value: timedelta) -> str:
    return f"{value.total_seconds():.3f}s"


class ConsoleReporter(Reporter):
    """Reporter that prints progress and totals to the console.

    Verbosity ``-1`` keeps only non-success notices and the summary; ``1``
    and above also lists each successful test.
    """

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        self.console = console or Console(file=sys.__stdout__)
        self.verbosity = verbosity

    async def on_run_start(self, fixtures: list[Fixture]) -> None:
        if self.verbosity < 0:
            return
        self.console.print(f"[bold]Testbot {__version__}[/bold] - Test suite for Python")
        self.console.print(f"Found {len(fixtures)} available module(s)\n")

    async def on_fixture_start(self, fixture: Fixture) -> None:
        if self.verbosity < 0:
            return
        self.console.print(f'Running fixture "{escape(fixture.name)}", includes {len(fixture.tests)} test(s)...')

    async def on_test_complete(self, fixture: Fixture, result: TestResult) -> None:
        color = _STATUS_COLOR[result.status]
        label = f"{escape(fixture.name)}/{escape(result.name)}"
        if result.status.is_failure:
            self.console.print(f'[{color}]{result.status.value}[/{color}] "{label}": {escape(result.reason or "")}')
        elif self.verbosity > 0:
            self.console.print(f"  [{color}]✓[/{color}] {label} [dim]({result.duration_ms:.1f}ms)[/dim]")

    async def on_fixture_complete(self, result: FixtureResult) -> None:
        message = _FIXTURE_MESSAGES.get(result.status)
        if message is not None:
            self.console.print(f"[yellow]{message}{escape(result.reason or '')}[/yellow]")
        elif self.verbosity >= 0:
            stats = get_fixture_stats(result)
            self.console.print(
                f"Tests: {stats.tests}, Failures: {stats.failures}, Errors: {stats.errors}, time: {_seconds(stats.time)}"
            )
        if self.verbosity >= 0:
            self.console.print()

    async def on_run_complete(self, results: list[FixtureResult]) -> None:
        summary = summarize(results)
        color = "green" if summary.passed else "red"
        self.console.print("-" * 80)
        self.console.print(f"Fixtures: {summary.fixtures} (ignored: {summary.ignored})")
        self.console.print(
            f"[{color}]Tests: {summary.tests} (failures: {summary.failures}, errors: {summary.errors})[/{color}]"
        )
        self.console.print(f"Time: {_seconds(summary.time)}")
