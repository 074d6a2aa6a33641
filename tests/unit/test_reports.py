"""Tests for testbot.reports package."""

from datetime import UTC, datetime, timedelta

import pytest
from rich.console import Console

from testbot.models import Fixture, FixtureResult, FixtureStatus, TestResult, TestStatus
from testbot.reports import ConsoleReporter, get_fixture_stats, summarize


T0 = datetime(2024, 1, 1, tzinfo=UTC)


def make_test(name: str, status: TestStatus, ms: int, reason: str | None = None) -> TestResult:
    return TestResult(name=name, status=status, reason=reason, start=T0, end=T0 + timedelta(milliseconds=ms))


def make_console() -> Console:
    return Console(record=True, width=200, force_terminal=False, color_system=None)


class TestFixtureStats:
    def test_counts_and_time(self):
        result = FixtureResult(
            name="math",
            status=FixtureStatus.SUCCESS,
            tests=[
                make_test("a", TestStatus.SUCCESS, 100),
                make_test("b", TestStatus.FAILURE, 500, "nope"),
                make_test("c", TestStatus.ERROR, 700, "ValueError: x"),
                make_test("d", TestStatus.SUCCESS, 250),
            ],
        )
        stats = get_fixture_stats(result)

        assert stats.tests == 4
        assert stats.failures == 1
        assert stats.errors == 1
        assert stats.time == timedelta(milliseconds=350)

    def test_empty_fixture(self):
        stats = get_fixture_stats(FixtureResult(name="empty", status=FixtureStatus.SUCCESS))
        assert (stats.tests, stats.failures, stats.errors, stats.time) == (0, 0, 0, timedelta(0))


class TestSummarize:
    def test_totals_exclude_broken_fixtures(self):
        results = [
            FixtureResult(
                name="ok",
                status=FixtureStatus.SUCCESS,
                tests=[make_test("a", TestStatus.SUCCESS, 10), make_test("b", TestStatus.FAILURE, 10, "x")],
            ),
            FixtureResult(name="gone", status=FixtureStatus.IGNORED, reason="ImportError: gone"),
            FixtureResult(name="setup", status=FixtureStatus.SETUP_FAILED, reason="no db"),
            FixtureResult(
                name="teardown",
                status=FixtureStatus.TEARDOWN_FAILED,
                reason="cleanup",
                tests=[make_test("c", TestStatus.ERROR, 10, "E")],
            ),
        ]
        summary = summarize(results)

        assert summary.fixtures == 4
        assert summary.ignored == 3
        assert summary.tests == 2
        assert summary.failures == 1
        assert summary.errors == 0
        assert summary.time == timedelta(milliseconds=10)
        assert not summary.passed

    def test_clean_run_passes(self):
        summary = summarize(
            [FixtureResult(name="ok", status=FixtureStatus.SUCCESS, tests=[make_test("a", TestStatus.SUCCESS, 5)])]
        )
        assert summary.passed

    def test_empty_run(self):
        summary = summarize([])
        assert summary.fixtures == 0
        assert summary.passed


class TestConsoleReporter:
    @pytest.mark.asyncio
    async def test_prints_failure_notice_and_stats(self):
        console = make_console()
        reporter = ConsoleReporter(console)
        fixture = Fixture(name="math")
        failed = make_test("add", TestStatus.FAILURE, 5, "expected 1 got 2")
        result = FixtureResult(name="math", status=FixtureStatus.SUCCESS, tests=[failed])

        await reporter.on_run_start([fixture])
        await reporter.on_fixture_start(fixture)
        await reporter.on_test_complete(fixture, failed)
        await reporter.on_fixture_complete(result)
        await reporter.on_run_complete([result])
        output = console.export_text()

        assert "Found 1 available module(s)" in output
        assert 'Running fixture "math", includes 0 test(s)...' in output
        assert 'failure "math/add": expected 1 got 2' in output
        assert "Tests: 1, Failures: 1, Errors: 0" in output
        assert "Fixtures: 1 (ignored: 0)" in output
        assert "Tests: 1 (failures: 1, errors: 0)" in output

    @pytest.mark.asyncio
    async def test_prints_broken_fixture_reasons(self):
        console = make_console()
        reporter = ConsoleReporter(console)

        await reporter.on_fixture_complete(
            FixtureResult(name="gone", status=FixtureStatus.IGNORED, reason="ImportError: [missing]")
        )
        await reporter.on_fixture_complete(FixtureResult(name="s", status=FixtureStatus.SETUP_FAILED, reason="no db"))
        output = console.export_text()

        assert "Fixture was ignored, reason: ImportError: [missing]" in output
        assert "Fixture setup failed and could therefore not be tested: no db" in output

    @pytest.mark.asyncio
    async def test_quiet_keeps_notices_and_summary(self):
        console = make_console()
        reporter = ConsoleReporter(console, verbosity=-1)
        fixture = Fixture(name="math")
        errored = make_test("div", TestStatus.ERROR, 5, "ZeroDivisionError: division by zero")
        result = FixtureResult(name="math", status=FixtureStatus.SUCCESS, tests=[errored])

        await reporter.on_run_start([fixture])
        await reporter.on_fixture_start(fixture)
        await reporter.on_test_complete(fixture, errored)
        await reporter.on_fixture_complete(result)
        await reporter.on_run_complete([result])
        output = console.export_text()

        assert "Testbot" not in output
        assert "Running fixture" not in output
        assert 'error "math/div": ZeroDivisionError: division by zero' in output
        assert "Tests: 1 (failures: 0, errors: 1)" in output

    @pytest.mark.asyncio
    async def test_verbose_lists_successes(self):
        console = make_console()
        reporter = ConsoleReporter(console, verbosity=1)

        await reporter.on_test_complete(Fixture(name="math"), make_test("add", TestStatus.SUCCESS, 5))

        assert "math/add" in console.export_text()

    @pytest.mark.asyncio
    async def test_default_hides_successes(self):
        console = make_console()
        reporter = ConsoleReporter(console)

        await reporter.on_test_complete(Fixture(name="math"), make_test("add", TestStatus.SUCCESS, 5))

        assert console.export_text() == ""
