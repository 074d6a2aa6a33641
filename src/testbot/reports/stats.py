"""Counts and timings derived from fixture results."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta

from testbot.models import FixtureResult, TestStatus


@dataclass(frozen=True)
class FixtureStats:
    """Per-fixture counts. ``time`` only covers tests that succeeded."""

    tests: int = 0
    failures: int = 0
    errors: int = 0
    time: timedelta = timedelta(0)


@dataclass(frozen=True)
class RunSummary:
    """Run-wide totals over every fixture result."""

    fixtures: int = 0
    ignored: int = 0
    tests: int = 0
    failures: int = 0
    errors: int = 0
    time: timedelta = timedelta(0)

    @property
    def passed(self) -> bool:
        return not (self.ignored or self.failures or self.errors)


def get_fixture_stats(result: FixtureResult) -> FixtureStats:
    tests = failures = errors = 0
    time = timedelta(0)
    for test in result.tests:
        tests += 1
        if test.status == TestStatus.FAILURE:
            failures += 1
        elif test.status == TestStatus.ERROR:
            errors += 1
        else:
            time += test.duration
    return FixtureStats(tests=tests, failures=failures, errors=errors, time=time)


def summarize(results: Iterable[FixtureResult]) -> RunSummary:
    """Total up a run.

    Fixtures that were ignored or whose setup or teardown failed are counted
    as ignored and contribute nothing to the test totals.
    """
    fixtures = ignored = tests = failures = errors = 0
    time = timedelta(0)
    for result in results:
        fixtures += 1
        if result.status.is_broken:
            ignored += 1
            continue
        stats = get_fixture_stats(result)
        tests += stats.tests
        failures += stats.failures
        errors += stats.errors
        time += stats.time
    return RunSummary(fixtures=fixtures, ignored=ignored, tests=tests, failures=failures, errors=errors, time=time)
