from testbot.reports.base import Reporter
from testbot.reports.console import ConsoleReporter
from testbot.reports.stats import FixtureStats, RunSummary, get_fixture_stats, summarize

__all__ = [
    "ConsoleReporter",
    "FixtureStats",
    "Reporter",
    "RunSummary",
    "get_fixture_stats",
    "summarize",
]
