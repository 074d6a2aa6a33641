"""Command-line interface for testbot."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from testbot.builder import build_test_suite
from testbot.config import TestbotSettings
from testbot.discovery import discover
from testbot.engine import Engine
from testbot.logging import configure_logging
from testbot.reports import ConsoleReporter, summarize
from testbot.tracing import init_tracing
from testbot.version import __version__


logger = logging.getLogger(__name__)

USAGE = "Usage: testbot [testdir], [testmodule]"

EXIT_OK = 0
EXIT_TESTS_FAILED = 1
EXIT_NO_MODULES = 2


class CLIApplication:
    """Parses arguments and drives discovery, building, running and reporting."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()
        self.parser = argparse.ArgumentParser(
            prog="testbot",
            description="Run test_* modules: setup, tests and teardown, one fixture at a time.",
        )
        self.parser.add_argument(
            "paths",
            nargs="*",
            help="Test modules (test_<name>.py) or directories containing them (default: current directory).",
        )
        self.parser.add_argument(
            "--timeout",
            type=float,
            help="Seconds an asynchronous test may run before it fails with Timeout.",
        )
        verbosity = self.parser.add_mutually_exclusive_group()
        verbosity.add_argument("-v", "--verbose", action="store_true", help="List successful tests too.")
        verbosity.add_argument("-q", "--quiet", action="store_true", help="Only print problems and the summary.")
        self.parser.add_argument(
            "--trace",
            action="store_true",
            default=None,
            help="Write OpenTelemetry spans for fixtures and tests.",
        )
        self.parser.add_argument("--trace-output", dest="trace_output", help="JSONL file receiving spans.")
        self.parser.add_argument(
            "--log-level",
            dest="log_level",
            type=str.upper,
            choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
            help="Level for testbot's own log messages.",
        )
        self.parser.add_argument("--version", action="version", version=f"testbot {__version__}")

    def settings_from(self, args: argparse.Namespace) -> TestbotSettings:
        """Merge command-line flags over environment settings."""
        overrides: dict[str, object] = {}
        if args.timeout is not None:
            overrides["default_timeout"] = args.timeout
        if args.verbose:
            overrides["verbosity"] = 1
        elif args.quiet:
            overrides["verbosity"] = -1
        if args.trace is not None:
            overrides["trace"] = args.trace
        if args.trace_output:
            overrides["trace_output"] = Path(args.trace_output)
        if args.log_level:
            overrides["log_level"] = args.log_level
        return TestbotSettings(**overrides)

    def run(self, argv: Sequence[str] | None = None) -> int:
        load_dotenv(Path.cwd() / ".env")
        args = self.parser.parse_args(argv)
        settings = self.settings_from(args)
        return RunCommand(self.console, settings, args.paths).run()


class RunCommand:
    """Pipeline driver for one `testbot` invocation."""

    def __init__(self, console: Console, settings: TestbotSettings, paths: Sequence[str]) -> None:
        self.console = console
        self.settings = settings
        self.paths = list(paths)

    def run(self) -> int:
        configure_logging(self.settings.log_level)
        return asyncio.run(self.execute())

    async def execute(self) -> int:
        modules = discover(self.paths)
        if not modules:
            self.console.print(escape(USAGE))
            return EXIT_NO_MODULES

        if self.settings.trace:
            init_tracing(output_path=self.settings.trace_output)

        fixtures = build_test_suite(modules, timeout=self.settings.default_timeout)
        engine = Engine(
            reporters=[ConsoleReporter(self.console, verbosity=self.settings.verbosity)],
            enable_tracing=self.settings.trace,
        )
        results = await engine.run(fixtures)

        if self.settings.trace:
            self.console.print(f"[dim]Tracing written to {escape(str(self.settings.trace_output))}[/dim]")

        summary = summarize(results)
        logger.info("Run finished: %s", summary)
        return EXIT_OK if summary.passed else EXIT_TESTS_FAILED


def main(argv: Sequence[str] | None = None) -> int:
    return CLIApplication().run(argv)


if __name__ == "__main__":
    sys.exit(main())
