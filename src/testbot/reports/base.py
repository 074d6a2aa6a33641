"""Reporter interface for run events."""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from testbot.models import Fixture, FixtureResult, TestResult


class Reporter:
    """Receives run events from the engine. All hooks default to no-ops.

    Reporters only consume results; nothing they do feeds back into
    scheduling.
    """

    async def on_run_start(self, fixtures: list[Fixture]) -> None:
        pass

    async def on_fixture_start(self, fixture: Fixture) -> None:
        pass

    async def on_test_complete(self, fixture: Fixture, result: TestResult) -> None:
        pass

    async def on_fixture_complete(self, result: FixtureResult) -> None:
        pass

    async def on_run_complete(self, results: list[FixtureResult]) -> None:
        pass
