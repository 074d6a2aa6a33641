"""Execution engine: runs fixtures and their tests strictly one at a time."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any

from testbot.models import Fixture, FixtureResult, FixtureStatus, TestCase, TestResult, TestStatus
from testbot.reports import ConsoleReporter, Reporter
from testbot.tracing import RunTracer


logger = logging.getLogger(__name__)

RunCallback = Callable[[list[FixtureResult]], None]


class Engine:
    """Drives fixtures through setup, tests and teardown.

    Fixtures are drained from a FIFO queue by a single coroutine and every
    wrapped body is awaited before the next one starts, so at most one test
    is ever outstanding.

    Examples:
        engine = Engine()
        results = await engine.run(fixtures)

        # Silent run, results only
        results = await Engine(reporters=[]).run(fixtures)
    """

    def __init__(
        self,
        reporters: list[Reporter] | None = None,
        *,
        enable_tracing: bool = False,
    ) -> None:
        self.reporters = reporters if reporters is not None else [ConsoleReporter()]
        self.tracer = RunTracer(enabled=enable_tracing)

    async def run(self, fixtures: Iterable[Fixture], on_complete: RunCallback | None = None) -> list[FixtureResult]:
        """Run every fixture in order and return their results.

        Args:
            fixtures: Fixtures in execution order.
            on_complete: Called with the full result list once the queue is empty.
        """
        queue = deque(fixtures)
        results: list[FixtureResult] = []

        await self._emit("on_run_start", list(queue))

        while queue:
            fixture = queue.popleft()
            result = await self._run_fixture(fixture)
            results.append(result)
            await self._emit("on_fixture_complete", result)
            # Resume on the next loop turn before starting another fixture.
            await asyncio.sleep(0)

        await self._emit("on_run_complete", results)
        if on_complete is not None:
            on_complete(results)
        return results

    async def _emit(self, event: str, *args: Any) -> None:
        for reporter in self.reporters:
            await getattr(reporter, event)(*args)

    async def _run_fixture(self, fixture: Fixture) -> FixtureResult:
        result = FixtureResult(name=fixture.name)

        if fixture.status == FixtureStatus.IGNORED:
            logger.debug("Fixture %r ignored: %s", fixture.name, fixture.reason)
            result.status = FixtureStatus.IGNORED
            result.reason = fixture.reason
            return result

        logger.debug("Running fixture %r (%d tests)", fixture.name, len(fixture.tests))
        with self.tracer.fixture_span(fixture) as span:
            await self._run_fixture_body(fixture, result)
            self.tracer.record_fixture(span, result)

        fixture.status = result.status
        fixture.reason = result.reason
        return result

    async def _run_fixture_body(self, fixture: Fixture, result: FixtureResult) -> None:
        await self._emit("on_fixture_start", fixture)

        if fixture.setup is not None:
            outcome = await fixture.setup.run()
            if not outcome.ok:
                logger.debug("Setup of %r failed: %s", fixture.name, outcome.reason)
                result.status = FixtureStatus.SETUP_FAILED
                result.reason = outcome.reason
                return

        # A failing test never stops its siblings.
        for test in fixture.tests:
            test_result = await self._run_test(fixture, test)
            result.tests.append(test_result)
            await self._emit("on_test_complete", fixture, test_result)

        if fixture.teardown is not None:
            outcome = await fixture.teardown.run()
            if not outcome.ok:
                logger.debug("Teardown of %r failed: %s", fixture.name, outcome.reason)
                result.status = FixtureStatus.TEARDOWN_FAILED
                result.reason = outcome.reason
                return

        result.status = FixtureStatus.SUCCESS

    async def _run_test(self, fixture: Fixture, test: TestCase) -> TestResult:
        test_result = TestResult(name=test.name, start=datetime.now(UTC))

        with self.tracer.test_span(fixture, test) as span:
            outcome = await test.invocable.run()
            test_result.end = datetime.now(UTC)

            if outcome.error is not None:
                test_result.status = TestStatus.ERROR
            elif outcome.failure is not None:
                test_result.status = TestStatus.FAILURE
            else:
                test_result.status = TestStatus.SUCCESS
            test_result.reason = outcome.reason
            self.tracer.record_test(span, test_result)

        logger.debug("%s/%s: %s", fixture.name, test.name, test_result.status.value)
        return test_result


def run_tests(
    fixtures: Iterable[Fixture],
    callback: RunCallback,
    reporters: list[Reporter] | None = None,
) -> asyncio.Task[list[FixtureResult]]:
    """Schedule a run on the running loop; ``callback`` receives the results."""
    engine = Engine(reporters=reporters)
    return asyncio.get_running_loop().create_task(engine.run(list(fixtures), on_complete=callback))


def run(fixtures: Iterable[Fixture], **kwargs: Any) -> list[FixtureResult]:
    """Run fixtures synchronously (convenience wrapper).

    Keyword arguments are passed to :class:`Engine`.
    """
    return asyncio.run(Engine(**kwargs).run(list(fixtures)))
