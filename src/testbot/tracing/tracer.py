"""Run tracer - spans for fixtures and tests."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from opentelemetry.trace import Span, StatusCode

from testbot.tracing.lifecycle import get_tracer


if TYPE_CHECKING:
    from testbot.models import Fixture, FixtureResult, TestCase, TestResult


@dataclass
class RunTracer:
    """Opens spans around fixtures and tests when tracing is enabled."""

    enabled: bool = False

    @contextmanager
    def fixture_span(self, fixture: Fixture) -> Iterator[Span | None]:
        if not self.enabled:
            yield None
            return
        with get_tracer().start_as_current_span(f"fixture.{fixture.name}") as span:
            span.set_attribute("fixture.name", fixture.name)
            span.set_attribute("fixture.tests", len(fixture.tests))
            yield span

    @contextmanager
    def test_span(self, fixture: Fixture, test: TestCase) -> Iterator[Span | None]:
        if not self.enabled:
            yield None
            return
        with get_tracer().start_as_current_span(f"test.{fixture.name}/{test.name}") as span:
            span.set_attribute("test.name", test.name)
            span.set_attribute("test.fixture", fixture.name)
            span.set_attribute("test.async", test.invocable.is_async)
            yield span

    def record_test(self, span: Span | None, result: TestResult) -> None:
        if span is None:
            return
        span.set_attribute("test.status", result.status.value)
        span.set_attribute("test.duration_ms", result.duration_ms)
        if result.reason:
            span.set_attribute("test.reason", result.reason)
            span.set_status(StatusCode.ERROR, result.reason)

    def record_fixture(self, span: Span | None, result: FixtureResult) -> None:
        if span is None:
            return
        span.set_attribute("fixture.status", result.status.value)
        if result.reason:
            span.set_attribute("fixture.reason", result.reason)
            span.set_status(StatusCode.ERROR, result.reason)
