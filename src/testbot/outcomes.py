"""Expectation helpers for test bodies."""

from typing import Any, NoReturn

from testbot.errors import ExpectationFailed


def fail(reason: str = "") -> NoReturn:
    """Explicitly fail the current test."""
    raise ExpectationFailed(reason)


def expect(condition: Any, message: str = "") -> None:
    """Fail the current test unless ``condition`` is truthy."""
    if not condition:
        raise ExpectationFailed(message or "expectation failed", actual=condition)


def expect_equal(actual: Any, expected: Any, message: str = "") -> None:
    """Fail the current test unless ``actual == expected``."""
    if actual != expected:
        raise ExpectationFailed(
            message or f"expected {expected!r} got {actual!r}",
            actual=actual,
            expected=expected,
        )
