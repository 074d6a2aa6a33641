"""Decorators that attach execution options to test bodies."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar


F = TypeVar("F", bound=Callable[..., Any])

_TIMEOUT_ATTR = "__testbot_timeout__"


def timeout(seconds: float) -> Callable[[F], F]:
    """Override the fixture's default timeout for one test, setup or teardown.

    Example:
        @timeout(0.5)
        def atest_quick(done):
            ...
    """
    if seconds <= 0:
        msg = "timeout() requires a positive number of seconds"
        raise ValueError(msg)

    def decorator(fn: F) -> F:
        setattr(fn, _TIMEOUT_ATTR, float(seconds))
        return fn

    return decorator


def get_timeout(fn: Callable[..., Any]) -> float | None:
    """Return the timeout attached by :func:`timeout`, if any."""
    return getattr(fn, _TIMEOUT_ATTR, None)
