"""Error types raised and classified by testbot."""

from __future__ import annotations

from typing import Any


class TestbotError(Exception):
    """Base class for errors raised by testbot itself."""

    __test__ = False  # Prevent pytest from collecting this as a test class


class ModuleLoadError(TestbotError, ImportError):
    """A test module could not be handed to importlib."""


class ExpectationFailed(AssertionError):
    """An expectation inside a test body was violated.

    Subclasses ``AssertionError`` so that plain ``assert`` statements and
    the helpers in :mod:`testbot.outcomes` are classified the same way.
    """

    def __init__(self, message: str = "", *, actual: Any = None, expected: Any = None) -> None:
        self.message = message
        self.actual = actual
        self.expected = expected
        super().__init__(message)


def is_failure(exc: BaseException) -> bool:
    """Check whether a fault is an assertion-style failure rather than an error."""
    return isinstance(exc, AssertionError)


def describe_failure(exc: AssertionError) -> str:
    message = str(exc)
    if message:
        return message
    actual = getattr(exc, "actual", None)
    if actual is not None:
        return repr(actual)
    return type(exc).__name__


def describe_error(exc: BaseException) -> str:
    message = str(exc)
    if message:
        return f"{type(exc).__name__}: {message}"
    return type(exc).__name__
