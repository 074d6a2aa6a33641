"""Testbot - a small test suite runner with asynchronous test support."""

from .adapter import Invocable, wrap
from .builder import build_test_suite
from .discovery import ModuleDescriptor, discover, load_module
from .engine import Engine, run, run_tests
from .errors import ExpectationFailed
from .markers import timeout
from .models import Fixture, FixtureResult, FixtureStatus, Outcome, TestCase, TestResult, TestStatus
from .outcomes import expect, expect_equal, fail
from .version import __version__


__all__ = [
    # Building and running
    "Engine",
    "Invocable",
    "ModuleDescriptor",
    "build_test_suite",
    "discover",
    "load_module",
    "run",
    "run_tests",
    "wrap",
    # Models
    "Fixture",
    "FixtureResult",
    "FixtureStatus",
    "Outcome",
    "TestCase",
    "TestResult",
    "TestStatus",
    # Test bodies
    "ExpectationFailed",
    "expect",
    "expect_equal",
    "fail",
    "timeout",
]
