"""Fixture, test and result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from enum import Enum
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from testbot.adapter import Invocable


DEFAULT_TIMEOUT = 4.0


class FixtureStatus(Enum):
    """Lifecycle state of a fixture."""

    WAITING = "waiting"
    IGNORED = "ignored"
    RUNNING = "running"
    SUCCESS = "success"
    FAILURE_IN_CHILDREN = "failure-in-children"
    SETUP_FAILED = "setup-failed"
    TEARDOWN_FAILED = "teardown-failed"

    @property
    def is_broken(self) -> bool:
        """Check if the fixture itself, not one of its tests, went wrong."""
        return self in {FixtureStatus.IGNORED, FixtureStatus.SETUP_FAILED, FixtureStatus.TEARDOWN_FAILED}


class TestStatus(Enum):
    """Test execution status."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    RUNNING = "running"
    SUCCESS = "success"
    FAILURE = "failure"
    ERROR = "error"

    @property
    def is_failure(self) -> bool:
        """Check if this status represents a failure."""
        return self in {TestStatus.FAILURE, TestStatus.ERROR}


@dataclass(frozen=True)
class Outcome:
    """Result of one invocation of a wrapped test, setup or teardown.

    At most one of ``error`` and ``failure`` is set; neither means success.
    """

    error: str | None = None
    failure: str | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.failure is not None:
            msg = "Outcome cannot carry both an error and a failure"
            raise ValueError(msg)

    @property
    def ok(self) -> bool:
        return self.error is None and self.failure is None

    @property
    def reason(self) -> str | None:
        return self.error if self.error is not None else self.failure


@dataclass(frozen=True)
class TestCase:
    """A named, wrapped test body."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    name: str
    invocable: Invocable


@dataclass
class Fixture:
    """One test module: optional setup and teardown around ordered tests."""

    name: str
    status: FixtureStatus = FixtureStatus.WAITING
    reason: str | None = None
    timeout: float = DEFAULT_TIMEOUT
    setup: Invocable | None = None
    teardown: Invocable | None = None
    tests: list[TestCase] = field(default_factory=list)


@dataclass
class TestResult:
    """Result of a single test execution."""

    __test__ = False  # Prevent pytest from collecting this as a test class

    name: str
    status: TestStatus = TestStatus.RUNNING
    reason: str | None = None
    start: datetime = field(default_factory=lambda: datetime.now(UTC))
    end: datetime | None = None

    @property
    def duration(self) -> timedelta:
        if self.end is None:
            return timedelta(0)
        return self.end - self.start

    @property
    def duration_ms(self) -> float:
        return self.duration.total_seconds() * 1000


@dataclass
class FixtureResult:
    """Result of running one fixture, with the tests that actually started."""

    name: str
    status: FixtureStatus = FixtureStatus.RUNNING
    reason: str | None = None
    tests: list[TestResult] = field(default_factory=list)
