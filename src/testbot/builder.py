"""Build fixtures from loaded test modules."""

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Callable, Iterable
from pathlib import Path
from types import ModuleType
from typing import Any

from testbot.adapter import Invocable, wrap
from testbot.discovery import ModuleDescriptor, load_module
from testbot.errors import describe_error
from testbot.markers import get_timeout
from testbot.models import DEFAULT_TIMEOUT, Fixture, FixtureStatus, TestCase


logger = logging.getLogger(__name__)

RE_TEST_NAME = re.compile(r"^(at|t)?est_([A-Za-z0-9_]+)$")

Loader = Callable[[Path], ModuleType]


def _wrap_member(marker: str | None, fn: Callable[..., Any], default_timeout: float) -> Invocable:
    is_async = marker == "at" or inspect.iscoroutinefunction(fn)
    timeout = get_timeout(fn) or default_timeout
    return wrap(is_async, timeout, fn)


def build_fixture(name: str, module: ModuleType, timeout: float = DEFAULT_TIMEOUT) -> Fixture:
    """Collect setup, teardown and tests from a loaded module.

    Members are visited in the module's own definition order, which becomes
    the execution order of the tests.
    """
    fixture = Fixture(name=name, timeout=timeout)

    for member_name, member in vars(module).items():
        match = RE_TEST_NAME.match(member_name)
        if match is None or not inspect.isroutine(member):
            continue

        marker, test_name = match.groups()
        invocable = _wrap_member(marker, member, fixture.timeout)
        if test_name == "setup":
            fixture.setup = invocable
        elif test_name == "teardown":
            fixture.teardown = invocable
        else:
            fixture.tests.append(TestCase(name=test_name, invocable=invocable))

    logger.debug("Built fixture %r with %d test(s)", name, len(fixture.tests))
    return fixture


def build_test_suite(
    modules: Iterable[ModuleDescriptor],
    loader: Loader = load_module,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[Fixture]:
    """Turn module descriptors into fixtures, one per module.

    A module that fails to load becomes an ``ignored`` fixture carrying the
    load error as its reason; it is never executed.
    """
    fixtures: list[Fixture] = []
    for descriptor in modules:
        try:
            module = loader(descriptor.path)
        except KeyboardInterrupt:
            raise
        except BaseException as exc:  # noqa: BLE001
            reason = describe_error(exc)
            logger.warning("Ignoring module %s: %s", descriptor.path, reason)
            fixtures.append(Fixture(name=descriptor.name, status=FixtureStatus.IGNORED, reason=reason, timeout=timeout))
            continue
        fixtures.append(build_fixture(descriptor.name, module, timeout))
    return fixtures
