"""Uniform invocation of synchronous and asynchronous test bodies.

Every test, setup and teardown is wrapped into an :class:`Invocable`: a
callable taking one completion callback that eventually receives exactly one
:class:`~testbot.models.Outcome`, always on a later turn of the event loop.

Asynchronous bodies get two extra guards while they are outstanding:

- a fault interceptor that attributes otherwise-unhandled exceptions (loop
  callbacks, threads started by the body) to the running test, and
- a timer that forces a ``"Timeout"`` failure when the body never completes.

Whichever of ``done()``, the interceptor, the body's own task or the timer
fires first decides the outcome; everything after it is ignored.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from collections.abc import Callable
from typing import Any

from testbot.errors import describe_error, describe_failure, is_failure
from testbot.models import Outcome


logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[Outcome], None]

TIMEOUT_REASON = "Timeout"


def classify(exc: BaseException) -> Outcome:
    """Turn a fault raised by a test body into an Outcome."""
    if is_failure(exc):
        return Outcome(failure=describe_failure(exc))  # type: ignore[arg-type]
    return Outcome(error=describe_error(exc))


def _accepts_done(fn: Callable[..., Any]) -> bool:
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return False
    positional = {
        inspect.Parameter.POSITIONAL_ONLY,
        inspect.Parameter.POSITIONAL_OR_KEYWORD,
        inspect.Parameter.VAR_POSITIONAL,
    }
    return any(p.kind in positional for p in params)


class Invocable:
    """A wrapped test body callable with a single completion callback."""

    def __init__(self, fn: Callable[..., Any], *, is_async: bool, timeout: float) -> None:
        self.fn = fn
        self.is_async = is_async
        self.timeout = timeout

    def __repr__(self) -> str:
        kind = "async" if self.is_async else "sync"
        name = getattr(self.fn, "__name__", repr(self.fn))
        return f"<Invocable {kind} {name} timeout={self.timeout}>"

    def __call__(self, callback: OutcomeCallback) -> None:
        """Start the body; ``callback`` receives its Outcome on a later loop turn."""
        loop = asyncio.get_running_loop()
        if self.is_async:
            _AsyncCall(self, loop, callback).start()
        else:
            self._call_sync(loop, callback)

    async def run(self) -> Outcome:
        """Invoke the body and wait for its Outcome."""
        future: asyncio.Future[Outcome] = asyncio.get_running_loop().create_future()

        def resolve(outcome: Outcome) -> None:
            if not future.done():
                future.set_result(outcome)

        self(resolve)
        return await future

    def _call_sync(self, loop: asyncio.AbstractEventLoop, callback: OutcomeCallback) -> None:
        try:
            self.fn()
        except KeyboardInterrupt:
            raise
        except BaseException as exc:  # noqa: BLE001
            outcome = classify(exc)
        else:
            outcome = Outcome()
        loop.call_soon(callback, outcome)


class FaultInterceptor:
    """Routes otherwise-unhandled faults to a single outstanding invocation.

    Installs itself as the loop's exception handler and as
    ``threading.excepthook``; :meth:`remove` restores whatever was there.
    Only one interceptor may be installed at a time, which the engine
    guarantees by never running two invocations at once.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, on_fault: Callable[[BaseException], None]) -> None:
        self.loop = loop
        self.on_fault = on_fault
        self.installed = False
        self._previous_loop_handler: Any = None
        self._previous_excepthook: Any = None

    def install(self) -> None:
        self._previous_loop_handler = self.loop.get_exception_handler()
        self._previous_excepthook = threading.excepthook
        self.loop.set_exception_handler(self._handle_loop_fault)
        threading.excepthook = self._handle_thread_fault
        self.installed = True

    def remove(self) -> None:
        if not self.installed:
            return
        self.loop.set_exception_handler(self._previous_loop_handler)
        threading.excepthook = self._previous_excepthook
        self.installed = False

    def _handle_loop_fault(self, loop: asyncio.AbstractEventLoop, context: dict[str, Any]) -> None:
        exc = context.get("exception")
        if not isinstance(exc, Exception):
            if self._previous_loop_handler is not None:
                self._previous_loop_handler(loop, context)
            else:
                loop.default_exception_handler(context)
            return
        logger.debug("Intercepted loop fault: %r", exc)
        self.on_fault(exc)

    def _handle_thread_fault(self, args: threading.ExceptHookArgs) -> None:
        if not isinstance(args.exc_value, Exception):
            self._previous_excepthook(args)
            return
        logger.debug("Intercepted fault in thread %s: %r", args.thread, args.exc_value)
        self.loop.call_soon_threadsafe(self.on_fault, args.exc_value)


class _AsyncCall:
    """One outstanding asynchronous invocation."""

    def __init__(self, invocable: Invocable, loop: asyncio.AbstractEventLoop, callback: OutcomeCallback) -> None:
        self.invocable = invocable
        self.loop = loop
        self.callback = callback
        self.settled = False
        self.task: asyncio.Future[Any] | None = None
        self.timer: asyncio.TimerHandle | None = None
        self.interceptor = FaultInterceptor(loop, self._on_fault)
        self._loop_thread = threading.get_ident()

    def start(self) -> None:
        self.interceptor.install()
        self.timer = self.loop.call_later(self.invocable.timeout, self._on_timeout)

        fn = self.invocable.fn
        takes_done = _accepts_done(fn)
        try:
            result = fn(self.done) if takes_done else fn()
        except KeyboardInterrupt:
            self._release()
            raise
        except BaseException as exc:  # noqa: BLE001
            self.settle(classify(exc))
            return

        if inspect.isawaitable(result):
            self.task = asyncio.ensure_future(self._guard(result))
            self.task.add_done_callback(self._on_task_done)
        elif not takes_done:
            self.settle(Outcome())

    def done(self) -> None:
        """Completion signal handed to bodies that accept one."""
        if threading.get_ident() != self._loop_thread:
            self.loop.call_soon_threadsafe(self.settle, Outcome())
            return
        self.settle(Outcome())

    def settle(self, outcome: Outcome) -> None:
        if self.settled:
            logger.debug("Ignoring late completion of %r: %r", self.invocable, outcome)
            return
        self.settled = True
        self._release()
        self.loop.call_soon(self.callback, outcome)

    def _release(self) -> None:
        self.interceptor.remove()
        if self.timer is not None:
            self.timer.cancel()
            self.timer = None
        if self.task is not None and not self.task.done():
            self.task.cancel()

    async def _guard(self, awaitable: Any) -> Any:
        # SystemExit raised inside a task would otherwise escape the event loop.
        try:
            return await awaitable
        except (KeyboardInterrupt, asyncio.CancelledError):
            raise
        except BaseException as exc:  # noqa: BLE001
            self.settle(classify(exc))
            return None

    def _on_fault(self, exc: BaseException) -> None:
        self.settle(classify(exc))

    def _on_timeout(self) -> None:
        self.timer = None
        logger.debug("%r timed out after %ss", self.invocable, self.invocable.timeout)
        self.settle(Outcome(failure=TIMEOUT_REASON))

    def _on_task_done(self, task: asyncio.Future[Any]) -> None:
        if task.cancelled():
            if not self.settled:
                self.settle(Outcome(error="CancelledError"))
            return
        exc = task.exception()
        if exc is not None:
            self.settle(classify(exc))
        else:
            self.settle(Outcome())


def wrap(is_async: bool, timeout: float, fn: Callable[..., Any]) -> Invocable:
    """Wrap ``fn`` into an Invocable.

    Args:
        is_async: Whether ``fn`` completes asynchronously (``done()`` signal,
            coroutine, or awaitable result).
        timeout: Seconds an asynchronous body may stay outstanding.
        fn: The test, setup or teardown body.
    """
    return Invocable(fn, is_async=is_async, timeout=timeout)
