"""Asynchronous tests: a done() signal, a coroutine and a custom timeout.

Run with: testbot examples/
"""

import asyncio
import threading

from testbot import timeout


def atest_call_later(done):
    asyncio.get_running_loop().call_later(0.05, done)


def atest_from_thread(done):
    threading.Timer(0.05, done).start()


@timeout(1.0)
async def atest_coroutine():
    await asyncio.sleep(0.05)
    assert True
