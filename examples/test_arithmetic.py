"""Synchronous fixture with setup and teardown.

Run with: testbot examples/test_arithmetic.py
"""

from testbot import expect_equal

state = {}


def test_setup():
    state["values"] = [1, 2, 3]


def test_sum():
    expect_equal(sum(state["values"]), 6)


def test_max():
    assert max(state["values"]) == 3, "max should be 3"


def test_teardown():
    state.clear()
