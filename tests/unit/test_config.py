"""Tests for testbot.config module."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from testbot.config import TestbotSettings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ("TESTBOT_DEFAULT_TIMEOUT", "TESTBOT_VERBOSITY", "TESTBOT_LOG_LEVEL", "TESTBOT_TRACE", "TESTBOT_TRACE_OUTPUT"):
        monkeypatch.delenv(key, raising=False)


def test_defaults():
    settings = TestbotSettings()
    assert settings.default_timeout == 4.0
    assert settings.verbosity == 0
    assert settings.log_level == "WARNING"
    assert settings.trace is False
    assert settings.trace_output == Path("traces.jsonl")


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("TESTBOT_DEFAULT_TIMEOUT", "1.5")
    monkeypatch.setenv("TESTBOT_TRACE", "true")
    monkeypatch.setenv("TESTBOT_TRACE_OUTPUT", "out/spans.jsonl")

    settings = TestbotSettings()

    assert settings.default_timeout == 1.5
    assert settings.trace is True
    assert settings.trace_output == Path("out/spans.jsonl")


@pytest.mark.parametrize("value", [0, -1])
def test_rejects_non_positive_timeout(value):
    with pytest.raises(ValidationError):
        TestbotSettings(default_timeout=value)


def test_rejects_unknown_log_level():
    with pytest.raises(ValidationError):
        TestbotSettings(log_level="LOUD")
