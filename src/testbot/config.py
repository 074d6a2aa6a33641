"""Runtime settings."""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from testbot.models import DEFAULT_TIMEOUT


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class TestbotSettings(BaseSettings):
    """Settings for a testbot run.

    Loads from environment variables automatically:
        TESTBOT_DEFAULT_TIMEOUT, TESTBOT_VERBOSITY, TESTBOT_LOG_LEVEL,
        TESTBOT_TRACE, TESTBOT_TRACE_OUTPUT

    Command-line flags take precedence over these values.
    """

    __test__ = False  # Prevent pytest from collecting this as a test class

    default_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0, description="Seconds an async test may run")
    verbosity: int = Field(default=0, ge=-1, description="-1 quiet, 0 normal, 1+ verbose")
    log_level: LogLevel = Field(default="WARNING", description="Level for the testbot logger")
    trace: bool = Field(default=False, description="Write OpenTelemetry spans for fixtures and tests")
    trace_output: Path = Field(default=Path("traces.jsonl"), description="JSONL file receiving spans")

    model_config = SettingsConfigDict(
        env_prefix="TESTBOT_",
        extra="ignore",
    )
