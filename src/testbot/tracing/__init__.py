from testbot.tracing.lifecycle import get_tracer, init_tracing, is_tracing_enabled
from testbot.tracing.tracer import RunTracer

__all__ = [
    "RunTracer",
    "get_tracer",
    "init_tracing",
    "is_tracing_enabled",
]
