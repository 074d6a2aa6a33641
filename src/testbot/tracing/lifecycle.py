"""Process-wide tracer provider for testbot runs."""

from pathlib import Path

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor

from testbot.tracing.exporters import StreamingFileSpanExporter
from testbot.version import __version__


TRACER_NAME = "testbot"

_exporter: StreamingFileSpanExporter | None = None


def init_tracing(*, output_path: Path | str = "traces.jsonl") -> None:
    """Send fixture and test spans to ``output_path``.

    OpenTelemetry accepts a global provider only once per process; after
    the first call this just redirects the exporter.
    """
    global _exporter

    if _exporter is not None:
        _exporter.redirect(output_path)
        return

    _exporter = StreamingFileSpanExporter(output_path)
    provider = TracerProvider(
        resource=Resource.create({"service.name": TRACER_NAME, "service.version": __version__})
    )
    provider.add_span_processor(SimpleSpanProcessor(_exporter))
    trace.set_tracer_provider(provider)


def is_tracing_enabled() -> bool:
    return _exporter is not None


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME, __version__)
