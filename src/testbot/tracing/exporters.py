"""JSONL exporter writing one record per finished fixture or test span."""

import json
import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult


logger = logging.getLogger(__name__)


def _timestamp(nanos: int | None) -> str | None:
    if nanos is None:
        return None
    return datetime.fromtimestamp(nanos / 1e9, UTC).isoformat(timespec="microseconds")


def span_record(span: ReadableSpan) -> dict[str, Any]:
    """Flatten a testbot span into a run record.

    Span names look like ``fixture.<name>`` or ``test.<fixture>/<name>``;
    the prefix becomes ``kind`` and the ``<kind>.*`` attributes become
    top-level fields.
    """
    kind, _, label = span.name.partition(".")
    attributes = dict(span.attributes or {})
    prefix = f"{kind}."
    fields = {key[len(prefix) :]: value for key, value in attributes.items() if key.startswith(prefix)}

    return {
        "kind": kind,
        "label": label,
        "status": fields.pop("status", None),
        "reason": fields.pop("reason", None),
        "start": _timestamp(span.start_time),
        "end": _timestamp(span.end_time),
        "traceId": format(span.context.trace_id, "032x"),
        "spanId": format(span.context.span_id, "016x"),
        "parentSpanId": format(span.parent.span_id, "016x") if span.parent else None,
        "fields": fields,
    }


class StreamingFileSpanExporter(SpanExporter):
    """Appends a run record to a JSONL file for every span as it ends."""

    def __init__(self, output_path: Path | str) -> None:
        self.redirect(output_path)

    def redirect(self, output_path: Path | str) -> None:
        """Start writing to ``output_path``, truncating it."""
        self.output_path = Path(output_path)
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_text("")

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        try:
            with self.output_path.open("a", encoding="utf-8") as f:
                for span in spans:
                    f.write(json.dumps(span_record(span), default=str) + "\n")
        except OSError:
            logger.exception("Could not write run records to %s", self.output_path)
            return SpanExportResult.FAILURE
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        pass
