"""
OpenTelemetry span exporter printing each finished trace as a tree.
"""

import logging
from typing import Optional, Sequence

from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult
from rich.console import Console

from ..buffer import TraceBuffer
from ..model import SpanRecord
from .view_tree import TreePrinter

logger = logging.getLogger(__name__)


class StdoutTreeExporter(SpanExporter):
    """
    Buffers spans per trace and prints the trace once its root span ends.

    Traces without a root are printed on shutdown.
    """

    def __init__(self, console: Optional[Console] = None, timing_column_width: Optional[float] = None):
        self.printer = TreePrinter(console, timing_column_width)
        self.buffer = TraceBuffer(self.printer)
        self._shutdown = False

    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        if self._shutdown:
            logger.warning("Exporter already shut down, dropping %d span(s)", len(spans))
            return SpanExportResult.FAILURE
        try:
            self.buffer.ingest(SpanRecord.from_readable_span(span) for span in spans)
        except OSError:
            logger.exception("Write to stdout failed")
            return SpanExportResult.FAILURE
        return SpanExportResult.SUCCESS

    def shutdown(self) -> None:
        if self._shutdown:
            return
        self._shutdown = True
        self.buffer.drain()

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return True
