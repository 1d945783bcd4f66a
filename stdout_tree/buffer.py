"""
Collects finished spans until their trace can be printed.

Spans usually finish children-first, so a trace is held back until its
root span arrives. The root then takes the whole trace with it to the
printer. Anything still held at shutdown is printed under ORPHANED
placeholder roots.

A TraceBuffer is not thread-safe. The caller must serialize calls to
`ingest` and `drain`, which the SDK span processors already do for
their exporter.
"""

import logging
import time
from typing import Callable, Dict, Iterable, List

from .model import INVALID_SPAN_ID, SpanId, SpanRecord, TraceId

logger = logging.getLogger(__name__)

# parent span id -> spans parented there, in arrival order
TraceMap = Dict[SpanId, List[SpanRecord]]


class TraceBuffer:
    def __init__(self, print_trace: Callable[[TraceMap], None]):
        self._print_trace = print_trace
        self._traces: Dict[TraceId, TraceMap] = {}

    def __len__(self) -> int:
        return len(self._traces)

    def __contains__(self, trace_id) -> bool:
        return trace_id in self._traces

    def ingest(self, batch: Iterable[SpanRecord]) -> None:
        """
        Buffer a batch of spans, printing every trace whose root is in it.

        An OSError raised while printing propagates immediately and the
        rest of the batch is not processed.
        """
        for span in batch:
            if span.is_root:
                # A trace with several roots prints once per root, each with
                # whatever was buffered up to that point.
                trace = self._traces.pop(span.trace_id, {})
                trace[INVALID_SPAN_ID] = [span]
                self._print_trace(trace)
            else:
                trace = self._traces.setdefault(span.trace_id, {})
                trace.setdefault(span.parent_span_id, []).append(span)

    def drain(self) -> None:
        """Print every incomplete trace. Write errors are logged and ignored."""
        for trace_id in list(self._traces):
            trace = self._traces.pop(trace_id)
            orphans = orphan_roots(trace_id, trace)
            logger.debug("Trace %s incomplete at shutdown, %d orphaned root(s)", trace_id, len(orphans))
            trace[INVALID_SPAN_ID] = orphans
            try:
                self._print_trace(trace)
            except OSError as exc:
                logger.warning("Failed to print trace %s during shutdown: %s", trace_id, exc)


def orphan_roots(trace_id: TraceId, trace: TraceMap) -> List[SpanRecord]:
    """One placeholder per parent that some span points at but that never arrived."""
    span_ids = {span.span_id for spans in trace.values() for span in spans}
    now = time.time_ns()
    return [
        SpanRecord.orphaned(trace_id, parent_id, now)
        for parent_id in trace
        if parent_id not in span_ids
    ]
