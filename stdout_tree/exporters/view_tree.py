"""
view_tree.py

Render one buffered trace as an indented tree with timing bars,
and write it to the console using Rich.

    SE  my-awesome-books.com  GET /authors/:authorId  500  1s    ==========
      IN  middleware - query                            0  0     =
      CL  sessions  SELECT sess FROM "session"          0  200ms  ====
        user authenticated                                          ·
"""

import logging
from typing import Iterator, List, NamedTuple, Optional

from opentelemetry.trace import SpanKind
from rich.console import Console
from rich.text import Text

from ..buffer import TraceMap
from ..config import DEFAULT_TERMINAL_WIDTH, resolve_timing_column_width
from ..format import EVENT_FILL, SPAN_FILL, format_duration, format_timing
from ..layout import Columns, compute_columns
from ..model import INVALID_SPAN_ID, SpanEvent, SpanRecord
from ..semantics import EXCEPTION_MESSAGE, EXCEPTION_TYPE, extract, format_value

logger = logging.getLogger(__name__)

INDENT = "  "

KIND_CODES = {
    SpanKind.INTERNAL: "IN",
    SpanKind.SERVER: "SE",
    SpanKind.CLIENT: "CL",
    SpanKind.PRODUCER: "PR",
    SpanKind.CONSUMER: "CO",
}


class TraceLine(NamedTuple):
    text: str
    is_error: bool


class TimingParent(NamedTuple):
    start: int
    duration: int


def _fit(text: str, width: int) -> str:
    width = max(0, width)
    return f"{text[:width]:<{width}}"


def span_line(span: SpanRecord, depth: int, columns: Columns, timing: TimingParent) -> TraceLine:
    info = extract(span)
    label = f"{INDENT * depth}{KIND_CODES.get(span.kind, 'IN')}  {info.name}  {info.details}"
    bar = format_timing(
        columns.bar_width, timing.start, timing.duration, span.start_time, span.duration, SPAN_FILL
    )
    text = (
        _fit(label, columns.label_width)
        + f"{info.status:>{columns.status_width}}"
        + f"{format_duration(span.duration):>{columns.duration_width}}"
        + f"{bar:>{columns.timing_width}}"
    )
    return TraceLine(text, info.is_error)


def event_message(event: SpanEvent) -> str:
    if event.name == "exception":
        exc_type = format_value(event.attributes.get(EXCEPTION_TYPE, "unknown"))
        exc_message = format_value(event.attributes.get(EXCEPTION_MESSAGE, ""))
        return f"{exc_type}: {exc_message}"
    return event.name


def event_line(event: SpanEvent, depth: int, columns: Columns, timing: TimingParent) -> TraceLine:
    bar = format_timing(
        columns.bar_width, timing.start, timing.duration, event.timestamp, 0, EVENT_FILL
    )
    text = _fit(f"{INDENT * depth}{event_message(event)}", columns.event_label_width) + (
        f"{bar:>{columns.timing_width}}"
    )
    return TraceLine(text, event.name == "exception")


def _walk(
    span: SpanRecord, depth: int, trace: TraceMap, columns: Columns, timing: TimingParent
) -> Iterator[TraceLine]:
    yield span_line(span, depth, columns, timing)

    children = [(child.start_time, child) for child in trace.pop(span.span_id, [])]
    children += [(event.timestamp, event) for event in span.events]
    # stable: equal timestamps keep spans before events, each in arrival order
    children.sort(key=lambda item: item[0])

    for _, child in children:
        if isinstance(child, SpanRecord):
            yield from _walk(child, depth + 1, trace, columns, timing)
        else:
            yield event_line(child, depth + 1, columns, timing)


def render_trace(trace: TraceMap, columns: Columns) -> List[TraceLine]:
    """
    Render every root of a trace, depth first, children in time order.

    Consumes `trace`: child lists are removed as they are printed. Timing
    bars are relative to the root a span hangs under.
    """
    lines: List[TraceLine] = []
    for root in trace.pop(INVALID_SPAN_ID, []):
        timing = TimingParent(root.start_time, root.duration)
        lines.extend(_walk(root, 0, trace, columns, timing))
    return lines


class TreePrinter:
    """Prints traces handed over by a TraceBuffer."""

    def __init__(self, console: Optional[Console] = None, timing_column_width: Optional[float] = None):
        self.console = console or Console(highlight=False)
        self.timing_column_width = resolve_timing_column_width(timing_column_width)

    @property
    def terminal_width(self) -> int:
        return self.console.width or DEFAULT_TERMINAL_WIDTH

    def __call__(self, trace: TraceMap) -> None:
        roots = trace.get(INVALID_SPAN_ID) or []
        logger.debug(
            "Printing trace %s with %d span(s)",
            roots[0].trace_id if roots else None,
            sum(len(spans) for spans in trace.values()),
        )
        columns = compute_columns(self.terminal_width, self.timing_column_width)
        lines = render_trace(trace, columns)
        for line in lines:
            self.console.print(
                Text(line.text, style="red" if line.is_error else ""),
                soft_wrap=True,
            )
