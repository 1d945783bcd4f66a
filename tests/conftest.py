"""Pytest configuration and fixtures."""

import io

import pytest
from opentelemetry.trace import SpanKind, StatusCode
from rich.console import Console

from stdout_tree.model import INVALID_SPAN_ID, SpanEvent, SpanRecord

S = 1_000_000_000
MS = 1_000_000


@pytest.fixture
def make_span():
    """Build SpanRecords with short ids and times in seconds."""

    def _make(
        span_id,
        parent=INVALID_SPAN_ID,
        *,
        name=None,
        start=0.0,
        end=None,
        trace_id=1,
        kind=SpanKind.INTERNAL,
        attributes=None,
        status=StatusCode.UNSET,
        events=(),
        remote=False,
    ):
        return SpanRecord(
            trace_id=trace_id,
            span_id=span_id,
            parent_span_id=parent,
            parent_is_remote=remote,
            name=name or str(span_id),
            start_time=int(start * S),
            end_time=int((start if end is None else end) * S),
            kind=kind,
            attributes=attributes or {},
            status_code=status,
            events=tuple(SpanEvent(n, int(ts * S), attrs) for n, ts, attrs in events),
        )

    return _make


@pytest.fixture
def output():
    return io.StringIO()


@pytest.fixture
def console(output):
    """Plain 80 column console writing into `output`."""
    return Console(file=output, width=80, color_system=None, highlight=False)


def labels(text, width=52):
    """Label column of every printed line, indentation stripped."""
    return [line[:width].strip() for line in text.splitlines()]
