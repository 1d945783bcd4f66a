"""Tests for TraceBuffer."""

import logging

import pytest

from stdout_tree.buffer import TraceBuffer, orphan_roots
from stdout_tree.exporters.view_tree import TreePrinter
from stdout_tree.model import INVALID_SPAN_ID


class RecordingPrinter:
    """Keeps a copy of every trace handed over for printing."""

    def __init__(self, fail_on=()):
        self.traces = []
        self.fail_on = set(fail_on)

    def __call__(self, trace):
        self.traces.append({parent: list(spans) for parent, spans in trace.items()})
        if len(self.traces) in self.fail_on:
            raise OSError("broken pipe")


def span_ids(spans):
    return [span.span_id for span in spans]


class TestIngest:
    """Tests for TraceBuffer.ingest."""

    def test_buffers_until_root(self, make_span):
        printer = RecordingPrinter()
        buffer = TraceBuffer(printer)

        buffer.ingest([make_span(3, 2), make_span(2, 1)])

        assert printer.traces == []
        assert 1 in buffer

    def test_root_hands_over_whole_trace(self, make_span):
        printer = RecordingPrinter()
        buffer = TraceBuffer(printer)
        child, grandchild, sibling = make_span(2, 1), make_span(3, 2), make_span(4, 1)
        root = make_span(1)

        buffer.ingest([grandchild, child])
        buffer.ingest([sibling, root])

        assert len(printer.traces) == 1
        trace = printer.traces[0]
        assert trace[INVALID_SPAN_ID] == [root]
        assert trace[1] == [child, sibling]
        assert trace[2] == [grandchild]
        assert 1 not in buffer
        assert len(buffer) == 0

    def test_remote_parent_is_root(self, make_span):
        printer = RecordingPrinter()
        buffer = TraceBuffer(printer)
        remote_child = make_span(5, 77, remote=True)

        buffer.ingest([make_span(6, 5), remote_child])

        assert len(printer.traces) == 1
        assert printer.traces[0][INVALID_SPAN_ID] == [remote_child]
        assert span_ids(printer.traces[0][5]) == [6]

    def test_traces_are_kept_apart(self, make_span):
        printer = RecordingPrinter()
        buffer = TraceBuffer(printer)

        buffer.ingest([make_span(2, 1, trace_id="a"), make_span(2, 1, trace_id="b"), make_span(1, trace_id="a")])

        assert len(printer.traces) == 1
        assert "a" not in buffer
        assert "b" in buffer

    def test_multiple_roots_print_independently(self, make_span):
        printer = RecordingPrinter()
        buffer = TraceBuffer(printer)

        buffer.ingest([make_span(2, 1), make_span(1), make_span(4, 3), make_span(3)])

        assert len(printer.traces) == 2
        assert span_ids(printer.traces[0][INVALID_SPAN_ID]) == [1]
        assert span_ids(printer.traces[1][INVALID_SPAN_ID]) == [3]
        assert 2 not in [s.span_id for spans in printer.traces[1].values() for s in spans]

    def test_write_error_aborts_rest_of_batch(self, make_span):
        printer = RecordingPrinter(fail_on={1})
        buffer = TraceBuffer(printer)

        with pytest.raises(OSError):
            buffer.ingest([make_span(1, trace_id="a"), make_span(2, 1, trace_id="b"), make_span(1, trace_id="c")])

        assert len(printer.traces) == 1
        assert "b" not in buffer
        assert len(buffer) == 0


class TestDrain:
    """Tests for TraceBuffer.drain."""

    def test_one_orphan_root_per_missing_parent(self, make_span):
        printer = RecordingPrinter()
        buffer = TraceBuffer(printer)
        buffer.ingest([make_span(10, 99), make_span(11, 10), make_span(12, 99), make_span(20, 98)])

        buffer.drain()

        assert len(printer.traces) == 1
        trace = printer.traces[0]
        roots = trace[INVALID_SPAN_ID]
        assert [root.name for root in roots] == ["ORPHANED", "ORPHANED"]
        assert span_ids(roots) == [99, 98]
        assert all(root.duration == 0 for root in roots)
        assert span_ids(trace[99]) == [10, 12]
        assert span_ids(trace[10]) == [11]
        assert span_ids(trace[98]) == [20]
        assert len(buffer) == 0

    def test_every_trace_is_drained(self, make_span):
        printer = RecordingPrinter()
        buffer = TraceBuffer(printer)
        buffer.ingest([make_span(2, 1, trace_id="a"), make_span(2, 1, trace_id="b")])

        buffer.drain()

        assert len(printer.traces) == 2
        assert len(buffer) == 0

    def test_write_errors_are_swallowed(self, make_span, caplog):
        printer = RecordingPrinter(fail_on={1})
        buffer = TraceBuffer(printer)
        buffer.ingest([make_span(2, 1, trace_id="a"), make_span(2, 1, trace_id="b")])

        with caplog.at_level(logging.WARNING, logger="stdout_tree.buffer"):
            buffer.drain()

        assert len(printer.traces) == 2
        assert "Failed to print trace a" in caplog.text

    def test_non_finite_status_code_still_drains(self, make_span, console, output):
        buffer = TraceBuffer(TreePrinter(console, 0.2))
        odd = {"http.method": "GET", "http.status_code": float("nan")}
        buffer.ingest(
            [
                make_span(2, 1, name="odd", trace_id="a", attributes=odd),
                make_span(2, 1, name="later", trace_id="b"),
            ]
        )

        buffer.drain()

        text = output.getvalue()
        assert "IN  odd  GET" in text
        assert "IN  later" in text
        assert len(buffer) == 0

    def test_empty_buffer(self):
        printer = RecordingPrinter()
        TraceBuffer(printer).drain()
        assert printer.traces == []


class TestOrphanRoots:
    """Tests for orphan_roots."""

    def test_known_parents_are_not_orphans(self, make_span):
        trace = {1: [make_span(2, 1)], 2: [make_span(3, 2)]}
        assert span_ids(orphan_roots("t", trace)) == [1]
