"""
Span records as the tree exporter sees them.

A record is an immutable snapshot of a finished span. Records are built
either from SDK `ReadableSpan` objects or from rows of a telemetry DB.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple, Union

from opentelemetry.trace import SpanKind, StatusCode

# Parent id meaning "no parent".
INVALID_SPAN_ID = 0

SpanId = Union[int, str]
TraceId = Union[int, str]
AttributeValue = Union[str, int, float, bool, tuple]


def _freeze(attributes) -> Mapping[str, AttributeValue]:
    return MappingProxyType(dict(attributes) if attributes else {})


@dataclass(frozen=True)
class SpanEvent:
    """A zero-duration point inside a span."""

    name: str
    timestamp: int
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "attributes", _freeze(self.attributes))


@dataclass(frozen=True)
class SpanRecord:
    trace_id: TraceId
    span_id: SpanId
    parent_span_id: SpanId
    name: str
    start_time: int
    end_time: int
    kind: SpanKind = SpanKind.INTERNAL
    parent_is_remote: bool = False
    attributes: Mapping[str, AttributeValue] = field(default_factory=dict)
    status_code: StatusCode = StatusCode.UNSET
    status_message: str = ""
    events: Tuple[SpanEvent, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "attributes", _freeze(self.attributes))
        object.__setattr__(self, "events", tuple(self.events))

    @property
    def is_root(self) -> bool:
        """A root has no parent, or a parent living in another process."""
        return self.parent_span_id == INVALID_SPAN_ID or self.parent_is_remote

    @property
    def duration(self) -> int:
        return max(0, self.end_time - self.start_time)

    @classmethod
    def from_readable_span(cls, span) -> "SpanRecord":
        """Snapshot an SDK `ReadableSpan`."""
        parent = span.parent
        start_time = span.start_time or 0
        end_time = span.end_time if span.end_time is not None else start_time
        status = span.status
        events = tuple(
            SpanEvent(name=event.name, timestamp=event.timestamp, attributes=event.attributes)
            for event in span.events
        )
        return cls(
            trace_id=span.context.trace_id,
            span_id=span.context.span_id,
            parent_span_id=parent.span_id if parent is not None else INVALID_SPAN_ID,
            parent_is_remote=bool(parent is not None and parent.is_remote),
            kind=span.kind,
            name=span.name,
            start_time=start_time,
            end_time=end_time,
            attributes=span.attributes,
            status_code=status.status_code,
            status_message=status.description or "",
            events=events,
        )

    @classmethod
    def orphaned(cls, trace_id: TraceId, span_id: SpanId, timestamp: int) -> "SpanRecord":
        """Placeholder root for a parent that was referenced but never exported."""
        return cls(
            trace_id=trace_id,
            span_id=span_id,
            parent_span_id=INVALID_SPAN_ID,
            name="ORPHANED",
            start_time=timestamp,
            end_time=timestamp,
        )
