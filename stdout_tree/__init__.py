"""
Print finished OpenTelemetry traces as trees on the console.
"""

__version__ = "0.1.0"

from .buffer import TraceBuffer
from .exporters.stdout_tree import StdoutTreeExporter
from .model import INVALID_SPAN_ID, SpanEvent, SpanRecord
from .telemetry import InstalledPipeline, StdoutTreePipelineBuilder, new_pipeline

__all__ = [
    "INVALID_SPAN_ID",
    "InstalledPipeline",
    "SpanEvent",
    "SpanRecord",
    "StdoutTreeExporter",
    "StdoutTreePipelineBuilder",
    "TraceBuffer",
    "new_pipeline",
]
