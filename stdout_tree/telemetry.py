"""
Pipeline setup for the stdout tree exporter.

    with new_pipeline().with_timing_column_width(0.5).install_simple() as tracer:
        with tracer.start_as_current_span("root"):
            ...

Features:
- `new_pipeline()` builder for the tracer provider and exporter
- `install_simple` prints spans as they end, `install_batch` exports in the background
- optional registration as the global tracer provider
"""

import logging
import threading
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, SimpleSpanProcessor
from opentelemetry.sdk.trace.sampling import Sampler
from rich.console import Console

from . import __version__
from .exporters.stdout_tree import StdoutTreeExporter

logger = logging.getLogger(__name__)

TRACER_NAME = "stdout-tree"


class InstalledPipeline:
    """A tracer provider wired to a StdoutTreeExporter."""

    def __init__(self, provider: TracerProvider, exporter: StdoutTreeExporter):
        self.provider = provider
        self.exporter = exporter
        self.tracer = provider.get_tracer(TRACER_NAME, __version__)
        self._closed = False
        self._lock = threading.Lock()

    def shutdown(self) -> None:
        """Flush the span processor and print whatever traces are left."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self.provider.shutdown()

    def __enter__(self):
        return self.tracer

    def __exit__(self, exc_type, exc, tb):
        self.shutdown()
        return False


class StdoutTreePipelineBuilder:
    def __init__(self):
        self._timing_column_width: Optional[float] = None
        self._resource: Optional[Resource] = None
        self._sampler: Optional[Sampler] = None
        self._console: Optional[Console] = None

    def with_timing_column_width(self, fraction: float) -> "StdoutTreePipelineBuilder":
        """Fraction (0 to 1) of the terminal width used by the timing bars."""
        self._timing_column_width = fraction
        return self

    def with_resource(self, resource: Resource) -> "StdoutTreePipelineBuilder":
        self._resource = resource
        return self

    def with_sampler(self, sampler: Sampler) -> "StdoutTreePipelineBuilder":
        self._sampler = sampler
        return self

    def with_console(self, console: Console) -> "StdoutTreePipelineBuilder":
        self._console = console
        return self

    def _install(self, processor_cls, set_global: bool) -> InstalledPipeline:
        exporter = StdoutTreeExporter(self._console, self._timing_column_width)
        kwargs = {}
        if self._resource is not None:
            kwargs["resource"] = self._resource
        if self._sampler is not None:
            kwargs["sampler"] = self._sampler
        provider = TracerProvider(**kwargs)
        provider.add_span_processor(processor_cls(exporter))
        if set_global:
            trace.set_tracer_provider(provider)
        logger.debug(
            "Installed %s with timing column width %.2f",
            processor_cls.__name__,
            exporter.printer.timing_column_width,
        )
        return InstalledPipeline(provider, exporter)

    def install_simple(self, set_global: bool = True) -> InstalledPipeline:
        """Export every span synchronously as it ends."""
        return self._install(SimpleSpanProcessor, set_global)

    def install_batch(self, set_global: bool = True) -> InstalledPipeline:
        """Export spans in batches from a background thread."""
        return self._install(BatchSpanProcessor, set_global)


def new_pipeline() -> StdoutTreePipelineBuilder:
    return StdoutTreePipelineBuilder()
