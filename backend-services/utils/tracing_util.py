"""
Tracing observers for the translation pipeline.

The gateway wraps each stage (authentication, endpoint resolution, variable
extraction, GraphQL execution) in a span through an observer. Observers never
change control flow: NoopObserver is used in tests and when tracing is off,
OpenTelemetryObserver when an OTLP endpoint is configured.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator, Mapping, Optional, Protocol

from opentelemetry import propagate, trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.propagators.b3 import B3MultiFormat
from opentelemetry.propagators.composite import CompositePropagator
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.trace import Span, Status, StatusCode
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from utils.constants import Defaults

logger = logging.getLogger('restified.gateway')


class TranslationObserver(Protocol):
    def span(
        self,
        name: str,
        attributes: Optional[Mapping[str, Any]] = None,
        carrier: Optional[Mapping[str, str]] = None,
    ) -> Any:
        """Context manager yielding a span for one pipeline stage.

        `carrier` holds inbound headers; when given, trace context is
        extracted from it and used as the parent of the new span.
        """
        ...


class NoopObserver:
    """Observer that records nothing. Yields the invalid (non-recording) span."""

    @contextmanager
    def span(
        self,
        name: str,
        attributes: Optional[Mapping[str, Any]] = None,
        carrier: Optional[Mapping[str, str]] = None,
    ) -> Iterator[Span]:
        yield trace.INVALID_SPAN


class OpenTelemetryObserver:
    def __init__(self, tracer: Optional[trace.Tracer] = None) -> None:
        self.tracer = tracer or trace.get_tracer('restified.gateway')

    @contextmanager
    def span(
        self,
        name: str,
        attributes: Optional[Mapping[str, Any]] = None,
        carrier: Optional[Mapping[str, str]] = None,
    ) -> Iterator[Span]:
        parent = propagate.extract(dict(carrier)) if carrier is not None else None
        attrs = {'internal.visibility': 'user'}
        attrs.update(_clean_attributes(attributes))
        with self.tracer.start_as_current_span(name, context=parent, attributes=attrs) as span:
            yield span


def _clean_attributes(attributes: Optional[Mapping[str, Any]]) -> dict:
    cleaned = {}
    for key, value in (attributes or {}).items():
        if value is None:
            continue
        if isinstance(value, (str, bool, int, float)):
            cleaned[key] = value
        else:
            cleaned[key] = str(value)
    return cleaned


def mark_error(span: Span, message: str) -> None:
    span.set_status(Status(StatusCode.ERROR, message))


def mark_ok(span: Span) -> None:
    span.set_status(Status(StatusCode.OK))


def configure_tracing(
    endpoint: Optional[str],
    pat: Optional[str] = None,
    service_name: str = Defaults.SERVICE_NAME,
) -> TranslationObserver:
    """Install a global tracer provider exporting to `endpoint` over OTLP/HTTP.

    Propagation uses W3C trace context plus multi-header B3. Returns a
    NoopObserver when no endpoint is configured.
    """
    if not endpoint:
        return NoopObserver()

    propagate.set_global_textmap(
        CompositePropagator([TraceContextTextMapPropagator(), B3MultiFormat()])
    )
    headers = {'Authorization': f'pat {pat}'} if pat else {}
    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(SimpleSpanProcessor(OTLPSpanExporter(endpoint=endpoint, headers=headers)))
    trace.set_tracer_provider(provider)
    logger.info(f'Tracing enabled: exporting spans to {endpoint}')
    return OpenTelemetryObserver(provider.get_tracer('restified.gateway'))
