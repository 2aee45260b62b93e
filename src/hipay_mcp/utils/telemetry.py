"""Tracing for tool calls and HiPay requests.

Spans are opened through the OpenTelemetry API and stay no-ops until
:func:`configure_telemetry` installs an SDK provider (``hipay-mcp[otel]``).
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from opentelemetry import trace

if TYPE_CHECKING:
    from opentelemetry.sdk.trace import SpanProcessor

TRACER_NAME = "hipay_mcp"
SERVICE_NAME = "hipay-mcp"

# Span attribute keys
ATTR_TOOL_NAME = "hipay.tool.name"
ATTR_TOOL_OUTCOME = "hipay.tool.outcome"
ATTR_ERROR_NAME = "hipay.error.name"
ATTR_ENVIRONMENT = "hipay.environment"
ATTR_HTTP_METHOD = "hipay.http.method"
ATTR_HTTP_ENDPOINT = "hipay.http.endpoint"
ATTR_HTTP_STATUS = "hipay.http.status_code"

_INSTALL_HINT = "Install it with: pip install hipay-mcp[otel]"


def get_tracer(name: str | None = None) -> trace.Tracer:
    return trace.get_tracer(name or TRACER_NAME)


def configure_telemetry(*, console: bool = True, otlp_endpoint: str | None = None) -> None:
    """Install a tracer provider exporting to stderr and/or an OTLP collector.

    Raises:
        ImportError: If the ``otel`` extra is not installed.
    """
    try:
        from opentelemetry.sdk.resources import Resource
        from opentelemetry.sdk.trace import TracerProvider
    except ImportError as exc:
        msg = f"opentelemetry-sdk is required for tracing. {_INSTALL_HINT}"
        raise ImportError(msg) from exc

    provider = TracerProvider(resource=Resource.create({"service.name": SERVICE_NAME}))
    for processor in _span_processors(console, otlp_endpoint):
        provider.add_span_processor(processor)
    trace.set_tracer_provider(provider)


def _span_processors(console: bool, otlp_endpoint: str | None) -> list[SpanProcessor]:
    from opentelemetry.sdk.trace.export import (
        BatchSpanProcessor,
        ConsoleSpanExporter,
        SimpleSpanProcessor,
    )

    processors: list[SpanProcessor] = []
    if console:
        # stdout carries the MCP stdio transport
        processors.append(SimpleSpanProcessor(ConsoleSpanExporter(out=sys.stderr)))
    if otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        except ImportError as exc:
            msg = f"opentelemetry-exporter-otlp is required for OTLP export. {_INSTALL_HINT}"
            raise ImportError(msg) from exc
        processors.append(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    return processors
