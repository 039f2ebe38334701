"""Tracing for chatgbt turns and model calls.

Spans go through the OpenTelemetry API only. Until :func:`configure_telemetry`
installs an SDK provider they are no-ops, so the core never needs the SDK.
"""

from __future__ import annotations

import logging

from opentelemetry import trace

from chatgbt import __version__

logger = logging.getLogger(__name__)

# Span attribute keys
ATTR_MODEL = "chatgbt.model"
ATTR_PROVIDER = "chatgbt.provider"
ATTR_TOKENS_PROMPT = "chatgbt.tokens.prompt"
ATTR_TOKENS_COMPLETION = "chatgbt.tokens.completion"
ATTR_TOKENS_TOTAL = "chatgbt.tokens.total"
ATTR_FINISH_REASON = "chatgbt.finish_reason"
ATTR_SESSION_ID = "chatgbt.session.id"
ATTR_PROMPT_TYPE = "chatgbt.prompt_type"
ATTR_PRUNED = "chatgbt.context.pruned"
ATTR_MESSAGE_COUNT = "chatgbt.context.messages"
ATTR_SUCCESS = "chatgbt.success"
ATTR_ERROR_TYPE = "chatgbt.error_type"

_INSTRUMENTATION_NAME = "chatgbt"


def get_tracer(name: str | None = None) -> trace.Tracer:
    """Return the tracer for *name*, versioned with the package."""
    return trace.get_tracer(name or _INSTRUMENTATION_NAME, __version__)


def configure_telemetry(otlp_endpoint: str, *, service_name: str = "chatgbt") -> None:
    """Send spans to an OTLP/gRPC collector at *otlp_endpoint*.

    Needs the ``otel`` extra (``pip install chatgbt[otel]``); without it an
    :class:`ImportError` names the extra.
    """
    try:
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.resources import Resource  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace import TracerProvider  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
        from opentelemetry.sdk.trace.export import BatchSpanProcessor  # pyright: ignore[reportMissingImports,reportUnknownVariableType]
    except ImportError as exc:
        msg = f"OTLP export needs the otel extra (pip install chatgbt[otel]): {exc}"
        raise ImportError(msg) from exc

    resource = Resource.create({"service.name": service_name, "service.version": __version__})  # pyright: ignore[reportUnknownVariableType,reportUnknownMemberType]
    provider = TracerProvider(resource=resource)  # pyright: ignore[reportUnknownVariableType]
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))  # pyright: ignore[reportUnknownMemberType]
    trace.set_tracer_provider(provider)  # pyright: ignore[reportUnknownArgumentType]
    logger.debug("Exporting spans to %s as %s", otlp_endpoint, service_name)
