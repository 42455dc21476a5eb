"""OpenTelemetry setup for the Trafiklab client.

Providers are built on first use and only when ``OTEL_ENABLED`` is set. Spans
and log records are exported over OTLP/HTTP to the endpoints configured in
``OTEL_EXPORTER_OTLP_TRACES_ENDPOINT`` / ``OTEL_EXPORTER_OTLP_LOGS_ENDPOINT``;
without an endpoint the provider still exists (so spans are recorded and
correlated in logs) but nothing leaves the process.
"""

import threading
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING

import structlog
from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk._logs import LoggerProvider
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import SpanKind, Status, StatusCode

from trafiklab import __version__
from trafiklab.core.config import settings

if TYPE_CHECKING:
    from opentelemetry.trace.span import Span

logger = structlog.get_logger(__name__)

_lock = threading.Lock()
_tracer_provider: TracerProvider | None = None
_logger_provider: LoggerProvider | None = None

# Values accepted by Span.set_attribute
AttributeValue = str | int | float | bool | list[str] | list[int] | list[float] | list[bool]


def parse_otlp_headers(raw: str | None) -> dict[str, str]:
    """
    Parse ``OTEL_EXPORTER_OTLP_HEADERS`` into a dict.

    Args:
        raw: Comma-separated ``name=value`` pairs; values may contain ``=``

    Returns:
        Header mapping; pairs without ``=`` are skipped with a warning

    Example:
        >>> parse_otlp_headers("Authorization=Bearer abc, X-Scope=trafiklab")
        {'Authorization': 'Bearer abc', 'X-Scope': 'trafiklab'}
    """
    headers: dict[str, str] = {}
    for chunk in (raw or "").split(","):
        pair = chunk.strip()
        if not pair:
            continue
        name, sep, value = pair.partition("=")
        if not sep:
            logger.warning("otel_malformed_header", pair=pair)
            continue
        headers[name.strip()] = value.strip()
    return headers


def _resource() -> Resource:
    return Resource(
        attributes={
            "service.name": settings.OTEL_SERVICE_NAME,
            "service.version": __version__,
            "deployment.environment": settings.OTEL_ENVIRONMENT,
        }
    )


def _build_tracer_provider() -> TracerProvider:
    provider = TracerProvider(resource=_resource())
    endpoint = settings.OTEL_EXPORTER_OTLP_TRACES_ENDPOINT
    if endpoint:
        exporter = OTLPSpanExporter(endpoint=endpoint, headers=parse_otlp_headers(settings.OTEL_EXPORTER_OTLP_HEADERS))
        provider.add_span_processor(BatchSpanProcessor(exporter))
        logger.info("otel_tracer_provider_created", endpoint=endpoint, service_name=settings.OTEL_SERVICE_NAME)
    else:
        logger.warning("otel_no_traces_endpoint_configured", message="spans are recorded but not exported")
    return provider


def _build_logger_provider() -> LoggerProvider:
    provider = LoggerProvider(resource=_resource())
    endpoint = settings.OTEL_EXPORTER_OTLP_LOGS_ENDPOINT
    if endpoint:
        exporter = OTLPLogExporter(endpoint=endpoint, headers=parse_otlp_headers(settings.OTEL_EXPORTER_OTLP_HEADERS))
        provider.add_log_record_processor(BatchLogRecordProcessor(exporter))
        logger.info("otel_logger_provider_created", endpoint=endpoint, log_level=settings.OTEL_LOG_LEVEL)
    else:
        logger.warning("otel_no_logs_endpoint_configured", message="log records are not exported")
    return provider


def get_tracer_provider() -> TracerProvider | None:
    """Return the process TracerProvider, creating it on first call; None when OTEL is disabled."""
    global _tracer_provider  # noqa: PLW0603
    if not settings.OTEL_ENABLED:
        return None
    with _lock:
        if _tracer_provider is None:
            _tracer_provider = _build_tracer_provider()
        return _tracer_provider


def get_logger_provider() -> LoggerProvider | None:
    """Return the process LoggerProvider, creating it on first call; None when OTEL is disabled."""
    global _logger_provider  # noqa: PLW0603
    if not settings.OTEL_ENABLED:
        return None
    with _lock:
        if _logger_provider is None:
            _logger_provider = _build_logger_provider()
        return _logger_provider


def setup_telemetry() -> bool:
    """
    Install the providers as the OpenTelemetry globals.

    Returns:
        True if telemetry was installed, False when OTEL is disabled
    """
    tracer_provider = get_tracer_provider()
    logger_provider = get_logger_provider()
    if tracer_provider is None or logger_provider is None:
        return False
    trace.set_tracer_provider(tracer_provider)
    set_logger_provider(logger_provider)
    return True


def shutdown_telemetry() -> None:
    """Flush and shut down whichever providers were created. Safe to call repeatedly."""
    global _tracer_provider, _logger_provider  # noqa: PLW0603
    with _lock:
        tracer_provider, _tracer_provider = _tracer_provider, None
        logger_provider, _logger_provider = _logger_provider, None
    if tracer_provider is not None:
        tracer_provider.shutdown()
    if logger_provider is not None:
        logger_provider.shutdown()  # type: ignore[no-untyped-call]
    if tracer_provider is not None or logger_provider is not None:
        logger.info("otel_shutdown")


@contextmanager
def service_span(
    name: str,
    service: str,
    kind: SpanKind = SpanKind.INTERNAL,
    **attributes: AttributeValue,
) -> Generator["Span"]:
    """Run a block inside a span that ends with an explicit status.

    The span is OK when the block completes. An exception escaping the block
    is recorded on the span and sets ERROR before it propagates.

    Args:
        name: Span name, e.g. ``"trafiklab.request"``
        service: Remote service name, recorded as ``peer.service``
        kind: CLIENT for outbound calls, INTERNAL otherwise
        **attributes: Extra span attributes (dotted names via ``**{...}``)

    Yields:
        The active span
    """
    # Looked up per call so that a provider installed later is picked up
    tracer = trace.get_tracer(__name__, __version__)
    with tracer.start_as_current_span(name, kind=kind, attributes={"peer.service": service, **attributes}) as span:
        yield span
        span.set_status(Status(StatusCode.OK))


def get_current_trace_id() -> str | None:
    """Hex trace ID of the active span, or None outside a valid span."""
    ctx = trace.get_current_span().get_span_context()
    if not ctx.is_valid:
        return None
    return format(ctx.trace_id, "032x")
