"""Logging configuration.

structlog events and plain stdlib records (httpx, OTLP exporters) are
rendered by one ``ProcessorFormatter`` on a single stream handler (stdout
unless the caller passes another stream; the CLI uses stderr). DEBUG
renders JSON lines; other levels use the console renderer. With OTEL enabled
a second handler forwards records to the OpenTelemetry LoggerProvider.
"""

import logging
import sys
from collections.abc import MutableMapping
from typing import TYPE_CHECKING, Any, TextIO

import structlog
from opentelemetry import trace

if TYPE_CHECKING:
    from opentelemetry.sdk._logs import LoggerProvider

# Record attributes that structlog adds and the OTLP exporter cannot encode
OTEL_DROPPED_ATTRIBUTES = frozenset({"_logger"})

# Third-party loggers kept at WARNING regardless of the configured level
QUIET_LOGGERS = ("httpx", "httpcore", "opentelemetry.exporter.otlp.proto.http")


def _add_otel_context(
    logger: logging.Logger, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Attach ``trace_id`` / ``span_id`` when logging inside a recording span."""
    span = trace.get_current_span()
    if span.is_recording():
        ctx = span.get_span_context()
        event_dict["trace_id"] = format(ctx.trace_id, "032x")
        event_dict["span_id"] = format(ctx.span_id, "016x")
    return event_dict


def build_otel_handler(logger_provider: "LoggerProvider", level: int) -> logging.Handler:
    """
    Create an OTEL LoggingHandler that drops structlog's non-serializable attributes.

    The SDK handler does not run formatters, so without filtering the bound
    ``_logger`` object would reach the exporter
    (https://github.com/open-telemetry/opentelemetry-python/issues/3649).

    Args:
        logger_provider: Provider the records are emitted to
        level: Minimum level forwarded

    Returns:
        Handler ready to add to the root logger
    """
    from opentelemetry.sdk._logs import LoggingHandler  # noqa: PLC0415

    class FilteredLoggingHandler(LoggingHandler):
        @staticmethod
        def _get_attributes(record: logging.LogRecord) -> Any:  # noqa: ANN401
            attributes = LoggingHandler._get_attributes(record)
            if attributes is None:
                return None
            return {k: v for k, v in attributes.items() if k not in OTEL_DROPPED_ATTRIBUTES}

    return FilteredLoggingHandler(level=level, logger_provider=logger_provider)


def configure_logging(*, log_level: str = "INFO", stream: TextIO | None = None) -> None:
    """
    Route structlog and stdlib logging through one formatter.

    Args:
        log_level: Root log level name, case-insensitive
        stream: Where log lines are written (default: sys.stdout at call time)
    """
    level_name = log_level.upper()
    pre_chain: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_otel_context,
    ]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if level_name == "DEBUG" else structlog.dev.ConsoleRenderer(colors=True)
    )
    stream_handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    stream_handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(stream_handler)
    root.setLevel(logging.getLevelNamesMapping()[level_name])

    # Imported here: telemetry logs through structlog while building providers
    from trafiklab.core.config import settings  # noqa: PLC0415
    from trafiklab.core.telemetry import get_logger_provider  # noqa: PLC0415

    if logger_provider := get_logger_provider():
        otel_level = logging.getLevelNamesMapping()[settings.OTEL_LOG_LEVEL]
        root.addHandler(build_otel_handler(logger_provider, otel_level))
        structlog.get_logger(__name__).info("otel_logging_handler_attached", level=settings.OTEL_LOG_LEVEL)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
