"""Tests for logging configuration."""

import io
import json
import logging

import pytest
import structlog
from opentelemetry import trace
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from trafiklab.core.config import settings
from trafiklab.core.logging import _add_otel_context, build_otel_handler, configure_logging

pytestmark = pytest.mark.usefixtures("restore_logging")


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_sets_root_level_and_single_handler(self) -> None:
        """Test that the root logger gets exactly one stream handler at the given level."""
        configure_logging(log_level="warning")

        root_logger = logging.getLogger()
        assert root_logger.level == logging.WARNING
        assert len(root_logger.handlers) == 1
        assert isinstance(root_logger.handlers[0].formatter, structlog.stdlib.ProcessorFormatter)

    def test_noisy_loggers_capped(self) -> None:
        """Test that httpx and httpcore only log warnings and above."""
        configure_logging(log_level="DEBUG")

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_debug_renders_json(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that DEBUG output is one JSON object per event."""
        configure_logging(log_level="DEBUG")

        structlog.get_logger("trafiklab.test").info("trafiklab_request", endpoint="GET /stops/list")

        out = capsys.readouterr().out
        assert '"event": "trafiklab_request"' in out
        assert '"endpoint": "GET /stops/list"' in out

    def test_stream_receives_events_and_stdout_stays_clean(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that events go to the given stream and nothing is written to stdout."""
        stream = io.StringIO()
        configure_logging(log_level="DEBUG", stream=stream)

        structlog.get_logger("trafiklab.test").debug("mock_response_set", endpoint="GET /stops/list")

        event = json.loads(stream.getvalue().splitlines()[-1])
        assert event["event"] == "mock_response_set"
        assert event["level"] == "debug"
        assert capsys.readouterr().out == ""

    def test_no_otel_handler_when_disabled(self) -> None:
        """Test that the OTLP log handler is only attached when OTEL is enabled."""
        configure_logging(log_level="INFO")

        assert not any(isinstance(h, LoggingHandler) for h in logging.getLogger().handlers)

    def test_otel_handler_attached_when_enabled(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that enabling OTEL adds the filtered LoggingHandler."""
        monkeypatch.setattr(settings, "OTEL_ENABLED", True)
        monkeypatch.setattr(settings, "OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", None)

        configure_logging(log_level="INFO")

        otel_handlers = [h for h in logging.getLogger().handlers if isinstance(h, LoggingHandler)]
        assert len(otel_handlers) == 1


class TestOtelHandler:
    """Tests for the attribute-filtering OTLP handler."""

    def test_handler_level(self) -> None:
        """Test that the handler forwards from the given level."""
        handler = build_otel_handler(LoggerProvider(), logging.WARNING)

        assert isinstance(handler, LoggingHandler)
        assert handler.level == logging.WARNING

    def test_drops_structlog_logger_attribute(self) -> None:
        """Test that the _logger attribute never reaches the exporter."""
        handler = build_otel_handler(LoggerProvider(), logging.INFO)
        record = logging.LogRecord("trafiklab", logging.INFO, __file__, 1, "event", None, None)
        record._logger = object()
        record.endpoint = "GET /stops/list"

        attributes = handler._get_attributes(record)  # type: ignore[attr-defined]

        assert attributes is not None
        assert "_logger" not in attributes
        assert attributes["endpoint"] == "GET /stops/list"


class TestOtelContext:
    """Tests for trace correlation in log events."""

    def test_no_ids_outside_a_span(self) -> None:
        """Test that events outside a recording span are left unchanged."""
        event_dict = _add_otel_context(logging.getLogger(), "info", {"event": "x"})
        assert event_dict == {"event": "x"}

    def test_ids_added_inside_a_span(
        self, otel_enabled_provider: tuple[TracerProvider, InMemorySpanExporter]
    ) -> None:
        """Test that trace and span IDs are added inside a recording span."""
        tracer = trace.get_tracer(__name__)
        with tracer.start_as_current_span("test") as span:
            event_dict = _add_otel_context(logging.getLogger(), "info", {"event": "x"})
            ctx = span.get_span_context()

        assert event_dict["trace_id"] == format(ctx.trace_id, "032x")
        assert event_dict["span_id"] == format(ctx.span_id, "016x")
