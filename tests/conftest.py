"""Pytest configuration and fixtures."""

import os

# Configure the environment BEFORE any trafiklab imports load settings
os.environ["DEBUG"] = "true"
os.environ["OTEL_ENABLED"] = "false"
os.environ.pop("SECRET_TRAFIKLAB_API_KEY", None)

import logging
from collections.abc import AsyncGenerator, Generator

import pytest
import structlog

from tests.helpers.mock_server import MOCK_BASE_URL, MockTrafiklabServer
from trafiklab.core.config import Settings, settings
from trafiklab.services.mock_client import MockTrafiklabClient
from trafiklab.services.trafiklab_client import TrafiklabClient

pytest_plugins = ["tests.fixtures.otel"]


def configure_test_logging() -> None:
    """
    Hand structlog events to stdlib logging instead of printing them.

    structlog's default PrintLogger writes to stdout, which would mix log
    events into the output that CLI tests parse as JSON. Routed through
    stdlib logging, events land in pytest's log capture.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.render_to_log_kwargs,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


configure_test_logging()


@pytest.fixture
def restore_logging() -> Generator[None]:
    """Undo configure_logging(): restore pytest's root handlers and the test structlog setup."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level

    yield

    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    configure_test_logging()


@pytest.fixture(autouse=True)
def no_default_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure a key from a developer's .env never leaks into tests."""
    monkeypatch.setattr(settings, "TRAFIKLAB_API_KEY", None)


@pytest.fixture
def settings_fixture() -> Settings:
    """
    Provide settings instance for tests.

    Returns:
        Settings instance
    """
    return settings


@pytest.fixture
def mock_server() -> MockTrafiklabServer:
    """Simulated Trafiklab API that records incoming requests."""
    return MockTrafiklabServer()


@pytest.fixture
async def live_client(mock_server: MockTrafiklabServer) -> AsyncGenerator[TrafiklabClient]:
    """
    TrafiklabClient wired to the simulated API, with no default key.

    Yields:
        TrafiklabClient dispatching over httpx.MockTransport
    """
    client = TrafiklabClient(base_url=MOCK_BASE_URL, transport=mock_server.transport)
    yield client
    await client.aclose()


@pytest.fixture
def mock_client() -> Generator[MockTrafiklabClient]:
    """
    MockTrafiklabClient cleared after each test.

    Yields:
        Empty MockTrafiklabClient
    """
    client = MockTrafiklabClient()
    yield client
    client.clear()
