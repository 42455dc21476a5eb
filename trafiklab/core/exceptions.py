"""Exceptions raised by the Trafiklab contract layer and dispatchers.

Transport failures (unreachable host, timeouts) are not wrapped: the
``httpx`` exception reaches the caller unchanged.
"""

from typing import Any


class TrafiklabError(Exception):
    """Base class for every error raised by this package."""


class TrafiklabHTTPError(TrafiklabError):
    """The remote service answered with a non-2xx status.

    Missing or invalid API keys surface through this error (status 401).
    """

    def __init__(self, status_code: int, reason: str, endpoint: str | None = None) -> None:
        self.status_code = status_code
        self.reason = reason
        self.endpoint = endpoint
        super().__init__(f"HTTP {status_code}: {reason}")


class TrafiklabDecodeError(TrafiklabError):
    """A successful response body could not be decoded into the declared shape."""

    def __init__(self, endpoint: str, detail: str) -> None:
        self.endpoint = endpoint
        self.detail = detail
        super().__init__(f"Could not decode response for endpoint {endpoint}: {detail}")


class MockResponseNotSetError(TrafiklabError):
    """The mock dispatcher has no stored response for the requested endpoint."""

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        super().__init__(f"No mock response set for endpoint: {endpoint}")


class UnknownEndpointError(TrafiklabError, KeyError):
    """The value is not one of the registered endpoint identifiers."""

    def __init__(self, value: Any) -> None:  # noqa: ANN401
        self.value = value
        super().__init__(f"Unknown endpoint: {value!r}")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class EndpointParamsError(TrafiklabError, TypeError):
    """A params record does not match the shape declared for the endpoint."""

    def __init__(self, endpoint: str, expected: type, actual: type) -> None:
        self.endpoint = endpoint
        self.expected = expected
        self.actual = actual
        super().__init__(f"Endpoint {endpoint} expects params of type {expected.__name__}, got {actual.__name__}")


class EndpointResponseError(TrafiklabError, TypeError):
    """A mock response does not match the shape declared for the endpoint."""

    def __init__(self, endpoint: str, expected: type, actual: type) -> None:
        self.endpoint = endpoint
        self.expected = expected
        self.actual = actual
        super().__init__(f"Endpoint {endpoint} returns {expected.__name__}, got {actual.__name__}")
