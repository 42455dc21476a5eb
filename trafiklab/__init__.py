"""Typed contracts and client for the Trafiklab realtime API."""

__version__ = "0.1.0"

from trafiklab.core.exceptions import (
    EndpointParamsError,
    EndpointResponseError,
    MockResponseNotSetError,
    TrafiklabDecodeError,
    TrafiklabError,
    TrafiklabHTTPError,
    UnknownEndpointError,
)
from trafiklab.services.mock_client import MockTrafiklabClient
from trafiklab.services.trafiklab_client import TrafiklabClient
from trafiklab.types.endpoints import (
    Endpoint,
    method_of,
    params_shape_of,
    path_of,
    response_shape_of,
)

__all__ = [
    "Endpoint",
    "EndpointParamsError",
    "EndpointResponseError",
    "MockResponseNotSetError",
    "MockTrafiklabClient",
    "TrafiklabClient",
    "TrafiklabDecodeError",
    "TrafiklabError",
    "TrafiklabHTTPError",
    "UnknownEndpointError",
    "__version__",
    "method_of",
    "params_shape_of",
    "path_of",
    "response_shape_of",
]
