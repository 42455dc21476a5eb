"""Endpoint contract registry for the Trafiklab realtime API.

Each ``Endpoint`` member is the literal ``"<METHOD> <path template>"`` that
identifies one remote operation. ``ENDPOINTS`` maps every member to its
contract: the HTTP method and path template (split out of the identifier),
the params record class and the response envelope class. The projections
``method_of``, ``path_of``, ``params_shape_of`` and ``response_shape_of`` all
read from that one table, and both dispatchers go through them.

Example:
    >>> path_of(Endpoint.DEPARTURES_AT)
    '/departures/{stopId}/{dateTime}'
    >>> response_shape_of("GET /stops/list").__name__
    'NationalStopGroupResponse'
"""

import enum
import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Final, Generic, TypeVar

from trafiklab.core.exceptions import UnknownEndpointError
from trafiklab.schemas.params import (
    AllStopsParams,
    ArrivalsAtTimeParams,
    CurrentArrivalsParams,
    CurrentDeparturesParams,
    DeparturesAtTimeParams,
    EndpointParams,
    StopsByNameParams,
)
from trafiklab.schemas.trafiklab import (
    ArrivalsResponse,
    DeparturesResponse,
    NationalStopGroupResponse,
    TrafiklabModel,
)

ParamsT = TypeVar("ParamsT", bound=EndpointParams)
ResponseT = TypeVar("ResponseT", bound=TrafiklabModel)

_PLACEHOLDER_PATTERN = re.compile(r"\{(\w+)\}")


class Endpoint(str, enum.Enum):
    """The six supported endpoints, identified by method and path template."""

    STOP_SEARCH = "GET /stops/name/{searchValue}"
    STOP_LIST = "GET /stops/list"
    DEPARTURES_NOW = "GET /departures/{stopId}"
    DEPARTURES_AT = "GET /departures/{stopId}/{dateTime}"
    ARRIVALS_NOW = "GET /arrivals/{stopId}"
    ARRIVALS_AT = "GET /arrivals/{stopId}/{dateTime}"


@dataclass(frozen=True)
class EndpointContract(Generic[ParamsT, ResponseT]):
    """Registry entry: how to call an endpoint and what it returns."""

    endpoint: Endpoint
    method: str
    path: str
    params: type[ParamsT]
    response: type[ResponseT]

    @property
    def placeholders(self) -> tuple[str, ...]:
        """Placeholder names in the path template, in order of appearance."""
        return tuple(_PLACEHOLDER_PATTERN.findall(self.path))


def _contract(
    endpoint: Endpoint, params: type[ParamsT], response: type[ResponseT]
) -> EndpointContract[ParamsT, ResponseT]:
    method, path = endpoint.value.split(" ", 1)
    return EndpointContract(endpoint=endpoint, method=method, path=path, params=params, response=response)


ENDPOINTS: Final = MappingProxyType(
    {
        Endpoint.STOP_SEARCH: _contract(Endpoint.STOP_SEARCH, StopsByNameParams, NationalStopGroupResponse),
        Endpoint.STOP_LIST: _contract(Endpoint.STOP_LIST, AllStopsParams, NationalStopGroupResponse),
        Endpoint.DEPARTURES_NOW: _contract(Endpoint.DEPARTURES_NOW, CurrentDeparturesParams, DeparturesResponse),
        Endpoint.DEPARTURES_AT: _contract(Endpoint.DEPARTURES_AT, DeparturesAtTimeParams, DeparturesResponse),
        Endpoint.ARRIVALS_NOW: _contract(Endpoint.ARRIVALS_NOW, CurrentArrivalsParams, ArrivalsResponse),
        Endpoint.ARRIVALS_AT: _contract(Endpoint.ARRIVALS_AT, ArrivalsAtTimeParams, ArrivalsResponse),
    }
)


def resolve_endpoint(endpoint: Endpoint | str) -> Endpoint:
    """
    Coerce an identifier to its ``Endpoint`` member.

    Args:
        endpoint: An ``Endpoint`` member or its literal value
            (e.g. ``"GET /departures/{stopId}"``)

    Returns:
        The matching ``Endpoint`` member

    Raises:
        UnknownEndpointError: If the value is not one of the registered identifiers
    """
    if isinstance(endpoint, Endpoint):
        return endpoint
    try:
        return Endpoint(endpoint)
    except ValueError as e:
        raise UnknownEndpointError(endpoint) from e


def get_contract(endpoint: Endpoint | str) -> EndpointContract[Any, Any]:
    """Return the registry entry for an endpoint."""
    return ENDPOINTS[resolve_endpoint(endpoint)]


def method_of(endpoint: Endpoint | str) -> str:
    """HTTP method of an endpoint (e.g. ``"GET"``)."""
    return get_contract(endpoint).method


def path_of(endpoint: Endpoint | str) -> str:
    """Path template of an endpoint, placeholders included."""
    return get_contract(endpoint).path


def params_shape_of(endpoint: Endpoint | str) -> type[EndpointParams]:
    """Params record class accepted by an endpoint."""
    params: type[EndpointParams] = get_contract(endpoint).params
    return params


def response_shape_of(endpoint: Endpoint | str) -> type[TrafiklabModel]:
    """Response envelope class returned by an endpoint."""
    response: type[TrafiklabModel] = get_contract(endpoint).response
    return response


def path_placeholders(endpoint: Endpoint | str) -> tuple[str, ...]:
    """Placeholder names in an endpoint's path template, in order."""
    return get_contract(endpoint).placeholders
