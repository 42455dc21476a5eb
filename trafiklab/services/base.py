"""Dispatch interface shared by the live and mock Trafiklab clients."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Literal, overload

from trafiklab.core.exceptions import EndpointParamsError
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
from trafiklab.types.endpoints import Endpoint, EndpointContract, get_contract


class BaseTrafiklabClient(ABC):
    """Typed ``request`` entry point plus convenience methods for each endpoint.

    Subclasses implement ``_dispatch``, which receives the registry entry and
    a params record already checked against it.
    """

    @overload
    async def request(
        self, endpoint: Literal[Endpoint.STOP_SEARCH], params: StopsByNameParams
    ) -> NationalStopGroupResponse: ...

    @overload
    async def request(
        self, endpoint: Literal[Endpoint.STOP_LIST], params: AllStopsParams
    ) -> NationalStopGroupResponse: ...

    @overload
    async def request(
        self, endpoint: Literal[Endpoint.DEPARTURES_NOW], params: CurrentDeparturesParams
    ) -> DeparturesResponse: ...

    @overload
    async def request(
        self, endpoint: Literal[Endpoint.DEPARTURES_AT], params: DeparturesAtTimeParams
    ) -> DeparturesResponse: ...

    @overload
    async def request(
        self, endpoint: Literal[Endpoint.ARRIVALS_NOW], params: CurrentArrivalsParams
    ) -> ArrivalsResponse: ...

    @overload
    async def request(
        self, endpoint: Literal[Endpoint.ARRIVALS_AT], params: ArrivalsAtTimeParams
    ) -> ArrivalsResponse: ...

    @overload
    async def request(self, endpoint: Endpoint | str, params: EndpointParams) -> TrafiklabModel: ...

    async def request(self, endpoint: Endpoint | str, params: EndpointParams) -> TrafiklabModel:
        """
        Call an endpoint with its params record.

        Args:
            endpoint: Endpoint identifier (member or literal value)
            params: Instance of the params class registered for the endpoint

        Returns:
            Instance of the response envelope registered for the endpoint

        Raises:
            UnknownEndpointError: If the endpoint is not registered
            EndpointParamsError: If params is not of the registered params class
        """
        contract = get_contract(endpoint)
        check_params(contract, params)
        return await self._dispatch(contract, params)

    @abstractmethod
    async def _dispatch(self, contract: EndpointContract[Any, Any], params: EndpointParams) -> TrafiklabModel:
        """Produce the response for an already-validated call."""

    # ==================== Convenience Methods ====================

    async def search_stops(self, search_value: str, api_key: str | None = None) -> NationalStopGroupResponse:
        """List stop groups whose name matches ``search_value``."""
        return await self.request(Endpoint.STOP_SEARCH, StopsByNameParams(search_value=search_value, key=api_key))

    async def get_all_stops(self, api_key: str | None = None) -> NationalStopGroupResponse:
        """List all stop groups."""
        return await self.request(Endpoint.STOP_LIST, AllStopsParams(key=api_key))

    async def get_departures(self, stop_id: str, api_key: str | None = None) -> DeparturesResponse:
        """Current departures from a stop."""
        return await self.request(Endpoint.DEPARTURES_NOW, CurrentDeparturesParams(stop_id=stop_id, key=api_key))

    async def get_departures_at_time(
        self, stop_id: str, date_time: str | datetime, api_key: str | None = None
    ) -> DeparturesResponse:
        """Departures from a stop around ``date_time``."""
        params = DeparturesAtTimeParams(stop_id=stop_id, date_time=date_time, key=api_key)  # type: ignore[arg-type]
        return await self.request(Endpoint.DEPARTURES_AT, params)

    async def get_arrivals(self, stop_id: str, api_key: str | None = None) -> ArrivalsResponse:
        """Current arrivals at a stop."""
        return await self.request(Endpoint.ARRIVALS_NOW, CurrentArrivalsParams(stop_id=stop_id, key=api_key))

    async def get_arrivals_at_time(
        self, stop_id: str, date_time: str | datetime, api_key: str | None = None
    ) -> ArrivalsResponse:
        """Arrivals at a stop around ``date_time``."""
        params = ArrivalsAtTimeParams(stop_id=stop_id, date_time=date_time, key=api_key)  # type: ignore[arg-type]
        return await self.request(Endpoint.ARRIVALS_AT, params)


def check_params(contract: EndpointContract[Any, Any], params: object) -> None:
    """Raise EndpointParamsError unless params is an instance of the contract's params class."""
    if not isinstance(params, contract.params):
        raise EndpointParamsError(contract.endpoint.value, contract.params, type(params))
