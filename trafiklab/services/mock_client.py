"""In-memory Trafiklab client for tests.

Responses are programmed per endpoint with ``set_mock_response``; ``request``
returns whatever was stored for the endpoint and never touches the network.
An endpoint with no stored response fails loudly so that missing test setup
cannot pass as an empty result.
"""

from typing import Any, Literal, overload

import structlog

from trafiklab.core.exceptions import EndpointResponseError, MockResponseNotSetError
from trafiklab.schemas.params import EndpointParams
from trafiklab.schemas.trafiklab import (
    ArrivalsResponse,
    DeparturesResponse,
    NationalStopGroupResponse,
    TrafiklabModel,
)
from trafiklab.services.base import BaseTrafiklabClient
from trafiklab.types.endpoints import Endpoint, EndpointContract, get_contract

logger = structlog.get_logger(__name__)


class MockTrafiklabClient(BaseTrafiklabClient):
    """Endpoint-keyed store of canned responses.

    At most one response is held per endpoint; setting another replaces it.
    Params passed to ``request`` are type-checked against the registry but
    otherwise ignored.
    """

    def __init__(self) -> None:
        self._responses: dict[Endpoint, TrafiklabModel] = {}

    @overload
    def set_mock_response(
        self, endpoint: Literal[Endpoint.STOP_SEARCH, Endpoint.STOP_LIST], response: NationalStopGroupResponse
    ) -> None: ...

    @overload
    def set_mock_response(
        self, endpoint: Literal[Endpoint.DEPARTURES_NOW, Endpoint.DEPARTURES_AT], response: DeparturesResponse
    ) -> None: ...

    @overload
    def set_mock_response(
        self, endpoint: Literal[Endpoint.ARRIVALS_NOW, Endpoint.ARRIVALS_AT], response: ArrivalsResponse
    ) -> None: ...

    @overload
    def set_mock_response(self, endpoint: Endpoint | str, response: TrafiklabModel) -> None: ...

    def set_mock_response(self, endpoint: Endpoint | str, response: TrafiklabModel) -> None:
        """
        Store the response returned for an endpoint, replacing any previous one.

        Raises:
            UnknownEndpointError: If the endpoint is not registered
            EndpointResponseError: If response is not the endpoint's envelope type
        """
        contract = get_contract(endpoint)
        if not isinstance(response, contract.response):
            raise EndpointResponseError(contract.endpoint.value, contract.response, type(response))
        self._responses[contract.endpoint] = response
        logger.debug("mock_response_set", endpoint=contract.endpoint.value)

    def has_mock_response(self, endpoint: Endpoint | str) -> bool:
        """Whether a response is stored for the endpoint."""
        return get_contract(endpoint).endpoint in self._responses

    def clear(self) -> None:
        """Forget every stored response."""
        self._responses.clear()

    async def _dispatch(self, contract: EndpointContract[Any, Any], params: EndpointParams) -> TrafiklabModel:
        try:
            return self._responses[contract.endpoint]
        except KeyError:
            raise MockResponseNotSetError(contract.endpoint.value) from None
