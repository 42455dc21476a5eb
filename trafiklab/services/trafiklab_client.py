"""Live HTTP client for the Trafiklab realtime API."""

from types import TracebackType
from typing import Any, Self
from urllib.parse import quote

import httpx
import structlog
from opentelemetry.trace import SpanKind
from pydantic import ValidationError

from trafiklab.core.config import settings
from trafiklab.core.exceptions import TrafiklabDecodeError, TrafiklabHTTPError
from trafiklab.core.telemetry import service_span
from trafiklab.schemas.params import EndpointParams
from trafiklab.schemas.trafiklab import TrafiklabModel
from trafiklab.services.base import BaseTrafiklabClient, check_params
from trafiklab.types.endpoints import Endpoint, EndpointContract, get_contract

logger = structlog.get_logger(__name__)

# Characters left unescaped in path segments; ISO times keep their colons
PATH_SAFE_CHARS = ":"


class TrafiklabClient(BaseTrafiklabClient):
    """Client that dispatches endpoint calls over HTTP.

    Each call is one outbound request: no retries, no caching. Timeouts are
    the transport's (``timeout`` / ``REQUEST_TIMEOUT``); transport failures
    propagate unchanged.

    Example:
        async with TrafiklabClient(api_key="...") as client:
            board = await client.request(
                Endpoint.DEPARTURES_NOW, CurrentDeparturesParams(stop_id="740020101")
            )
    """

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        *,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: API root (default: TRAFIKLAB_BASE_URL setting)
            api_key: Default API key, used when a params record has no ``key``
                (default: TRAFIKLAB_API_KEY setting)
            timeout: Transport timeout in seconds (default: REQUEST_TIMEOUT setting)
            http_client: Pre-built AsyncClient; the caller keeps ownership
            transport: Transport for the internally created AsyncClient
        """
        self.base_url = (base_url or settings.TRAFIKLAB_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.TRAFIKLAB_API_KEY
        self.timeout = timeout if timeout is not None else settings.REQUEST_TIMEOUT
        self._transport = transport
        self._http_client = http_client
        self._owns_http_client = http_client is None

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self._http_client

    async def aclose(self) -> None:
        """Close the underlying AsyncClient if this client created it."""
        if self._http_client is not None and self._owns_http_client:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def build_request_target(self, endpoint: Endpoint | str, params: EndpointParams) -> tuple[str, dict[str, str]]:
        """
        Build the concrete path and query parameters for a call.

        Every placeholder in the path template is replaced by the matching
        params field; the remaining fields go to the query string. The
        per-call ``key`` wins over the client's default key; when neither is
        set no ``key`` is sent.

        Args:
            endpoint: Endpoint identifier
            params: Params record for that endpoint

        Returns:
            Tuple of (path, query parameters)

        Example:
            >>> client.build_request_target(
            ...     Endpoint.DEPARTURES_AT,
            ...     DeparturesAtTimeParams(stop_id="740020101", date_time="2025-03-31T16:30", key="k"),
            ... )
            ('/departures/740020101/2025-03-31T16:30', {'key': 'k'})
        """
        contract = get_contract(endpoint)
        check_params(contract, params)

        values: dict[str, str] = {
            name: str(value) for name, value in params.model_dump(by_alias=True, exclude_none=True).items()
        }
        if "key" not in values and self.api_key:
            values["key"] = self.api_key

        path = contract.path
        for name in contract.placeholders:
            path = path.replace(f"{{{name}}}", quote(values.pop(name), safe=PATH_SAFE_CHARS))
        return path, values

    async def _dispatch(self, contract: EndpointContract[Any, Any], params: EndpointParams) -> TrafiklabModel:
        path, query = self.build_request_target(contract.endpoint, params)
        endpoint_name = contract.endpoint.value

        logger.debug("trafiklab_request", endpoint=endpoint_name, path=path, has_key="key" in query)

        with service_span(
            "trafiklab.request",
            "trafiklab",
            kind=SpanKind.CLIENT,
            **{
                "trafiklab.endpoint": endpoint_name,
                "http.request.method": contract.method,
                "url.path": path,
            },
        ) as span:
            try:
                response = await self._get_http_client().request(
                    contract.method,
                    f"{self.base_url}{path}",
                    params=query,
                )
            except httpx.TransportError as e:
                logger.error("trafiklab_transport_error", endpoint=endpoint_name, error=str(e))
                raise

            span.set_attribute("http.response.status_code", response.status_code)

            if not response.is_success:
                logger.error(
                    "trafiklab_api_error",
                    endpoint=endpoint_name,
                    status=response.status_code,
                    reason=response.reason_phrase,
                )
                raise TrafiklabHTTPError(response.status_code, response.reason_phrase, endpoint=endpoint_name)

            result = self._decode(contract, response)
            logger.debug("trafiklab_response_decoded", endpoint=endpoint_name, status=response.status_code)
            return result

    def _decode(self, contract: EndpointContract[Any, Any], response: httpx.Response) -> TrafiklabModel:
        """
        Decode a successful response body into the registered envelope.

        Raises:
            TrafiklabDecodeError: If the body is not JSON or does not match the envelope
        """
        endpoint_name = contract.endpoint.value
        try:
            payload = response.json()
        except ValueError as e:
            logger.error("trafiklab_invalid_json", endpoint=endpoint_name, error=str(e))
            raise TrafiklabDecodeError(endpoint_name, f"invalid JSON body: {e}") from e

        try:
            decoded: TrafiklabModel = contract.response.model_validate(payload)
        except ValidationError as e:
            logger.error(
                "trafiklab_response_shape_mismatch",
                endpoint=endpoint_name,
                expected=contract.response.__name__,
                error_count=e.error_count(),
            )
            raise TrafiklabDecodeError(endpoint_name, str(e)) from e
        return decoded
