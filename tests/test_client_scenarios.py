"""End-to-end scenarios against the simulated Trafiklab API."""

from datetime import UTC, datetime

import pytest
from freezegun import freeze_time

from tests.helpers.assertions import assert_valid_stop, assert_valid_timetable_entry
from tests.helpers.mock_server import MOCK_BASE_URL, TEST_API_KEY, MockTrafiklabServer
from trafiklab.core.exceptions import TrafiklabHTTPError
from trafiklab.services.trafiklab_client import TrafiklabClient


class TestStopLookup:
    """Tests for stop search and stop list."""

    @pytest.mark.asyncio
    async def test_search_stops_by_name(self, live_client: TrafiklabClient) -> None:
        """Test that a search echoes the search value and returns matching groups."""
        response = await live_client.search_stops("Stockholm", api_key=TEST_API_KEY)

        assert response.query_details.query == "Stockholm"
        assert len(response.stop_groups) >= 1
        assert response.stop_groups[0].name == "Stockholm"
        for stop in response.stop_groups[0].stops:
            assert_valid_stop(stop)

    @pytest.mark.asyncio
    async def test_search_value_with_non_ascii_characters(
        self, live_client: TrafiklabClient, mock_server: MockTrafiklabServer
    ) -> None:
        """Test that Swedish characters survive the round trip through the path."""
        response = await live_client.search_stops("Göteborg", api_key=TEST_API_KEY)

        assert response.query_details.query == "Göteborg"
        assert mock_server.last_request.url.raw_path.startswith(b"/v1/stops/name/G%C3%B6teborg")

    @pytest.mark.asyncio
    async def test_list_all_stops(self, live_client: TrafiklabClient) -> None:
        """Test that the stop list returns every group."""
        response = await live_client.get_all_stops(api_key=TEST_API_KEY)

        assert [group.name for group in response.stop_groups] == ["Stockholm", "Göteborg", "Malmö"]


class TestBoards:
    """Tests for departure and arrival boards."""

    @pytest.mark.asyncio
    async def test_current_departures(self, live_client: TrafiklabClient) -> None:
        """Test that current departures are returned for a stop."""
        response = await live_client.get_departures("740020101", api_key=TEST_API_KEY)

        assert response.query_details.query == "740020101"
        assert len(response.departures) == 1
        assert_valid_timetable_entry(response.departures[0])

    @pytest.mark.asyncio
    async def test_departures_at_time(self, live_client: TrafiklabClient, mock_server: MockTrafiklabServer) -> None:
        """Test that a departure board can be requested for a given time."""
        response = await live_client.get_departures_at_time(
            "740020101", datetime(2025, 3, 31, 16, 30), api_key=TEST_API_KEY
        )

        assert mock_server.last_request.url.path == "/v1/departures/740020101/2025-03-31T16:30"
        assert response.query_details.query_time == datetime(2025, 3, 31, 16, 30)

    @pytest.mark.asyncio
    async def test_current_departures_query_time_is_now(self, live_client: TrafiklabClient) -> None:
        """Test that a board without dateTime is answered for the current time."""
        with freeze_time("2025-03-31 14:30:00"):
            response = await live_client.get_departures("740020101", api_key=TEST_API_KEY)

        assert response.query_details.query_time == datetime(2025, 3, 31, 14, 30, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_current_arrivals(self, live_client: TrafiklabClient) -> None:
        """Test that current arrivals are returned for a stop."""
        response = await live_client.get_arrivals("740020101", api_key=TEST_API_KEY)

        assert response.query_details.query == "740020101"
        assert len(response.arrivals) == 1
        assert_valid_timetable_entry(response.arrivals[0])

    @pytest.mark.asyncio
    async def test_arrivals_at_time(self, live_client: TrafiklabClient) -> None:
        """Test that an arrival board can be requested for a given time."""
        response = await live_client.get_arrivals_at_time("740020101", "2025-03-31T16:30", api_key=TEST_API_KEY)

        assert response.query_details.query_time == datetime(2025, 3, 31, 16, 30)


class TestAuthentication:
    """Tests for API key handling end to end."""

    @pytest.mark.asyncio
    async def test_missing_api_key_fails_with_401(self, live_client: TrafiklabClient) -> None:
        """Test that calls without a key surface the remote 401."""
        with pytest.raises(TrafiklabHTTPError, match="HTTP 401"):
            await live_client.get_departures("740020101")

    @pytest.mark.asyncio
    async def test_default_key_is_sent(self, mock_server: MockTrafiklabServer) -> None:
        """Test that the client's default key authenticates calls without a per-call key."""
        async with TrafiklabClient(
            base_url=MOCK_BASE_URL, api_key=TEST_API_KEY, transport=mock_server.transport
        ) as client:
            response = await client.get_arrivals("740020101")

        assert response.query_details.query == "740020101"
        assert mock_server.last_request.url.params["key"] == TEST_API_KEY
