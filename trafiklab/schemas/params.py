"""Request parameter records, one per endpoint.

Attribute names are snake_case; aliases match the placeholder names used in
the endpoint path templates (``{stopId}``, ``{dateTime}``, ``{searchValue}``).
Unknown fields are rejected so that parameters meant for one endpoint cannot
be passed to another.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

DATETIME_PARAM_FORMAT = "%Y-%m-%dT%H:%M"


class EndpointParams(BaseModel):
    """Fields shared by every endpoint: the API key."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    key: str | None = Field(
        None,
        description="API key. When omitted the client's default key is used.",
    )


class StopsByNameParams(EndpointParams):
    """GET /stops/name/{searchValue}"""

    search_value: str = Field(..., alias="searchValue", description="Name to search for (minimum 3 characters)")


class AllStopsParams(EndpointParams):
    """GET /stops/list"""


class CurrentDeparturesParams(EndpointParams):
    """GET /departures/{stopId}"""

    stop_id: str = Field(..., alias="stopId", description="Stop ID, e.g. '740020101'")


class StopAtTimeParams(EndpointParams):
    """Fields shared by the at-time boards: a stop and a minute-resolution time."""

    stop_id: str = Field(..., alias="stopId", description="Stop ID, e.g. '740020101'")
    date_time: str = Field(..., alias="dateTime", description="ISO 8601 time, e.g. '2025-03-31T16:30'")

    @field_validator("date_time", mode="before")
    @classmethod
    def format_date_time(cls, v: object) -> object:
        """Accept datetime objects and render them the way the API expects."""
        return v.strftime(DATETIME_PARAM_FORMAT) if isinstance(v, datetime) else v


class DeparturesAtTimeParams(StopAtTimeParams):
    """GET /departures/{stopId}/{dateTime}"""


class CurrentArrivalsParams(EndpointParams):
    """GET /arrivals/{stopId}"""

    stop_id: str = Field(..., alias="stopId", description="Stop ID, e.g. '740020101'")


class ArrivalsAtTimeParams(StopAtTimeParams):
    """GET /arrivals/{stopId}/{dateTime}"""
