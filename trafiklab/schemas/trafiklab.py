"""Pydantic schemas for Trafiklab realtime API data.

Field names follow the wire format. The three camelCase names used by the
API (``queryDetails``, ``queryTime``, ``stopGroups``) are exposed as
snake_case attributes with aliases; ``model_dump(by_alias=True)`` gives the
wire representation back.
"""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field


class TrafiklabModel(BaseModel):
    """Base for all value records: immutable, populated by field name or alias."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)


# ==================== Value Records ====================


class QueryDetails(TrafiklabModel):
    """What was asked of the API and when."""

    query_time: datetime = Field(..., alias="queryTime", description="Time the query was made")
    query: str = Field(..., description="Lookup value used for the request (stop ID or search value)")


class Platform(TrafiklabModel):
    """A platform at a stop."""

    id: str
    designation: str  # e.g. "A", "H"


class Alert(TrafiklabModel):
    """A service alert attached to a stop or timetable entry."""

    type: str  # See trafiklab.constants.AlertType
    title: str
    text: str


class Stop(TrafiklabModel):
    """A stop with its position."""

    id: str
    name: str
    lat: float
    lon: float


class RealtimeStop(TrafiklabModel):
    """A stop as reported in departure and arrival boards."""

    id: str
    name: str
    lat: float
    lon: float
    transport_modes: tuple[str, ...]  # See trafiklab.constants.TransportMode
    alerts: tuple[Alert, ...]


class StopGroup(TrafiklabModel):
    """A group of stops sharing a name (meta stop or rikshållplats)."""

    id: str
    name: str
    group_type: str = Field(..., description="Whether the group is a meta stop or a rikshållplats")
    transport_modes: tuple[str, ...]
    stops: tuple[Stop, ...]


class Agency(TrafiklabModel):
    """Agency responsible for a trip."""

    id: str
    name: str
    operator: str


class Trip(TrafiklabModel):
    """A single vehicle journey."""

    trip_id: str
    start_date: date
    technical_number: int


class Route(TrafiklabModel):
    """Line information for a timetable entry."""

    name: str | None = Field(..., description="Service name; absent for most lines")
    designation: str  # Line number, e.g. "3"
    transport_mode_code: int
    transport_mode: str
    direction: str
    origin: Stop
    destination: Stop


class TimetableEntry(TrafiklabModel):
    """One departure or arrival."""

    scheduled: datetime
    realtime: datetime
    delay: int = Field(..., description="Delay in seconds; negative means early")
    canceled: bool
    route: Route
    trip: Trip
    agency: Agency
    stop: Stop
    scheduled_platform: Platform
    realtime_platform: Platform
    alerts: tuple[Alert, ...]
    is_realtime: bool


# ==================== Response Envelopes ====================


class DeparturesResponse(TrafiklabModel):
    """Departure board response."""

    timestamp: datetime = Field(..., description="Response time; may lag for cached upstream data")
    query_details: QueryDetails = Field(..., alias="queryDetails")
    stops: tuple[RealtimeStop, ...]
    departures: tuple[TimetableEntry, ...]


class ArrivalsResponse(TrafiklabModel):
    """Arrival board response."""

    timestamp: datetime = Field(..., description="Response time; may lag for cached upstream data")
    query_details: QueryDetails = Field(..., alias="queryDetails")
    stops: tuple[RealtimeStop, ...]
    arrivals: tuple[TimetableEntry, ...]


class NationalStopGroupResponse(TrafiklabModel):
    """Stop lookup response."""

    timestamp: datetime = Field(..., description="Response time; may lag for cached upstream data")
    query_details: QueryDetails = Field(..., alias="queryDetails")
    stop_groups: tuple[StopGroup, ...] = Field(..., alias="stopGroups")
