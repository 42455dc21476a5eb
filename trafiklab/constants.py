"""Transport mode and alert type values used by the Trafiklab API."""

import enum


class TransportMode(str, enum.Enum):
    """Transport modes reported on stops, stop groups and routes."""

    BUS = "BUS"
    METRO = "METRO"
    TRAIN = "TRAIN"
    TRAM = "TRAM"
    FERRY = "FERRY"
    SHIP = "SHIP"


class AlertType(str, enum.Enum):
    """Alert categories attached to stops and timetable entries."""

    MAINTENANCE = "MAINTENANCE"
    DISRUPTION = "DISRUPTION"
    INFORMATION = "INFORMATION"
    WARNING = "WARNING"
