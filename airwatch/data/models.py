"""Value types shared by the location, provider and session layers."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Mapping, Optional, Union


@dataclass(frozen=True)
class Coordinates:
    lat: float
    lon: float

    def describe(self) -> str:
        return f"{self.lat:.4f},{self.lon:.4f}"


@dataclass(frozen=True)
class PlaceName:
    text: str

    def describe(self) -> str:
        return self.text


LocationDescriptor = Union[Coordinates, PlaceName]


@dataclass(frozen=True)
class Measurement:
    value: float


@dataclass(frozen=True)
class Reading:
    """A normalized provider reading.

    ``observed_at`` is the moment the fetch completed, not the station's own
    timestamp.
    """

    aqi: int
    station_name: str
    measurements: Mapping[str, Measurement]
    observed_at: datetime
    dominant_pollutant: Optional[str] = None


class FailureKind(str, Enum):
    TIMEOUT = "timeout"
    NETWORK = "network"
    API_ERROR = "api_error"


@dataclass(frozen=True)
class Success:
    reading: Reading


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str


FetchOutcome = Union[Success, Failure]


class LocationMethod(str, Enum):
    DETECTING = "detecting"
    GPS = "gps"
    IP = "ip"
    MANUAL = "manual"


@dataclass(frozen=True)
class SessionError:
    kind: FailureKind
    message: str


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of the session; replaced on every transition."""

    reading: Optional[Reading] = None
    loading: bool = True
    error: Optional[SessionError] = None
    location_method: LocationMethod = LocationMethod.DETECTING

    @property
    def is_hard_error(self) -> bool:
        """Nothing to display: the failure blocks normal presentation."""
        return self.error is not None and self.reading is None

    @property
    def is_soft_error(self) -> bool:
        """Stale but displayable data remains alongside the failure."""
        return self.error is not None and self.reading is not None
