"""Device geolocation capability consumed by the location resolver."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from .models import Coordinates


class GeolocationError(Exception):
    """Base class for device geolocation failures."""


class GeolocationDenied(GeolocationError):
    """The user or platform refused access to the device position."""


class GeolocationUnavailable(GeolocationError):
    """The position could not be determined."""


@dataclass(frozen=True)
class GeolocationOptions:
    high_accuracy: bool = True
    timeout: float = 10.0
    maximum_age: float = 5 * 60


class PositionProvider(ABC):
    """Source of the device position.

    Implementations raise :class:`GeolocationDenied` or
    :class:`GeolocationUnavailable` instead of returning partial data.
    """

    @abstractmethod
    async def current_position(self, options: GeolocationOptions) -> Coordinates:
        raise NotImplementedError


class StaticPositionProvider(PositionProvider):
    """Serves a fixed, configured position."""

    def __init__(self, coordinates: Coordinates) -> None:
        self.coordinates = coordinates

    async def current_position(self, options: GeolocationOptions) -> Coordinates:
        return self.coordinates
