"""Layered location resolution: device position, then IP, then a default city."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..data.geolocation import (
    GeolocationDenied,
    GeolocationError,
    GeolocationOptions,
    PositionProvider,
)
from ..data.ipgeo import IPGeolocationClient
from ..data.models import Coordinates, LocationDescriptor, LocationMethod, PlaceName
from ..utils.config import DEFAULT_CITY

LOGGER = logging.getLogger(__name__)


class ResolverState(str, Enum):
    DETECTING = "detecting"
    RESOLVED_GPS = "resolved_gps"
    RESOLVING_IP = "resolving_ip"
    RESOLVED_IP = "resolved_ip"
    FAILED = "failed"


@dataclass(frozen=True)
class Resolution:
    descriptor: LocationDescriptor
    state: ResolverState

    @property
    def method(self) -> LocationMethod:
        if self.state is ResolverState.RESOLVED_GPS:
            return LocationMethod.GPS
        # the default city is the last step of the IP stage
        return LocationMethod.IP


class LocationResolver:
    """Finds a location for the first fetch.

    Stages run strictly in order and each is bounded by its own timeout, so
    :meth:`resolve` always returns a descriptor. A run that exhausts both
    stages ends in ``FAILED`` carrying the default place name. There is no
    internal retry; calling :meth:`resolve` again starts over from
    ``DETECTING``.
    """

    def __init__(
        self,
        ip_client: IPGeolocationClient,
        position_provider: Optional[PositionProvider] = None,
        default_city: str = DEFAULT_CITY,
        options: GeolocationOptions = GeolocationOptions(),
    ) -> None:
        self.ip_client = ip_client
        self.position_provider = position_provider
        self.default_city = default_city
        self.options = options
        self.state = ResolverState.DETECTING

    def _transition(self, state: ResolverState) -> None:
        LOGGER.debug("Resolver %s -> %s", self.state.value, state.value)
        self.state = state

    async def _detect(self) -> Optional[Coordinates]:
        if self.position_provider is None:
            LOGGER.info("Device geolocation is not available")
            return None
        try:
            return await asyncio.wait_for(
                self.position_provider.current_position(self.options), self.options.timeout
            )
        except GeolocationDenied:
            LOGGER.warning("Device geolocation was denied")
        except GeolocationError as err:
            LOGGER.warning("Device geolocation failed: %s", err)
        except asyncio.TimeoutError:
            LOGGER.warning("Device geolocation timed out after %.0fs", self.options.timeout)
        return None

    async def resolve(self) -> Resolution:
        self._transition(ResolverState.DETECTING)
        coordinates = await self._detect()
        if coordinates is not None:
            self._transition(ResolverState.RESOLVED_GPS)
            LOGGER.info("Located via device position %s", coordinates.describe())
            return Resolution(coordinates, self.state)

        self._transition(ResolverState.RESOLVING_IP)
        coordinates = await self.ip_client.lookup()
        if coordinates is not None:
            self._transition(ResolverState.RESOLVED_IP)
            LOGGER.info("Located via IP address %s", coordinates.describe())
            return Resolution(coordinates, self.state)

        self._transition(ResolverState.FAILED)
        LOGGER.warning("Could not locate device; falling back to %s", self.default_city)
        return Resolution(PlaceName(self.default_city), self.state)
