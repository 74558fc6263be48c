"""Approximate location lookup from the caller's public IP address."""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from ..utils.config import DEFAULT_IP_LOOKUP_URL, IP_LOOKUP_TIMEOUT
from .fetcher import fetch_bounded, get_json
from .models import Coordinates, Failure

LOGGER = logging.getLogger(__name__)


def coordinates_from_payload(payload: Any) -> Optional[Coordinates]:
    """Extract coordinates when both ``latitude`` and ``longitude`` are usable."""
    if not isinstance(payload, dict):
        return None
    lat, lon = payload.get("latitude"), payload.get("longitude")
    if lat is None or lon is None or isinstance(lat, bool) or isinstance(lon, bool):
        return None
    try:
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return Coordinates(lat=lat, lon=lon)


class IPGeolocationClient:
    def __init__(
        self,
        url: str = DEFAULT_IP_LOOKUP_URL,
        timeout: float = IP_LOOKUP_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    async def lookup(self) -> Optional[Coordinates]:
        """Return the coordinates of the caller's IP, or ``None`` on any failure."""
        LOGGER.debug("Requesting IP geolocation from %s", self.url)
        payload = await fetch_bounded(
            lambda: get_json(self.session, self.url, timeout=self.timeout), self.timeout
        )
        if isinstance(payload, Failure):
            LOGGER.warning("IP geolocation failed: %s", payload.kind.value)
            return None
        coordinates = coordinates_from_payload(payload)
        if coordinates is None:
            reason = payload.get("reason") if isinstance(payload, dict) else None
            LOGGER.warning("IP geolocation response has no usable position (%s)", reason or "missing fields")
        return coordinates
