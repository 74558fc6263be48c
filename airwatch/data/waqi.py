"""Access real-time station readings from the World Air Quality Index."""

from __future__ import annotations

import logging
import math
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Callable, Dict, Optional

import requests
from requests.utils import quote

from ..utils.config import DEFAULT_WAQI_BASE_URL, DEFAULT_WAQI_TOKEN, FETCH_TIMEOUT
from .fetcher import fetch_bounded, get_json
from .models import Failure, FailureKind, FetchOutcome, Measurement, Reading, Success

LOGGER = logging.getLogger(__name__)

LOCATION_FAILED_MESSAGE = (
    "Unable to fetch air quality data for your location. Try searching for a city manually."
)
PLACE_NOT_FOUND_MESSAGE = (
    "No air quality data found for '{query}'. "
    'Try the "City, Country" format, e.g. "Paris, France".'
)
NO_INDEX_MESSAGE = "The nearest station is not reporting an air quality index right now."
UNKNOWN_STATION = "Unknown station"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _provider_message(payload: Any) -> Optional[str]:
    if isinstance(payload, dict):
        detail = payload.get("data") or payload.get("message")
        if isinstance(detail, str) and detail.strip():
            return detail.strip()
    return None


def _is_ok(payload: Any) -> bool:
    return isinstance(payload, dict) and payload.get("status") == "ok"


def _parse_measurements(iaqi: Any) -> Dict[str, Measurement]:
    measurements: Dict[str, Measurement] = {}
    if not isinstance(iaqi, dict):
        return measurements
    for code, entry in iaqi.items():
        raw = entry.get("v") if isinstance(entry, dict) else None
        try:
            value = float(raw)
        except (TypeError, ValueError, OverflowError):
            value = math.nan
        if not math.isfinite(value):
            LOGGER.debug("Skipping measurement %s with value %r", code, raw)
            continue
        measurements[code] = Measurement(value=value)
    return measurements


def parse_feed(data: Any, observed_at: datetime) -> FetchOutcome:
    """Build a reading from the ``data`` member of an ``ok`` feed response."""
    if not isinstance(data, dict):
        return Failure(FailureKind.API_ERROR, NO_INDEX_MESSAGE)

    raw_aqi = data.get("aqi")
    try:
        aqi = int(float(raw_aqi))
    except (TypeError, ValueError, OverflowError):
        LOGGER.warning("Station reported a non-numeric AQI %r", raw_aqi)
        return Failure(FailureKind.API_ERROR, NO_INDEX_MESSAGE)
    if aqi < 0:
        LOGGER.warning("Clamping negative AQI %d to 0", aqi)
        aqi = 0

    city = data.get("city")
    station_name = (city.get("name") if isinstance(city, dict) else None) or UNKNOWN_STATION
    dominant = data.get("dominentpol")

    reading = Reading(
        aqi=aqi,
        station_name=station_name,
        measurements=MappingProxyType(_parse_measurements(data.get("iaqi"))),
        observed_at=observed_at,
        dominant_pollutant=dominant if isinstance(dominant, str) and dominant else None,
    )
    return Success(reading)


class WaqiClient:
    """Thin wrapper around the WAQI feed endpoints.

    Both lookups return a :class:`Success` or :class:`Failure` and never raise
    for provider or network problems.
    """

    def __init__(
        self,
        token: str = DEFAULT_WAQI_TOKEN,
        base_url: str = DEFAULT_WAQI_BASE_URL,
        timeout: float = FETCH_TIMEOUT,
        session: Optional[requests.Session] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.clock = clock

    async def _feed(self, target: str) -> Any:
        url = f"{self.base_url}/feed/{target}/"
        LOGGER.debug("Requesting WAQI feed target=%s", target)
        return await fetch_bounded(
            lambda: get_json(self.session, url, params={"token": self.token}, timeout=self.timeout),
            self.timeout,
        )

    async def fetch_by_coordinates(self, lat: float, lon: float) -> FetchOutcome:
        payload = await self._feed(f"geo:{lat};{lon}")
        if isinstance(payload, Failure):
            return payload
        if not _is_ok(payload):
            detail = _provider_message(payload)
            LOGGER.warning("WAQI rejected coordinates %s,%s: %s", lat, lon, detail)
            message = f"{LOCATION_FAILED_MESSAGE} ({detail})" if detail else LOCATION_FAILED_MESSAGE
            return Failure(FailureKind.API_ERROR, message)
        return parse_feed(payload.get("data"), self.clock())

    async def fetch_by_place_name(self, text: str, typed: bool = True) -> Optional[FetchOutcome]:
        """Look up the station for a free-text place name.

        Blank input is ignored: ``None`` is returned and nothing is requested.
        ``typed`` marks names the user entered; a miss on any other name (the
        default city) suggests a manual search instead of the input format.
        """
        query = (text or "").strip()
        if not query:
            LOGGER.debug("Ignoring blank place name")
            return None
        payload = await self._feed(quote(query, safe=""))
        if isinstance(payload, Failure):
            return payload
        if not _is_ok(payload):
            LOGGER.warning("WAQI found nothing for %r: %s", query, _provider_message(payload))
            if not typed:
                return Failure(FailureKind.API_ERROR, LOCATION_FAILED_MESSAGE)
            return Failure(FailureKind.API_ERROR, PLACE_NOT_FOUND_MESSAGE.format(query=query))
        return parse_feed(payload.get("data"), self.clock())
