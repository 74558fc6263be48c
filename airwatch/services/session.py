"""Session state for the live air-quality view."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Callable, List, Optional

import requests

from ..data.geolocation import StaticPositionProvider
from ..data.ipgeo import IPGeolocationClient
from ..data.models import (
    Coordinates,
    FetchOutcome,
    LocationDescriptor,
    LocationMethod,
    PlaceName,
    SessionError,
    SessionState,
    Success,
)
from ..data.waqi import WaqiClient
from ..utils.config import REFRESH_INTERVAL, Settings, load_settings
from .resolver import LocationResolver

LOGGER = logging.getLogger(__name__)

Listener = Callable[[SessionState], None]


class AirQualitySession:
    """Owns the single :class:`SessionState` and every transition applied to it.

    Each fetch is numbered when it starts. Only the outcome of the most
    recently started fetch is applied; slower, older requests are discarded
    when they finally complete. A failure keeps the previous reading, so an
    error with a reading is a soft error and an error without one is a hard
    error.

    The refresh timer runs only once a location has produced a reading and is
    re-armed whenever that location changes.
    """

    def __init__(
        self,
        client: WaqiClient,
        resolver: LocationResolver,
        refresh_interval: float = REFRESH_INTERVAL,
    ) -> None:
        self.client = client
        self.resolver = resolver
        self.refresh_interval = refresh_interval
        self._state = SessionState()
        self._descriptor: Optional[LocationDescriptor] = None
        self._method = LocationMethod.DETECTING
        self._issued = 0
        self._refresh_task: Optional[asyncio.Task] = None
        self._listeners: List[Listener] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def descriptor(self) -> Optional[LocationDescriptor]:
        """The location of the last successful fetch, used by refresh and retry."""
        return self._descriptor

    @property
    def refresh_armed(self) -> bool:
        return self._refresh_task is not None and not self._refresh_task.done()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new state; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_state(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        LOGGER.debug(
            "State loading=%s error=%s method=%s has_reading=%s",
            self._state.loading,
            self._state.error.kind.value if self._state.error else None,
            self._state.location_method.value,
            self._state.reading is not None,
        )
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                LOGGER.exception("State listener %r failed", listener)

    # -- transitions -----------------------------------------------------

    def start_fetch(self) -> int:
        """Mark a fetch as in flight and return its sequence number.

        The current reading stays visible while loading.
        """
        self._issued += 1
        self._set_state(loading=True)
        return self._issued

    def apply_outcome(self, outcome: FetchOutcome, sequence: Optional[int] = None) -> bool:
        """Apply a fetch outcome; returns ``False`` when it was superseded."""
        if sequence is not None and sequence != self._issued:
            LOGGER.warning(
                "Discarding outcome of request #%d, request #%d is newer", sequence, self._issued
            )
            return False
        if isinstance(outcome, Success):
            self._set_state(reading=outcome.reading, error=None, loading=False)
        else:
            self._set_state(error=SessionError(outcome.kind, outcome.message), loading=False)
        return True

    async def _fetch(self, descriptor: LocationDescriptor, method: LocationMethod) -> None:
        sequence = self.start_fetch()
        outcome: Optional[FetchOutcome] = None
        try:
            if isinstance(descriptor, Coordinates):
                outcome = await self.client.fetch_by_coordinates(descriptor.lat, descriptor.lon)
            else:
                outcome = await self.client.fetch_by_place_name(
                    descriptor.text, typed=method is LocationMethod.MANUAL
                )
        finally:
            # loading ends with the fetch even when no outcome arrives
            if outcome is None and sequence == self._issued:
                self._set_state(loading=False)
        if outcome is None:
            return
        if not self.apply_outcome(outcome, sequence):
            return
        if isinstance(outcome, Success):
            if self._state.location_method is not method:
                self._set_state(location_method=method)
            if (descriptor, method) != (self._descriptor, self._method):
                LOGGER.info("Tracking %s (%s)", descriptor.describe(), method.value)
                self._descriptor, self._method = descriptor, method
                self._arm_refresh()
        elif self._descriptor is not None and self._state.location_method is not self._method:
            # the reading on display still belongs to the tracked location
            self._set_state(location_method=self._method)

    async def start(self) -> SessionState:
        """Resolve a location and fetch its reading."""
        self._set_state(loading=True, location_method=LocationMethod.DETECTING)
        issued_before = self._issued
        resolution = await self.resolver.resolve()
        if self._issued != issued_before:
            # a manual search started while we were still locating
            LOGGER.info("Ignoring resolved location, a newer request is in flight")
            return self._state
        self._set_state(location_method=resolution.method)
        await self._fetch(resolution.descriptor, resolution.method)
        return self._state

    async def manual_search(self, text: str) -> SessionState:
        """Fetch by place name; blank input leaves the session untouched."""
        query = (text or "").strip()
        if not query:
            LOGGER.debug("Ignoring blank search")
            return self._state
        self._set_state(location_method=LocationMethod.MANUAL)
        await self._fetch(PlaceName(query), LocationMethod.MANUAL)
        return self._state

    async def retry(self) -> SessionState:
        """Re-fetch the last good location, or locate again when there is none."""
        if self._descriptor is None:
            return await self.start()
        await self._fetch(self._descriptor, self._method)
        return self._state

    async def refresh(self) -> SessionState:
        if self._descriptor is None:
            LOGGER.debug("Nothing to refresh yet")
            return self._state
        await self._fetch(self._descriptor, self._method)
        return self._state

    # -- refresh timer ---------------------------------------------------

    async def _refresh_loop(self) -> None:
        while True:
            await asyncio.sleep(self.refresh_interval)
            try:
                await self.refresh()
            except Exception:
                LOGGER.exception("Scheduled refresh failed")

    def _arm_refresh(self) -> None:
        self._disarm_refresh()
        LOGGER.info("Refreshing every %.0f seconds", self.refresh_interval)
        self._refresh_task = asyncio.get_running_loop().create_task(self._refresh_loop())

    def _disarm_refresh(self) -> Optional[asyncio.Task]:
        task, self._refresh_task = self._refresh_task, None
        if task is not None and not task.done():
            task.cancel()
        return task

    async def close(self) -> None:
        task = self._disarm_refresh()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass


def build_session(
    settings: Optional[Settings] = None, http: Optional[requests.Session] = None
) -> AirQualitySession:
    """Wire a session from settings (loaded from the environment by default)."""
    settings = settings or load_settings()
    http = http or requests.Session()

    position_provider = None
    if settings.latitude is not None and settings.longitude is not None:
        position_provider = StaticPositionProvider(Coordinates(settings.latitude, settings.longitude))

    client = WaqiClient(
        token=settings.waqi_token,
        base_url=settings.waqi_base_url,
        timeout=settings.fetch_timeout,
        session=http,
    )
    resolver = LocationResolver(
        IPGeolocationClient(url=settings.ip_lookup_url, timeout=settings.ip_timeout, session=http),
        position_provider=position_provider,
        default_city=settings.default_city,
    )
    return AirQualitySession(client, resolver, refresh_interval=settings.refresh_interval)
