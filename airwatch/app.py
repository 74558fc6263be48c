"""Headless AirWatch monitor: follows the session and logs every reading."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .data.models import SessionState
from .services.alerts import classify_severity, extract_pollutants
from .services.session import AirQualitySession, build_session
from .utils.config import load_settings
from .utils.logging import configure_logging

LOGGER = logging.getLogger(__name__)


def summarize_state(state: SessionState) -> str:
    if state.reading is None:
        if state.error is not None:
            return f"No data: {state.error.message}"
        return "Detecting your location..." if state.loading else "No data yet"

    reading = state.reading
    tier = classify_severity(reading.aqi)
    pollutants = ", ".join(f"{p.name} {p.value:g}" for p in extract_pollutants(reading.measurements))
    summary = (
        f"{reading.station_name}: AQI {reading.aqi} ({tier.label}) "
        f"via {state.location_method.value}, updated {reading.observed_at:%H:%M:%S}"
    )
    if pollutants:
        summary += f" | {pollutants}"
    if state.error is not None:
        summary += f" | showing last reading: {state.error.message}"
    return summary


def _log_state(state: SessionState) -> None:
    if not state.loading:
        LOGGER.info(summarize_state(state))


async def monitor(session: AirQualitySession, stop: Optional[asyncio.Event] = None) -> SessionState:
    """Start ``session`` and keep it refreshing until ``stop`` is set."""
    unsubscribe = session.subscribe(_log_state)
    try:
        await session.start()
        if stop is None:
            stop = asyncio.Event()
        await stop.wait()
    finally:
        unsubscribe()
        await session.close()
    return session.state


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)
    try:
        asyncio.run(monitor(build_session(settings)))
    except KeyboardInterrupt:
        LOGGER.info("Stopped")


if __name__ == "__main__":
    main()
