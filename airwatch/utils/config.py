"""Configuration helpers for provider credentials and defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from dotenv import dotenv_values

LOGGER = logging.getLogger(__name__)

DEFAULT_WAQI_TOKEN = "demo"
DEFAULT_WAQI_BASE_URL = "https://api.waqi.info"
DEFAULT_IP_LOOKUP_URL = "https://ipapi.co/json/"
# Last-resort place name when neither the device nor the IP lookup can locate us.
DEFAULT_CITY = "Delhi"

FETCH_TIMEOUT = 10.0
IP_LOOKUP_TIMEOUT = 6.0
REFRESH_INTERVAL = 15 * 60
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class Settings:
    waqi_token: str = DEFAULT_WAQI_TOKEN
    waqi_base_url: str = DEFAULT_WAQI_BASE_URL
    ip_lookup_url: str = DEFAULT_IP_LOOKUP_URL
    default_city: str = DEFAULT_CITY
    fetch_timeout: float = FETCH_TIMEOUT
    ip_timeout: float = IP_LOOKUP_TIMEOUT
    refresh_interval: float = REFRESH_INTERVAL
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    log_level: str = DEFAULT_LOG_LEVEL


def _read_env(env_path: Path | None) -> Dict[str, Optional[str]]:
    values: Dict[str, Optional[str]] = {}
    env_path = env_path or Path(".env")
    if env_path.exists():
        values.update(dotenv_values(str(env_path)))
    # real environment variables win over the .env file
    values.update({key: value for key, value in os.environ.items() if key.startswith("AIRWATCH_")})
    return values


def _positive_float(values: Dict[str, Optional[str]], key: str, default: float) -> float:
    raw = values.get(key)
    if raw is None or raw == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number, got {raw!r}") from None
    if value <= 0:
        raise RuntimeError(f"{key} must be positive, got {raw!r}")
    return value


def _optional_float(values: Dict[str, Optional[str]], key: str) -> Optional[float]:
    raw = values.get(key)
    if raw is None or raw == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"{key} must be a number, got {raw!r}") from None


def load_settings(env_path: Path | None = None) -> Settings:
    """Load settings from environment variables or a .env file."""
    values = _read_env(env_path)

    latitude = _optional_float(values, "AIRWATCH_LATITUDE")
    longitude = _optional_float(values, "AIRWATCH_LONGITUDE")
    if (latitude is None) != (longitude is None):
        LOGGER.warning("Ignoring fixed position: AIRWATCH_LATITUDE and AIRWATCH_LONGITUDE must be set together")
        latitude = longitude = None

    return Settings(
        waqi_token=values.get("AIRWATCH_WAQI_TOKEN") or DEFAULT_WAQI_TOKEN,
        waqi_base_url=(values.get("AIRWATCH_WAQI_BASE_URL") or DEFAULT_WAQI_BASE_URL).rstrip("/"),
        ip_lookup_url=values.get("AIRWATCH_IP_LOOKUP_URL") or DEFAULT_IP_LOOKUP_URL,
        default_city=(values.get("AIRWATCH_DEFAULT_CITY") or DEFAULT_CITY).strip() or DEFAULT_CITY,
        fetch_timeout=_positive_float(values, "AIRWATCH_FETCH_TIMEOUT", FETCH_TIMEOUT),
        ip_timeout=_positive_float(values, "AIRWATCH_IP_TIMEOUT", IP_LOOKUP_TIMEOUT),
        refresh_interval=_positive_float(values, "AIRWATCH_REFRESH_INTERVAL", REFRESH_INTERVAL),
        latitude=latitude,
        longitude=longitude,
        log_level=(values.get("AIRWATCH_LOG_LEVEL") or DEFAULT_LOG_LEVEL).strip().upper(),
    )
