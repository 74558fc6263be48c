"""
Pytest configuration for AirWatch tests.

Registers custom markers and provides fake HTTP plumbing so no test touches
the network.
"""

from datetime import datetime, timezone
from types import MappingProxyType

import pytest
import requests

from airwatch.data.models import Measurement, Reading


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


FIXED_NOW = datetime(2024, 3, 1, 8, 30, tzinfo=timezone.utc)


class FakeResponse:
    def __init__(self, payload=None, status_code=200, body_error=None):
        self.payload = payload
        self.status_code = status_code
        self.body_error = body_error

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}", response=self)

    def json(self):
        if self.body_error is not None:
            raise self.body_error
        return self.payload


class FakeSession:
    """Stands in for ``requests.Session``; replays queued responses or errors."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append({"url": url, "params": params, "timeout": timeout})
        result = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(result, Exception):
            raise result
        if isinstance(result, FakeResponse):
            return result
        return FakeResponse(result)


def make_reading(aqi=42, station_name="Test Station", measurements=None, observed_at=FIXED_NOW):
    bag = {code: Measurement(float(value)) for code, value in (measurements or {}).items()}
    return Reading(
        aqi=aqi,
        station_name=station_name,
        measurements=MappingProxyType(bag),
        observed_at=observed_at,
    )


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW
