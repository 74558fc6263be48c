"""Health risk categorization for AQI readings."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Mapping, Tuple

from ..data.models import Measurement

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SeverityTier:
    label: str
    min_aqi: int
    max_aqi: float
    color: str
    advisory: str
    emoji: str


SEVERITY_TIERS: List[SeverityTier] = [
    SeverityTier("Good", 0, 50, "#00e400", "Air quality is excellent. Perfect for outdoor activities!", "😊"),
    SeverityTier(
        "Moderate",
        51,
        100,
        "#ffff00",
        "Air quality is acceptable. Sensitive individuals should limit prolonged outdoor exertion.",
        "😐",
    ),
    SeverityTier(
        "Unhealthy for Sensitive Groups",
        101,
        150,
        "#ff7e00",
        "People with respiratory conditions should reduce prolonged outdoor activities.",
        "😷",
    ),
    SeverityTier(
        "Unhealthy",
        151,
        200,
        "#ff0000",
        "Everyone should reduce outdoor activities. Wear a mask if going outside.",
        "😨",
    ),
    SeverityTier(
        "Very Unhealthy",
        201,
        300,
        "#8f3f97",
        "Avoid all outdoor activities. Stay indoors with air purifier.",
        "🚨",
    ),
    SeverityTier(
        "Hazardous",
        301,
        float("inf"),
        "#7e0023",
        "Health emergency! Stay indoors. Seal windows and doors.",
        "☠️",
    ),
]


def classify_severity(aqi: int) -> SeverityTier:
    """Map an AQI to its tier; bands are upper-inclusive and negatives count as 0."""
    if aqi < 0:
        LOGGER.warning("Classifying negative AQI %s as 0", aqi)
        aqi = 0
    for tier in SEVERITY_TIERS:
        if aqi <= tier.max_aqi:
            return tier
    return SEVERITY_TIERS[-1]


# (upper bound, checklist); the last entry covers everything above 150
RECOMMENDATIONS: List[Tuple[float, Tuple[str, ...]]] = [
    (
        50,
        (
            "✅ Great day for outdoor exercise",
            "✅ Perfect for children to play outside",
            "✅ Open windows for fresh air",
        ),
    ),
    (
        100,
        (
            "⚠️ Limit prolonged outdoor exertion",
            "✅ Generally safe for most people",
            "⚠️ Sensitive individuals should be cautious",
        ),
    ),
    (
        150,
        (
            "🚨 Wear a mask outdoors",
            "⚠️ Reduce outdoor activities",
            "⚠️ Use air purifier indoors",
        ),
    ),
    (
        float("inf"),
        (
            "🚨 Avoid outdoor activities",
            "🚨 Stay indoors with air purifier",
            "🚨 Keep windows and doors closed",
            "🚨 Consider relocating if possible",
        ),
    ),
]


def health_recommendations(aqi: int) -> List[str]:
    for upper, items in RECOMMENDATIONS:
        if aqi <= upper:
            return list(items)
    return list(RECOMMENDATIONS[-1][1])


@dataclass(frozen=True)
class PollutantInfo:
    code: str
    name: str
    value: float
    description: str


POLLUTANTS: List[Tuple[str, str, str]] = [
    ("pm25", "PM2.5", "Fine particles that penetrate deep into lungs"),
    ("pm10", "PM10", "Coarse particles from dust and smoke"),
    ("o3", "Ozone", "Ground-level ozone from vehicle emissions"),
    ("no2", "NO2", "Nitrogen dioxide from combustion"),
    ("so2", "SO2", "Sulfur dioxide from burning coal and oil"),
    ("co", "CO", "Carbon monoxide from incomplete combustion"),
]


def extract_pollutants(measurements: Mapping[str, Measurement]) -> List[PollutantInfo]:
    """Return the pollutants present in ``measurements`` in canonical order."""
    return [
        PollutantInfo(code=code, name=name, value=measurements[code].value, description=description)
        for code, name, description in POLLUTANTS
        if code in measurements
    ]


@dataclass(frozen=True)
class EnvironmentalCondition:
    code: str
    label: str
    value: float
    unit: str


CONDITIONS: List[Tuple[str, str, str]] = [
    ("t", "Temperature", "°C"),
    ("h", "Humidity", "%"),
    ("p", "Pressure", "hPa"),
    ("w", "Wind", "m/s"),
]


def extract_conditions(measurements: Mapping[str, Measurement]) -> List[EnvironmentalCondition]:
    return [
        EnvironmentalCondition(code=code, label=label, value=measurements[code].value, unit=unit)
        for code, label, unit in CONDITIONS
        if code in measurements
    ]
