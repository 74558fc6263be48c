"""
Tests for the AQI classifier and measurement extraction.

Tests cover:
- Equivalence classes: one representative per severity tier
- Boundary value analysis: every band edge (50/51 ... 300/301)
- Pollutant and condition ordering independent of input order
- Health recommendation groups
"""

import pytest

from airwatch.data.models import Measurement
from airwatch.services.alerts import (
    SEVERITY_TIERS,
    classify_severity,
    extract_conditions,
    extract_pollutants,
    health_recommendations,
)


def bag(**values):
    return {code: Measurement(float(value)) for code, value in values.items()}


class TestClassifySeverity:
    """Test suite for classify_severity."""

    # ==================== Equivalence Classes ====================

    @pytest.mark.parametrize(
        "aqi, label",
        [
            (25, "Good"),
            (75, "Moderate"),
            (125, "Unhealthy for Sensitive Groups"),
            (175, "Unhealthy"),
            (250, "Very Unhealthy"),
            (420, "Hazardous"),
        ],
    )
    def test_representative_values(self, aqi, label):
        assert classify_severity(aqi).label == label

    def test_whole_good_band(self):
        assert all(classify_severity(aqi).label == "Good" for aqi in range(0, 51))

    # ==================== Boundary Value Analysis ====================

    @pytest.mark.parametrize(
        "upper, inside, outside",
        [
            (50, "Good", "Moderate"),
            (100, "Moderate", "Unhealthy for Sensitive Groups"),
            (150, "Unhealthy for Sensitive Groups", "Unhealthy"),
            (200, "Unhealthy", "Very Unhealthy"),
            (300, "Very Unhealthy", "Hazardous"),
        ],
    )
    def test_bands_are_upper_inclusive(self, upper, inside, outside):
        assert classify_severity(upper).label == inside
        assert classify_severity(upper + 1).label == outside

    # ==================== Edge Cases ====================

    def test_zero_is_good(self):
        assert classify_severity(0).label == "Good"

    def test_negative_aqi_uses_lowest_band(self):
        assert classify_severity(-5) == classify_severity(0)

    def test_extreme_aqi_is_hazardous(self):
        tier = classify_severity(999)
        assert tier.label == "Hazardous"
        assert tier.color == "#7e0023"

    def test_tiers_carry_color_and_advice(self):
        tier = classify_severity(142)
        assert tier.color == "#ff7e00"
        assert "respiratory" in tier.advisory

    def test_bands_are_contiguous(self):
        for lower, upper in zip(SEVERITY_TIERS, SEVERITY_TIERS[1:]):
            assert upper.min_aqi == lower.max_aqi + 1


class TestExtractPollutants:
    """Test suite for extract_pollutants."""

    def test_subset_keeps_canonical_order(self):
        pollutants = extract_pollutants(bag(no2=12, pm25=80))
        assert [p.name for p in pollutants] == ["PM2.5", "NO2"]
        assert [p.value for p in pollutants] == [80.0, 12.0]

    def test_full_bag_in_canonical_order_regardless_of_input_order(self):
        measurements = bag(co=1, so2=2, no2=3, o3=4, pm10=5, pm25=6, t=20, h=40)
        names = [p.name for p in extract_pollutants(measurements)]
        assert names == ["PM2.5", "PM10", "Ozone", "NO2", "SO2", "CO"]

    def test_environmental_codes_are_not_pollutants(self):
        assert extract_pollutants(bag(t=21, h=50, p=1012, w=3)) == []

    def test_empty_bag(self):
        assert extract_pollutants({}) == []

    def test_description_is_static(self):
        low = extract_pollutants(bag(pm10=1))[0]
        high = extract_pollutants(bag(pm10=900))[0]
        assert low.description == high.description == "Coarse particles from dust and smoke"


class TestExtractConditions:
    """Test suite for extract_conditions."""

    def test_conditions_in_fixed_order_with_units(self):
        conditions = extract_conditions(bag(w=3.5, p=1012, t=28.4, pm25=80))
        assert [(c.label, c.unit) for c in conditions] == [
            ("Temperature", "°C"),
            ("Pressure", "hPa"),
            ("Wind", "m/s"),
        ]
        assert conditions[0].value == 28.4

    def test_no_conditions(self):
        assert extract_conditions(bag(pm25=10)) == []


class TestHealthRecommendations:
    """Test suite for health_recommendations."""

    def test_good_air(self):
        assert "✅ Great day for outdoor exercise" in health_recommendations(50)

    def test_moderate_air(self):
        assert "✅ Generally safe for most people" in health_recommendations(51)

    def test_sensitive_band(self):
        assert "🚨 Wear a mask outdoors" in health_recommendations(150)

    def test_everything_above_150_shares_one_list(self):
        assert health_recommendations(151) == health_recommendations(480)
        assert len(health_recommendations(151)) == 4
