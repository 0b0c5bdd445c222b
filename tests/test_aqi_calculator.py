"""Tests for the EPA AQI calculator."""

import pytest

from processors.aqi_calculator import AQIResult, EPAAQICalculator, compute_aqi


class TestBreakpoints:
    def test_pm25_good_upper_edge(self):
        assert compute_aqi(12.0, None).aqi == 50

    def test_pm25_moderate_lower_edge(self):
        assert compute_aqi(12.1, None).aqi == 51

    def test_pm25_moderate_upper_edge(self):
        assert compute_aqi(35.4, None).aqi == 100

    def test_pm25_zero(self):
        assert compute_aqi(0.0, None).aqi == 0

    def test_pm25_top_of_scale(self):
        assert compute_aqi(500.4, None).aqi == 500

    def test_pm25_interpolation(self):
        # (100-51)/(35.4-12.1) * (20-12.1) + 51 = 67.6 -> 68
        assert compute_aqi(20.0, None).aqi == 68

    def test_pm10_edges(self):
        assert compute_aqi(None, 54).aqi == 50
        assert compute_aqi(None, 55).aqi == 51
        assert compute_aqi(None, 604).aqi == 500

    def test_gap_between_brackets_gives_no_index(self):
        assert compute_aqi(12.05, None) == AQIResult(None, None)

    def test_above_scale_gives_no_index(self):
        assert compute_aqi(600.0, None) == AQIResult(None, None)
        assert compute_aqi(None, 700) == AQIResult(None, None)

    def test_negative_concentration_gives_no_index(self):
        assert compute_aqi(-1.0, None).aqi is None


class TestDominantPollutant:
    def test_both_missing(self):
        assert compute_aqi(None, None) == AQIResult(None, None)

    def test_only_pm10(self):
        assert compute_aqi(None, 100) == AQIResult(aqi=73, dominant_pollutant="PM10")

    def test_only_pm25(self):
        result = compute_aqi(20.0, None)
        assert result.dominant_pollutant == "PM2.5"

    def test_larger_index_wins(self):
        result = compute_aqi(5.0, 200)
        assert result.dominant_pollutant == "PM10"
        assert result.aqi == 123

    def test_tie_goes_to_pm25(self):
        result = compute_aqi(35.4, 154)
        assert result.aqi == 100
        assert result.dominant_pollutant == "PM2.5"

    def test_out_of_range_pollutant_ignored(self):
        result = compute_aqi(700.0, 100)
        assert result.dominant_pollutant == "PM10"


class TestCategories:
    @pytest.fixture
    def calculator(self):
        return EPAAQICalculator()

    @pytest.mark.parametrize("aqi,category", [
        (0, "Good"),
        (50, "Good"),
        (51, "Moderate"),
        (100, "Moderate"),
        (150, "Unhealthy for Sensitive Groups"),
        (200, "Unhealthy"),
        (300, "Very Unhealthy"),
        (301, "Hazardous"),
        (500, "Hazardous"),
    ])
    def test_category_bounds(self, calculator, aqi, category):
        assert calculator.get_category(aqi) == category

    def test_unknown_aqi_has_no_category(self, calculator):
        assert calculator.get_category(None) is None
        assert calculator.get_color(None) is None
        assert calculator.get_health_message(None) is None

    def test_color_and_message(self, calculator):
        assert calculator.get_color(42) == "#00E400"
        assert calculator.get_health_message(42) == "Air quality is satisfactory for most people."

    def test_sub_index_for_missing_concentration(self, calculator):
        assert calculator.calculate_pollutant_aqi(None, "PM2.5") is None
