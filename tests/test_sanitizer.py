"""Tests for the value sanitizer."""

import math

import pytest

from processors.sanitizer import QUANTITY_RANGES, ValueRange, sanitize_number, sanitize_quantity

TEMPERATURE = ValueRange(-90, 60)


class TestSentinels:
    @pytest.mark.parametrize("sentinel", [-999, -9999, -99999, -999.0, "-9999"])
    def test_sentinels_rejected(self, sentinel):
        assert sanitize_number(sentinel) is None

    def test_sentinel_rejected_even_inside_range(self):
        assert sanitize_number(-999, ValueRange(-100000, 100000)) is None

    def test_huge_magnitude_rejected(self):
        assert sanitize_number(1e8) is None
        assert sanitize_number(-2e7) is None

    def test_magnitude_limit_is_inclusive(self):
        assert sanitize_number(1e7) == 1e7

    def test_near_sentinel_kept(self):
        assert sanitize_number(-998) == -998.0


class TestRanges:
    def test_upper_bound_inclusive(self):
        assert sanitize_number(60, TEMPERATURE) == 60

    def test_just_above_upper_bound(self):
        assert sanitize_number(60.0001, TEMPERATURE) is None

    def test_lower_bound_inclusive(self):
        assert sanitize_number(-90, TEMPERATURE) == -90

    def test_below_lower_bound(self):
        assert sanitize_number(-90.5, TEMPERATURE) is None

    def test_no_range_accepts_any_finite(self):
        assert sanitize_number(-500) == -500.0

    def test_quantity_helper_uses_declared_range(self):
        assert sanitize_quantity('humidity', 101) is None
        assert sanitize_quantity('humidity', 100) == 100
        assert sanitize_quantity('co', 50000) == 50000

    def test_every_quantity_has_a_range(self):
        for name in ('temperature', 'humidity', 'wind_speed', 'pm25', 'pm10', 'no2',
                     'ozone', 'so2', 'co', 'precipitation', 'aqi'):
            assert name in QUANTITY_RANGES


class TestInputTypes:
    def test_numeric_string_trimmed(self):
        assert sanitize_number("  42.5 ") == 42.5

    @pytest.mark.parametrize("value", ["", "   ", "null", "NULL", "Null"])
    def test_empty_and_null_strings(self, value):
        assert sanitize_number(value) is None

    def test_garbage_string(self):
        assert sanitize_number("n/a") is None

    @pytest.mark.parametrize("value", ["1_000", "12_5.0", " 1_0 "])
    def test_digit_separators_rejected(self, value):
        assert sanitize_number(value) is None

    def test_none(self):
        assert sanitize_number(None) is None

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), "NaN", "Infinity"])
    def test_non_finite(self, value):
        assert sanitize_number(value) is None

    def test_booleans_are_not_numbers(self):
        assert sanitize_number(True) is None
        assert sanitize_number(False) is None

    def test_other_types_rejected(self):
        assert sanitize_number([1]) is None
        assert sanitize_number({"value": 1}) is None

    def test_int_returned_as_float(self):
        result = sanitize_number(7)
        assert isinstance(result, float)
        assert result == 7.0


class TestIdempotence:
    @pytest.mark.parametrize("value", [25, "30.5", -999, 1e8, "null", 61, -90, 0, float("nan")])
    def test_sanitize_twice_equals_once(self, value):
        once = sanitize_number(value, TEMPERATURE)
        twice = sanitize_number(once, TEMPERATURE)
        if once is None:
            assert twice is None
        else:
            assert twice == once
            assert not math.isnan(twice)
