#!/usr/bin/env python3
"""
Value Sanitizer
===============
Validates single numeric values coming out of upstream APIs.

NASA and commercial weather feeds signal "no data" with placeholder numbers
(-999, -9999, ...) or junk strings instead of nulls. Every value that enters
or leaves the fusion pipeline goes through sanitize_number(), which turns
anything unusable into None rather than raising.
"""

import math
import numbers
from typing import Any, Dict, NamedTuple, Optional


class ValueRange(NamedTuple):
    """Inclusive semantic range for one physical quantity"""
    min: float
    max: float


# Placeholders used by upstream APIs for missing data
SENTINEL_VALUES = frozenset({-999.0, -9999.0, -99999.0})
SENTINEL_MAGNITUDE = 1e7

# Declared ranges for every fused quantity
QUANTITY_RANGES: Dict[str, ValueRange] = {
    'temperature': ValueRange(-90, 60),       # °C
    'humidity': ValueRange(0, 100),           # %
    'wind_speed': ValueRange(0, 400),         # m/s
    'pm25': ValueRange(0, 10000),             # μg/m³
    'pm10': ValueRange(0, 10000),
    'no2': ValueRange(0, 10000),
    'ozone': ValueRange(0, 10000),
    'so2': ValueRange(0, 10000),
    'co': ValueRange(0, 100000),
    'precipitation': ValueRange(0, 1000),     # mm
    'aqi': ValueRange(0, 500),
}


def sanitize_number(value: Any, value_range: Optional[ValueRange] = None) -> Optional[float]:
    """
    Validate a raw numeric value.

    Args:
        value: Number or numeric string from an upstream payload
        value_range: Inclusive (min, max) bounds; None skips the range check

    Returns:
        The value as a float, or None when it is missing, non-finite,
        a sentinel, or outside the range
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, str):
        value = value.strip()
        if value == '' or value.lower() == 'null':
            return None
        # float() would accept digit separators such as "1_000"
        if '_' in value:
            return None
    elif not isinstance(value, numbers.Real):
        return None

    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None

    if not math.isfinite(number):
        return None

    if number in SENTINEL_VALUES or abs(number) > SENTINEL_MAGNITUDE:
        return None

    if value_range is not None and not (value_range.min <= number <= value_range.max):
        return None

    return number


def sanitize_quantity(quantity: str, value: Any) -> Optional[float]:
    """Sanitize a value against the declared range of a named quantity"""
    return sanitize_number(value, QUANTITY_RANGES[quantity])
