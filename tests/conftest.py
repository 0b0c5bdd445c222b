"""Shared fixtures for the fusion test suite."""

import sys
import os
from datetime import datetime, timezone

import pytest

# Ensure backend/ is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "backend"))

from collectors.source_readings import SourceReading


FIXED_TIME = datetime(2025, 10, 5, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant."""
    return lambda: FIXED_TIME


@pytest.fixture
def weather_readings():
    """Three weather sources in priority order; the third disagrees."""
    return [
        SourceReading(source_name="Meteostat", temperature=20.0, humidity=60.0, wind_speed=3.0),
        SourceReading(source_name="NASA POWER", temperature=21.0, humidity=62.0, wind_speed=3.2,
                      precipitation=0.0),
        SourceReading(source_name="Custom Weather API", temperature=35.0, humidity=90.0),
    ]


@pytest.fixture
def air_quality_readings():
    """Ground and satellite pollutant sources."""
    return [
        SourceReading(source_name="NASA TEMPO", no2=30.0, ozone=80.0),
        SourceReading(source_name="OpenAQ", pm25=12.0, pm10=40.0, no2=33.0, so2=5.0, co=300.0,
                      city="Brooklyn", country="US", lat=40.69, lng=-73.99),
        SourceReading(source_name="RapidAPI AQ", pm25=13.0, pm10=90.0, ozone=20.0, aqi=57.0),
    ]


@pytest.fixture
def raw_payloads():
    """Already-fetched upstream payloads keyed by source name."""
    return {
        "OpenAQ": {
            "results": [
                {"name": "Empty Station", "parameters": []},
                {
                    "name": "Brooklyn",
                    "country": {"name": "United States"},
                    "coordinates": {"latitude": 40.69, "longitude": -73.99},
                    "parameters": [
                        {"name": "pm25", "lastValue": 10.0, "unit": "µg/m³"},
                        {"name": "pm10", "lastValue": 30.0, "unit": "µg/m³"},
                        {"name": "no2", "lastValue": 25.0, "unit": "µg/m³"},
                        {"name": "o3", "lastValue": "-999", "unit": "µg/m³"},
                    ],
                },
            ]
        },
        "NASA TEMPO": {"no2": 26.0, "ozone": 70.0, "hcho": None, "timestamp": "2025-10-05T12:00:00Z"},
        "NASA Daymet": {"tmax": 24.0, "tmin": 16.0, "prcp": 0.0, "timestamp": "2025-10-05"},
        "NASA IMERG": {"precipitation": 1.5, "timestamp": "2025-10-05T12:00:00Z"},
        "NASA POWER": {"temperature": 19.5, "humidity": 70.0, "windSpeed": 4.0, "precipitation": -999},
        "RapidAPI AQ": {"available": False, "message": "quota exceeded"},
        "RapidAPI Weather": None,
        "WeatherAPI": {"temperature": 21.0, "humidity": 68.0, "wind_speed": 14.4},
        "Custom Weather API": {"error": "timeout"},
        "Meteostat": {"available": True, "temperature": "null", "humidity": " 66 ", "windSpeed": 4.2},
    }
