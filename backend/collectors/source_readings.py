"""
Source Reading Records
Typed records handed from each source adapter to the fusion core
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, NamedTuple, Optional

# Fused quantities, in the order they are merged and reported
QUANTITIES = (
    'temperature',
    'humidity',
    'wind_speed',
    'pm25',
    'pm10',
    'no2',
    'ozone',
    'so2',
    'co',
    'precipitation',
)

QUANTITY_UNITS = {
    'temperature': '°C',
    'humidity': '%',
    'wind_speed': 'm/s',
    'pm25': 'μg/m³',
    'pm10': 'μg/m³',
    'no2': 'μg/m³',
    'ozone': 'μg/m³',
    'so2': 'μg/m³',
    'co': 'μg/m³',
    'precipitation': 'mm',
}


@dataclass(frozen=True)
class SourceReading:
    """
    One source's contribution for one fetch cycle.

    Every value is optional. wind_speed is in the unit the source reports;
    the extractor normalizes it. aqi is an overall index reported directly
    by the source, if any. city/country/lat/lng describe the station for
    ground-network sources and are only used as a location fallback.
    """
    source_name: str
    available: bool = True
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    wind_speed: Optional[float] = None
    pm25: Optional[float] = None
    pm10: Optional[float] = None
    no2: Optional[float] = None
    ozone: Optional[float] = None
    so2: Optional[float] = None
    co: Optional[float] = None
    precipitation: Optional[float] = None
    aqi: Optional[float] = None
    city: Optional[str] = None
    country: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    @classmethod
    def unavailable(cls, source_name: str) -> 'SourceReading':
        """Placeholder for a source that failed or returned nothing"""
        return cls(source_name=source_name, available=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SourceReading':
        """Build a reading from a plain dict, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def get(self, quantity: str) -> Optional[float]:
        return getattr(self, quantity)

    def has_location(self) -> bool:
        return self.available and (self.city is not None or self.lat is not None)


class Candidate(NamedTuple):
    """One source's proposed value for one quantity"""
    value: float
    source_name: str
