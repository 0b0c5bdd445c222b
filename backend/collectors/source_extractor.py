"""
Source Value Extractor
Collects per-quantity candidates from source readings in priority order

Candidate order matters: when sources disagree the blender keeps the first
candidate, so the priority lists below decide which source wins a conflict.
"""

from typing import AbstractSet, Callable, Dict, List, Optional, Sequence, Tuple

from .source_readings import Candidate, SourceReading

# Source names as produced by the adapters
METEOSTAT = "Meteostat"
NASA_POWER = "NASA POWER"
NASA_DAYMET = "NASA Daymet"
NASA_IMERG = "NASA IMERG"
NASA_TEMPO = "NASA TEMPO"
OPENAQ = "OpenAQ"
RAPIDAPI_AQ = "RapidAPI AQ"
RAPIDAPI_WEATHER = "RapidAPI Weather"
WEATHERAPI = "WeatherAPI"
CUSTOM_WEATHER = "Custom Weather API"

_WEATHER_PRIORITY = (METEOSTAT, NASA_POWER, RAPIDAPI_WEATHER, WEATHERAPI, CUSTOM_WEATHER)
_GROUND_PRIORITY = (OPENAQ, RAPIDAPI_AQ)
_SATELLITE_PRIORITY = (NASA_TEMPO, OPENAQ, RAPIDAPI_AQ)

QUANTITY_PRIORITIES: Dict[str, Tuple[str, ...]] = {
    'temperature': (METEOSTAT, NASA_POWER, NASA_DAYMET, RAPIDAPI_WEATHER, WEATHERAPI, CUSTOM_WEATHER),
    'humidity': _WEATHER_PRIORITY,
    'wind_speed': _WEATHER_PRIORITY,
    'pm25': _GROUND_PRIORITY,
    'pm10': _GROUND_PRIORITY,
    'no2': _SATELLITE_PRIORITY,
    'ozone': _SATELLITE_PRIORITY,
    'so2': _GROUND_PRIORITY,
    'co': _GROUND_PRIORITY,
    'precipitation': (NASA_IMERG, NASA_POWER),
    # Directly reported overall index, used only as an AQI fallback
    'aqi': _GROUND_PRIORITY,
}

# Quantities taken only from their listed sources; others are ignored
EXCLUSIVE_QUANTITIES = frozenset({'precipitation'})


def kmh_to_ms(value: float) -> float:
    return value / 3.6


# (source, quantity) -> converter into the fused unit
UNIT_CONVERSIONS: Dict[Tuple[str, str], Callable[[float], float]] = {
    (WEATHERAPI, 'wind_speed'): kmh_to_ms,
}


class SourceExtractor:
    """
    Builds candidate lists for each quantity

    Args:
        priorities: Source order per quantity. Sources missing from a list
            are appended after the listed ones, in input order.
        conversions: Unit converters keyed by (source_name, quantity)
        exclusive: Quantities whose priority list is closed; unlisted
            sources never supply them
    """

    def __init__(self,
                 priorities: Optional[Dict[str, Sequence[str]]] = None,
                 conversions: Optional[Dict[Tuple[str, str], Callable[[float], float]]] = None,
                 exclusive: Optional[AbstractSet[str]] = None):
        self.priorities = dict(QUANTITY_PRIORITIES if priorities is None else priorities)
        self.conversions = dict(UNIT_CONVERSIONS if conversions is None else conversions)
        self.exclusive = frozenset(EXCLUSIVE_QUANTITIES if exclusive is None else exclusive)

    def order_readings(self, quantity: str, readings: Sequence[SourceReading]) -> List[SourceReading]:
        """Available readings sorted by the quantity's source priority"""
        rank = {name: i for i, name in enumerate(self.priorities.get(quantity, ()))}
        available = [r for r in readings if r.available]
        if quantity in self.exclusive:
            available = [r for r in available if r.source_name in rank]
        # sorted() is stable, so unlisted sources keep their input order
        return sorted(available, key=lambda r: rank.get(r.source_name, len(rank)))

    def extract(self, quantity: str, readings: Sequence[SourceReading]) -> List[Candidate]:
        """Candidates for one quantity, converted and in priority order"""
        candidates = []
        for reading in self.order_readings(quantity, readings):
            value = reading.get(quantity)
            if value is None:
                continue
            convert = self.conversions.get((reading.source_name, quantity))
            if convert is not None:
                value = convert(value)
            candidates.append(Candidate(value=value, source_name=reading.source_name))
        return candidates
