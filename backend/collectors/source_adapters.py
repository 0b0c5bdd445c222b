#!/usr/bin/env python3
"""
Source Payload Adapters
=======================
Convert already-fetched upstream payloads into typed SourceReading records.

Payload shapes follow the edge functions that proxy each service:
- Meteostat / NASA POWER / Custom Weather: flat temperature, humidity,
  windSpeed, precipitation
- NASA Daymet: daily tmax / tmin / prcp
- NASA IMERG: precipitation
- NASA TEMPO: no2, ozone
- OpenAQ v3: results[].parameters[] {name, lastValue} with station metadata
- RapidAPI air quality: per-pollutant {concentration, aqi} plus overall_aqi
- RapidAPI weather / WeatherAPI: temperature, humidity, wind_speed
  (WeatherAPI wind is km/h; the extractor converts it)

Every number passes through the sanitizer here, so sentinels and junk
strings never reach the fusion core. A missing, failed or "available: false"
payload becomes an unavailable reading.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

from processors.sanitizer import sanitize_number

from .source_extractor import (
    CUSTOM_WEATHER,
    METEOSTAT,
    NASA_DAYMET,
    NASA_IMERG,
    NASA_POWER,
    NASA_TEMPO,
    OPENAQ,
    RAPIDAPI_AQ,
    RAPIDAPI_WEATHER,
    WEATHERAPI,
)
from .source_readings import SourceReading

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]


def _num(payload: Payload, *keys: str) -> Optional[float]:
    """First sanitized value found under any of the keys"""
    for key in keys:
        value = sanitize_number(payload.get(key))
        if value is not None:
            return value
    return None


def _nested(payload: Payload, key: str, inner: str) -> Optional[float]:
    section = payload.get(key)
    if not isinstance(section, Mapping):
        return None
    return sanitize_number(section.get(inner))


def adapt_flat_weather(source_name: str, payload: Payload) -> SourceReading:
    """Meteostat, NASA POWER, Custom Weather and any unknown flat payload"""
    return SourceReading(
        source_name=source_name,
        temperature=_num(payload, 'temperature'),
        humidity=_num(payload, 'humidity'),
        wind_speed=_num(payload, 'windSpeed', 'wind_speed'),
        precipitation=_num(payload, 'precipitation'),
    )


def adapt_daymet(source_name: str, payload: Payload) -> SourceReading:
    tmax = _num(payload, 'tmax')
    tmin = _num(payload, 'tmin')
    temperature = (tmax + tmin) / 2 if tmax is not None and tmin is not None else None
    return SourceReading(
        source_name=source_name,
        temperature=temperature,
        precipitation=_num(payload, 'prcp'),
    )


def adapt_imerg(source_name: str, payload: Payload) -> SourceReading:
    return SourceReading(source_name=source_name, precipitation=_num(payload, 'precipitation'))


def adapt_tempo(source_name: str, payload: Payload) -> SourceReading:
    return SourceReading(
        source_name=source_name,
        no2=_num(payload, 'no2'),
        ozone=_num(payload, 'ozone'),
    )


def adapt_openaq(source_name: str, payload: Payload) -> SourceReading:
    """
    OpenAQ v3 locations response

    Uses the first (nearest) location that carries any parameters.
    """
    results = payload.get('results') or []
    location = next(
        (loc for loc in results if isinstance(loc, Mapping) and loc.get('parameters')),
        None
    )
    if location is None:
        logger.warning(f"⚠️ {source_name}: no locations with measurements")
        return SourceReading.unavailable(source_name)

    measurements: Dict[str, float] = {}
    for parameter in location['parameters']:
        if not isinstance(parameter, Mapping) or not parameter.get('name'):
            continue
        value = sanitize_number(parameter.get('lastValue'))
        if value is not None:
            measurements[str(parameter['name']).lower()] = value

    def first(*names: str) -> Optional[float]:
        return next((measurements[n] for n in names if n in measurements), None)

    coordinates = location.get('coordinates')
    if not isinstance(coordinates, Mapping):
        coordinates = {}
    country = location.get('country')
    if isinstance(country, Mapping):
        country = country.get('name')

    return SourceReading(
        source_name=source_name,
        pm25=first('pm25', 'pm2.5'),
        pm10=first('pm10'),
        no2=first('no2'),
        ozone=first('o3', 'ozone'),
        so2=first('so2'),
        co=first('co'),
        aqi=_num(payload, 'aqi'),
        city=location.get('name') or location.get('city'),
        country=country or None,
        lat=sanitize_number(coordinates.get('latitude')),
        lng=sanitize_number(coordinates.get('longitude')),
    )


def adapt_rapidapi_air_quality(source_name: str, payload: Payload) -> SourceReading:
    return SourceReading(
        source_name=source_name,
        pm25=_nested(payload, 'PM2', 'concentration'),
        pm10=_nested(payload, 'PM10', 'concentration'),
        no2=_nested(payload, 'NO2', 'concentration'),
        ozone=_nested(payload, 'O3', 'concentration'),
        so2=_nested(payload, 'SO2', 'concentration'),
        co=_nested(payload, 'CO', 'concentration'),
        aqi=_num(payload, 'overall_aqi'),
    )


def adapt_rapidapi_weather(source_name: str, payload: Payload) -> SourceReading:
    return SourceReading(
        source_name=source_name,
        temperature=_num(payload, 'temperature'),
        humidity=_num(payload, 'humidity'),
        wind_speed=_num(payload, 'wind_speed'),
    )


ADAPTERS: Dict[str, Callable[[str, Payload], SourceReading]] = {
    METEOSTAT: adapt_flat_weather,
    NASA_POWER: adapt_flat_weather,
    CUSTOM_WEATHER: adapt_flat_weather,
    NASA_DAYMET: adapt_daymet,
    NASA_IMERG: adapt_imerg,
    NASA_TEMPO: adapt_tempo,
    OPENAQ: adapt_openaq,
    RAPIDAPI_AQ: adapt_rapidapi_air_quality,
    RAPIDAPI_WEATHER: adapt_rapidapi_weather,
    WEATHERAPI: adapt_rapidapi_weather,
}


def adapt_source_payload(source_name: str, payload: Any) -> SourceReading:
    """
    Convert one source's payload into a SourceReading

    Args:
        source_name: Source identifier (see ADAPTERS for known shapes)
        payload: Decoded JSON body, or None when the fetch failed

    Returns:
        SourceReading, unavailable if the payload is missing or flagged
    """
    if payload is None:
        return SourceReading.unavailable(source_name)

    if not isinstance(payload, Mapping):
        logger.warning(f"⚠️ {source_name}: expected an object payload, got {type(payload).__name__}")
        return SourceReading.unavailable(source_name)

    if payload.get('error') or payload.get('available') is False:
        logger.info(f"{source_name} unavailable: {payload.get('message') or payload.get('error')}")
        return SourceReading.unavailable(source_name)

    adapter = ADAPTERS.get(source_name, adapt_flat_weather)
    return adapter(source_name, payload)


def build_source_readings(payloads: Mapping[str, Any]) -> List[SourceReading]:
    """Adapt every {source_name: payload} entry, keeping the input order"""
    return [adapt_source_payload(name, payload) for name, payload in payloads.items()]
