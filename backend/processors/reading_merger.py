#!/usr/bin/env python3
"""
🔬 MULTI-SOURCE READING MERGER
=============================
Fuses up to ten partially-overlapping sources into one reading for a point.

FUSION STRATEGY:
- Weather (temperature, humidity, wind): consensus blend across weather feeds
- Pollutants (PM2.5, PM10, NO₂, O₃, SO₂, CO): consensus blend across
  satellite and ground networks
- Precipitation: first available of NASA IMERG, then NASA POWER

After blending, every value is sanitized against its physical range and the
EPA AQI is computed from the fused PM2.5/PM10. When that yields nothing, an
overall index reported directly by a ground network is used instead, and
the reading records which path was taken.

The merger never raises and never fetches anything: unknown values stay
None until the final assembly step.
"""

import logging
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from collectors.source_extractor import SourceExtractor
from collectors.source_readings import QUANTITIES, QUANTITY_UNITS, SourceReading
from processors.aqi_calculator import EPAAQICalculator
from processors.consensus_blender import (
    DEFAULT_AGREEMENT_THRESHOLD,
    BlendResult,
    ConsensusBlender,
    contributing_sources,
    first_available,
)
from processors.sanitizer import QUANTITY_RANGES, sanitize_number

logger = logging.getLogger(__name__)

DEFAULT_LOCATION_NAME = "Unknown Location"

# Quantities that take the first available value instead of a consensus blend
FIRST_AVAILABLE_QUANTITIES = frozenset({'precipitation'})

# Keyword -> display label, checked in order
SOURCE_LABEL_KEYWORDS: Tuple[Tuple[str, str], ...] = (
    ("RapidAPI", "RapidAPI"),
    ("WeatherAPI", "WeatherAPI"),
    ("Meteostat", "Meteostat"),
    ("NASA", "NASA"),
    ("OpenAQ", "OpenAQ"),
)

# AQI paths
AQI_COMPUTED = "computed"
AQI_REPORTED = "reported"


@dataclass(frozen=True)
class QuantityProvenance:
    """How one quantity's final value was reached"""
    quantity: str
    value: Optional[float]          # None when unknown
    method: str
    sources: Tuple[str, ...] = ()
    agreeing_sources: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'value': self.value,
            'unit': QUANTITY_UNITS[self.quantity],
            'method': self.method,
            'sources': list(self.sources),
            'agreeing_sources': list(self.agreeing_sources),
        }


@dataclass(frozen=True)
class MergedReading:
    """Consensus reading for one location"""
    city: str
    country: str
    lat: Optional[float]
    lng: Optional[float]
    temperature: float
    humidity: float
    wind_speed: float
    pm25: float
    pm10: float
    no2: float
    ozone: float
    so2: float
    co: float
    precipitation: float
    aqi: Optional[int]
    dominant_pollutant: Optional[str]
    condition: str
    data_source_label: str
    generated_at: datetime
    aqi_category: Optional[str] = None
    aqi_color: Optional[str] = None
    health_message: Optional[str] = None
    aqi_method: Optional[str] = None
    aqi_source: Optional[str] = None
    provenance: Dict[str, QuantityProvenance] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready shape consumed by the presentation and report layers"""
        return {
            'city': self.city,
            'country': self.country,
            'lat': self.lat,
            'lng': self.lng,
            'aqi': self.aqi,
            'aqi_category': self.aqi_category,
            'aqi_color': self.aqi_color,
            'health_message': self.health_message,
            'dominant_pollutant': self.dominant_pollutant,
            'aqi_method': self.aqi_method,
            'aqi_source': self.aqi_source,
            'pollutants': {
                'pm25': self.pm25,
                'pm10': self.pm10,
                'no2': self.no2,
                'ozone': self.ozone,
                'so2': self.so2,
                'co': self.co,
            },
            'weather': {
                'temperature': self.temperature,
                'humidity': self.humidity,
                'wind_speed': self.wind_speed,
                'precipitation': self.precipitation,
                'condition': self.condition,
            },
            'data_source': self.data_source_label,
            'generated_at': self.generated_at.isoformat(),
            'provenance': {name: p.to_dict() for name, p in self.provenance.items()},
        }


def simplify_source_name(name: str) -> str:
    """Collapse a source name to its display family (e.g. any NASA product -> NASA)"""
    for keyword, label in SOURCE_LABEL_KEYWORDS:
        if keyword in name:
            return label
    return name


def build_source_label(source_names: Sequence[str], blended: bool) -> str:
    """Deduplicated ' + ' join of source families, marked when consensus happened"""
    labels = []
    for name in source_names:
        label = simplify_source_name(name)
        if label not in labels:
            labels.append(label)

    label = " + ".join(labels)
    if label and blended:
        label = f"{label} (blended)"
    return label


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ReadingMerger:
    """
    Merges source readings into a single MergedReading

    Args:
        threshold: Relative agreement tolerance for the consensus blend
        extractor: Candidate extractor (source priorities, unit conversions)
        clock: Returns the timestamp stamped on each result
    """

    def __init__(self,
                 threshold: float = DEFAULT_AGREEMENT_THRESHOLD,
                 extractor: Optional[SourceExtractor] = None,
                 clock: Callable[[], datetime] = _utc_now):
        self.blender = ConsensusBlender(threshold)
        self.extractor = extractor or SourceExtractor()
        self.calculator = EPAAQICalculator()
        self.clock = clock

    def blend_quantity(self, quantity: str, readings: Sequence[SourceReading]) -> BlendResult:
        candidates = self.extractor.extract(quantity, readings)
        if quantity in FIRST_AVAILABLE_QUANTITIES:
            return first_available(candidates)
        return self.blender.blend(candidates)

    def resolve_reported_aqi(self, readings: Sequence[SourceReading]) -> Tuple[Optional[int], Optional[str]]:
        """First usable overall index reported directly by a source"""
        for candidate in self.extractor.extract('aqi', readings):
            value = sanitize_number(candidate.value, QUANTITY_RANGES['aqi'])
            if value:
                return int(math.floor(value + 0.5)), candidate.source_name
        return None, None

    def resolve_location(self, readings: Sequence[SourceReading],
                         city: Optional[str], country: Optional[str],
                         lat: Optional[float], lng: Optional[float]) -> Tuple[str, str, Optional[float], Optional[float]]:
        """Caller-supplied location, falling back to the first station that reports one"""
        station = next((r for r in readings if r.has_location()), None)
        if station is not None:
            city = city or station.city
            country = country if country is not None else station.country
            lat = lat if lat is not None else station.lat
            lng = lng if lng is not None else station.lng
        return city or DEFAULT_LOCATION_NAME, country or "", lat, lng

    def merge(self, source_readings: Sequence[SourceReading], city: Optional[str] = None, *,
              country: Optional[str] = None, lat: Optional[float] = None,
              lng: Optional[float] = None) -> MergedReading:
        """
        Fuse source readings into one consensus reading

        Args:
            source_readings: One record per source (unavailable ones are ignored)
            city: Display name for the location (passed through)
            country, lat, lng: Location metadata (passed through)

        Returns:
            MergedReading with unknown quantities reported as 0 and the
            per-quantity provenance keeping them as None
        """
        results: Dict[str, BlendResult] = {}
        values: Dict[str, Optional[float]] = {}
        provenance: Dict[str, QuantityProvenance] = {}

        for quantity in QUANTITIES:
            result = self.blend_quantity(quantity, source_readings)
            value = sanitize_number(result.value, QUANTITY_RANGES[quantity])
            results[quantity] = result
            values[quantity] = value
            provenance[quantity] = QuantityProvenance(
                quantity=quantity,
                value=value,
                method=result.method,
                sources=result.sources,
                agreeing_sources=result.agreeing_sources,
            )

        used_sources = contributing_sources(list(results.values()))
        blended = any(result.is_consensus for result in results.values())

        precipitation = values['precipitation']
        condition = "Rainy" if precipitation is not None and precipitation > 0 else "Clear"

        aqi_result = self.calculator.compute_aqi(values['pm25'], values['pm10'])
        aqi = aqi_result.aqi
        dominant = aqi_result.dominant_pollutant
        aqi_method = AQI_COMPUTED if aqi is not None else None
        aqi_source = None

        if not aqi:
            reported, reporter = self.resolve_reported_aqi(source_readings)
            if reported is not None:
                aqi, dominant = reported, None
                aqi_method, aqi_source = AQI_REPORTED, reporter
                if reporter not in used_sources:
                    used_sources.append(reporter)

        city, country, lat, lng = self.resolve_location(source_readings, city, country, lat, lng)
        label = build_source_label(used_sources, blended)

        logger.info(f"🔬 Merged {len(used_sources)} source(s) for {city}: "
                    f"AQI={aqi} ({aqi_method or 'unavailable'}), sources='{label}'")

        # Terminal assembly: unknown quantities are reported as 0
        assembled = {q: (v if v is not None else 0) for q, v in values.items()}

        return MergedReading(
            city=city,
            country=country,
            lat=lat,
            lng=lng,
            aqi=aqi,
            dominant_pollutant=dominant,
            condition=condition,
            data_source_label=label,
            generated_at=self.clock(),
            aqi_category=self.calculator.get_category(aqi),
            aqi_color=self.calculator.get_color(aqi),
            health_message=self.calculator.get_health_message(aqi),
            aqi_method=aqi_method,
            aqi_source=aqi_source,
            provenance=provenance,
            **assembled,
        )


def merge_readings(source_readings: Sequence[SourceReading], city: Optional[str] = None, *,
                   country: Optional[str] = None, lat: Optional[float] = None,
                   lng: Optional[float] = None,
                   threshold: float = DEFAULT_AGREEMENT_THRESHOLD) -> MergedReading:
    """Merge with the default source priorities"""
    return ReadingMerger(threshold).merge(source_readings, city, country=country, lat=lat, lng=lng)
