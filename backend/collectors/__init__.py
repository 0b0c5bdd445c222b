"""
Collectors Package
Typed source readings, payload adapters and per-quantity candidate extraction
"""

from .source_readings import QUANTITIES, Candidate, SourceReading
from .source_extractor import EXCLUSIVE_QUANTITIES, QUANTITY_PRIORITIES, UNIT_CONVERSIONS, SourceExtractor
from .source_adapters import ADAPTERS, adapt_source_payload, build_source_readings

__all__ = [
    'QUANTITIES',
    'Candidate',
    'SourceReading',
    'EXCLUSIVE_QUANTITIES',
    'QUANTITY_PRIORITIES',
    'UNIT_CONVERSIONS',
    'SourceExtractor',
    'ADAPTERS',
    'adapt_source_payload',
    'build_source_readings',
]
