"""
Processors Package
Fusion core: value sanitization, consensus blending, EPA AQI and reading merge
"""

from .sanitizer import QUANTITY_RANGES, ValueRange, sanitize_number, sanitize_quantity
from .aqi_calculator import AQIResult, EPAAQICalculator, compute_aqi
from .consensus_blender import BlendResult, ConsensusBlender, blend_values, first_available, values_agree
from .reading_merger import MergedReading, QuantityProvenance, ReadingMerger, merge_readings

__all__ = [
    'QUANTITY_RANGES',
    'ValueRange',
    'sanitize_number',
    'sanitize_quantity',
    'AQIResult',
    'EPAAQICalculator',
    'compute_aqi',
    'BlendResult',
    'ConsensusBlender',
    'blend_values',
    'first_available',
    'values_agree',
    'MergedReading',
    'QuantityProvenance',
    'ReadingMerger',
    'merge_readings',
]
