"""
Fusion Report Tables
Tabular views of a merged reading for report and audit consumers
"""

from typing import List, Tuple

import pandas as pd

from collectors.source_readings import QUANTITY_UNITS
from processors.reading_merger import MergedReading

PROVENANCE_COLUMNS = ['quantity', 'value', 'unit', 'method', 'sources', 'agreeing_sources']

# (quantity, pollutant label, limit μg/m³, averaging period, health effects)
WHO_GUIDELINES: List[Tuple[str, str, float, str, str]] = [
    ('no2', 'NO₂ (Nitrogen Dioxide)', 40.0, 'annual', 'Respiratory irritation, reduced lung function'),
    ('pm25', 'PM2.5 (Fine Particulate Matter)', 15.0, 'annual', 'Cardiovascular and respiratory diseases'),
    ('ozone', 'O₃ (Ozone)', 100.0, '8-hour', 'Breathing problems, aggravates asthma'),
]


def provenance_frame(merged: MergedReading) -> pd.DataFrame:
    """One row per quantity: final value (NaN when unknown), blend method and sources"""
    rows = []
    for quantity, record in merged.provenance.items():
        rows.append({
            'quantity': quantity,
            'value': record.value,
            'unit': QUANTITY_UNITS[quantity],
            'method': record.method,
            'sources': ' + '.join(record.sources),
            'agreeing_sources': ' + '.join(record.agreeing_sources),
        })
    return pd.DataFrame(rows, columns=PROVENANCE_COLUMNS)


def guideline_frame(merged: MergedReading) -> pd.DataFrame:
    """
    Compare fused pollutant levels with WHO guideline limits

    `exceeds` is None when the pollutant is unknown for this reading.
    """
    rows = []
    for quantity, pollutant, limit, period, health in WHO_GUIDELINES:
        record = merged.provenance.get(quantity)
        value = record.value if record is not None else None
        rows.append({
            'pollutant': pollutant,
            'value': value,
            'limit': limit,
            'period': period,
            'exceeds': None if value is None else value > limit,
            'health': health,
        })
    return pd.DataFrame(rows)
