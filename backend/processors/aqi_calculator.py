"""
🧮 EPA AQI CALCULATOR
====================
Applies the official EPA AQI formula to fused particulate concentrations.

- EPA breakpoint tables for PM2.5 and PM10 (μg/m³), up to hazardous levels
- Linear interpolation formula: I = ((IHi-ILo)/(BPHi-BPLo)) × (C-BPLo) + ILo
- Dominant pollutant logic (MAX AQI wins, PM2.5 checked first on ties)
- EPA categories, colours and health messages matching AirNow.gov

Concentrations that fall outside every bracket (or into the gaps between
brackets, e.g. 12.05 μg/m³) produce no sub-index for that pollutant.
"""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

# (concentration_lo, concentration_hi, index_lo, index_hi)
Breakpoint = Tuple[float, float, int, int]

PM25_BREAKPOINTS: List[Breakpoint] = [
    (0.0, 12.0, 0, 50),
    (12.1, 35.4, 51, 100),
    (35.5, 55.4, 101, 150),
    (55.5, 150.4, 151, 200),
    (150.5, 250.4, 201, 300),
    (250.5, 350.4, 301, 400),
    (350.5, 500.4, 401, 500),
]

PM10_BREAKPOINTS: List[Breakpoint] = [
    (0, 54, 0, 50),
    (55, 154, 51, 100),
    (155, 254, 101, 150),
    (255, 354, 151, 200),
    (355, 424, 201, 300),
    (425, 504, 301, 400),
    (505, 604, 401, 500),
]

# (upper AQI bound, category)
AQI_CATEGORIES: List[Tuple[int, str]] = [
    (50, "Good"),
    (100, "Moderate"),
    (150, "Unhealthy for Sensitive Groups"),
    (200, "Unhealthy"),
    (300, "Very Unhealthy"),
]
HAZARDOUS = "Hazardous"

# EPA color codes
AQI_COLORS: Dict[str, str] = {
    "Good": "#00E400",
    "Moderate": "#FFFF00",
    "Unhealthy for Sensitive Groups": "#FF7E00",
    "Unhealthy": "#FF0000",
    "Very Unhealthy": "#8F3F97",
    "Hazardous": "#7E0023"
}

# EPA health messages
HEALTH_MESSAGES: Dict[str, str] = {
    "Good": "Air quality is satisfactory for most people.",
    "Moderate": "Unusually sensitive people should consider reducing prolonged outdoor exertion.",
    "Unhealthy for Sensitive Groups": "Sensitive groups may experience health effects. The general public is less likely to be affected.",
    "Unhealthy": "Everyone may experience health effects. Sensitive groups may experience more serious effects.",
    "Very Unhealthy": "Health alert for everyone. Serious health effects for everyone.",
    "Hazardous": "Emergency conditions. Everyone is more likely to be affected."
}


@dataclass(frozen=True)
class AQIResult:
    """Overall AQI and the pollutant that drove it"""
    aqi: Optional[int]
    dominant_pollutant: Optional[str]  # "PM2.5" | "PM10" | None


class EPAAQICalculator:
    """
    EPA AQI calculator for particulate matter
    """

    def __init__(self):
        # Checked in this order; the first entry wins ties
        self.epa_breakpoints: Dict[str, List[Breakpoint]] = {
            "PM2.5": PM25_BREAKPOINTS,
            "PM10": PM10_BREAKPOINTS,
        }

    def calculate_pollutant_aqi(self, concentration: Optional[float], pollutant: str) -> Optional[int]:
        """
        Sub-index for a single pollutant concentration

        Returns None when the concentration is missing or matches no bracket
        """
        if concentration is None:
            return None

        for bp_lo, bp_hi, aqi_lo, aqi_hi in self.epa_breakpoints[pollutant]:
            if bp_lo <= concentration <= bp_hi:
                aqi = ((aqi_hi - aqi_lo) / (bp_hi - bp_lo)) * (concentration - bp_lo) + aqi_lo
                # Halves round up
                return int(math.floor(aqi + 0.5))

        return None

    def compute_aqi(self, pm25: Optional[float], pm10: Optional[float]) -> AQIResult:
        """
        Overall AQI from PM2.5 and PM10

        The larger sub-index wins and names the dominant pollutant.
        """
        concentrations = {"PM2.5": pm25, "PM10": pm10}

        best_aqi = None
        dominant = None
        for pollutant in self.epa_breakpoints:
            aqi = self.calculate_pollutant_aqi(concentrations[pollutant], pollutant)
            if aqi is not None and (best_aqi is None or aqi > best_aqi):
                best_aqi = aqi
                dominant = pollutant

        return AQIResult(aqi=best_aqi, dominant_pollutant=dominant)

    def get_category(self, aqi: Optional[float]) -> Optional[str]:
        """EPA category name for an AQI value"""
        if aqi is None:
            return None
        for upper, category in AQI_CATEGORIES:
            if aqi <= upper:
                return category
        return HAZARDOUS

    def get_color(self, aqi: Optional[float]) -> Optional[str]:
        category = self.get_category(aqi)
        return AQI_COLORS[category] if category else None

    def get_health_message(self, aqi: Optional[float]) -> Optional[str]:
        category = self.get_category(aqi)
        return HEALTH_MESSAGES[category] if category else None


_calculator = EPAAQICalculator()


def compute_aqi(pm25: Optional[float], pm10: Optional[float]) -> AQIResult:
    """Module-level shortcut around the shared calculator"""
    return _calculator.compute_aqi(pm25, pm10)
